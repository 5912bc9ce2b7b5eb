"""Render scene: everything a drawing surface needs for one frame.

A scene is a plain snapshot of the current view, positions and styling.
It holds no references back into the session, so a renderer may keep it
around while the layout moves on.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from edugraph.graph import ViewStats, compute_view_stats
from edugraph.models import ConceptEdge, ConceptNode, ViewState, ZoomTransform
from edugraph.render import style


@dataclass(frozen=True)
class RenderNode:
    id: str
    label: str
    category: str
    x: float  # model space
    y: float
    radius: float
    fill: str
    stroke: str
    stroke_width: float
    opacity: float
    label_size: float
    label_dy: float
    is_active: bool = False
    is_selected: bool = False
    is_pinned: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "label": self.label,
            "category": self.category,
            "x": self.x,
            "y": self.y,
            "radius": self.radius,
            "fill": self.fill,
            "stroke": self.stroke,
            "strokeWidth": self.stroke_width,
            "opacity": self.opacity,
            "labelSize": self.label_size,
            "labelDy": self.label_dy,
            "isActive": self.is_active,
            "isSelected": self.is_selected,
            "isPinned": self.is_pinned,
        }


@dataclass(frozen=True)
class RenderEdge:
    source: str
    target: str
    type: str
    x1: float
    y1: float
    x2: float
    y2: float
    width: float
    color: str
    opacity: float
    is_active: bool = False  # Either endpoint is active

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "target": self.target,
            "type": self.type,
            "x1": self.x1,
            "y1": self.y1,
            "x2": self.x2,
            "y2": self.y2,
            "width": self.width,
            "color": self.color,
            "opacity": self.opacity,
            "isActive": self.is_active,
        }


@dataclass(frozen=True)
class RenderScene:
    view: ViewState
    transform: ZoomTransform
    nodes: tuple[RenderNode, ...]
    edges: tuple[RenderEdge, ...]
    stats: ViewStats

    def node(self, node_id: str) -> RenderNode | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def to_dict(self) -> dict:
        return {
            "view": self.view.to_dict(),
            "transform": self.transform.to_dict(),
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
            "stats": self.stats.to_dict(),
        }


def build_scene(
    nodes: Sequence[ConceptNode],
    edges: Sequence[ConceptEdge],
    positions: Mapping[str, tuple[float, float]],
    view: ViewState,
    transform: ZoomTransform,
    pinned: frozenset[str] | set[str] = frozenset(),
    focus: ConceptNode | None = None,
) -> RenderScene:
    """
    Style the current view for drawing.

    Nodes without a position (not yet laid out) are skipped, and so are
    edges touching them.
    """
    mode = view.mode
    selected = view.selected_node_id

    render_nodes: list[RenderNode] = []
    active: set[str] = set()
    for node in nodes:
        point = positions.get(node.id)
        if point is None:
            continue
        if node.is_active:
            active.add(node.id)
        render_nodes.append(
            RenderNode(
                id=node.id,
                label=node.label,
                category=node.category,
                x=point[0],
                y=point[1],
                radius=style.node_radius(node, mode),
                fill=style.node_fill(node, selected),
                stroke=style.BORDER_COLOR,
                stroke_width=style.node_stroke_width(node, mode, selected),
                opacity=style.node_opacity(node),
                label_size=style.label_font_size(mode),
                label_dy=style.label_offset(node, mode),
                is_active=node.is_active,
                is_selected=node.id == selected,
                is_pinned=node.id in pinned,
            )
        )

    render_edges: list[RenderEdge] = []
    for edge in edges:
        start, end = positions.get(edge.source), positions.get(edge.target)
        if start is None or end is None:
            continue
        is_active = edge.source in active or edge.target in active
        render_edges.append(
            RenderEdge(
                source=edge.source,
                target=edge.target,
                type=edge.type,
                x1=start[0],
                y1=start[1],
                x2=end[0],
                y2=end[1],
                width=style.edge_width(edge),
                color=style.ACTIVE_EDGE_COLOR if is_active else style.EDGE_COLOR,
                opacity=style.ACTIVE_EDGE_OPACITY if is_active else style.EDGE_OPACITY,
                is_active=is_active,
            )
        )

    return RenderScene(
        view=view,
        transform=transform,
        nodes=tuple(render_nodes),
        edges=tuple(render_edges),
        stats=compute_view_stats(nodes, edges, mode, focus),
    )
