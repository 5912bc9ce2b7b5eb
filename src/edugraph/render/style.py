"""Visual encoding of concepts and relationships."""

import math

from edugraph.models import ConceptEdge, ConceptNode, ViewMode

CATEGORY_COLORS: dict[str, str] = {
    "definition": "#3b82f6",
    "example": "#10b981",
    "application": "#f59e0b",
    "prerequisite": "#8b5cf6",
}
DEFAULT_NODE_COLOR = "#94a3b8"
ACTIVE_NODE_COLOR = "#ef4444"
ACCENT_COLOR = "#ec4899"  # Selected concept
BORDER_COLOR = "#1e293b"

EDGE_COLOR = "#64748b"
ACTIVE_EDGE_COLOR = ACTIVE_NODE_COLOR
EDGE_OPACITY = 0.6
ACTIVE_EDGE_OPACITY = 0.9

OVERVIEW_MIN_RADIUS = 15.0
OVERVIEW_RADIUS_FACTOR = 1.5
LABEL_GAP = 15.0


def color_for(category: str) -> str:
    """Fill colour for a concept category."""
    return CATEGORY_COLORS.get(category, DEFAULT_NODE_COLOR)


def node_radius(node: ConceptNode, mode: ViewMode) -> float:
    """Overview circles are enlarged so main concepts stay legible."""
    if mode is ViewMode.OVERVIEW:
        return max(OVERVIEW_MIN_RADIUS, node.size * OVERVIEW_RADIUS_FACTOR)
    return node.size


def node_fill(node: ConceptNode, selected_id: str | None = None) -> str:
    if node.is_active:
        return ACTIVE_NODE_COLOR
    if node.id == selected_id:
        return ACCENT_COLOR
    return color_for(node.category)


def node_stroke_width(node: ConceptNode, mode: ViewMode, selected_id: str | None = None) -> float:
    if node.id == selected_id:
        return 3.0
    return 2.0 if mode is ViewMode.OVERVIEW else 1.0


def node_opacity(node: ConceptNode) -> float:
    return 1.0 if node.is_active else 0.8


def edge_width(edge: ConceptEdge) -> float:
    return math.sqrt(edge.strength * 3)


def label_font_size(mode: ViewMode) -> float:
    return 14.0 if mode is ViewMode.OVERVIEW else 12.0


def label_offset(node: ConceptNode, mode: ViewMode) -> float:
    """Label baseline below the node centre."""
    return node_radius(node, mode) + LABEL_GAP
