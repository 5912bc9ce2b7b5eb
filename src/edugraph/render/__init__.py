"""Drawing-surface data: node/edge styling, render scenes and the timeline."""

from edugraph.render.scene import RenderEdge, RenderNode, RenderScene, build_scene
from edugraph.render.style import color_for, edge_width, node_radius
from edugraph.render.timeline import (
    ConceptSummary,
    TimelineMarker,
    active_concepts,
    build_markers,
    format_time,
    time_at_fraction,
    timeline_payload,
)

__all__ = [
    "RenderEdge",
    "RenderNode",
    "RenderScene",
    "build_scene",
    "color_for",
    "edge_width",
    "node_radius",
    "ConceptSummary",
    "TimelineMarker",
    "active_concepts",
    "build_markers",
    "format_time",
    "time_at_fraction",
    "timeline_payload",
]
