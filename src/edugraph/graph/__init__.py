"""Concept graph views for the lecture graph.

Provides:
- First-order (overview) concept selection
- Two-hop neighbourhood expansion (detail view)
- Text search over labels and descriptions
- Edge filtering shared by both views
- Snapshot and view statistics
"""

from edugraph.graph.metrics import (
    StructuralMetrics,
    ViewStats,
    compute_structural_metrics,
    compute_view_stats,
)
from edugraph.graph.views import (
    Neighborhood,
    build_view,
    compute_first_order_nodes,
    compute_neighborhood,
    filter_edges_within_node_set,
    filter_nodes_by_text,
    first_order_ranks,
)

__all__ = [
    # Views
    "Neighborhood",
    "build_view",
    "compute_first_order_nodes",
    "compute_neighborhood",
    "filter_edges_within_node_set",
    "filter_nodes_by_text",
    "first_order_ranks",
    # Metrics
    "StructuralMetrics",
    "ViewStats",
    "compute_structural_metrics",
    "compute_view_stats",
]
