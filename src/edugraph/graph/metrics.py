"""Graph statistics for panel headers, footers and monitoring."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, field

from edugraph.models import ConceptEdge, ConceptNode, GraphSnapshot, ViewMode

logger = logging.getLogger(__name__)


@dataclass
class StructuralMetrics:
    """Structural metrics for a snapshot."""

    total_concepts: int = 0
    total_edges: int = 0
    orphaned_concepts: int = 0  # Concepts with no edges
    root_concepts: int = 0  # Concepts that are nobody's target
    avg_degree: float = 0.0
    max_degree: int = 0

    concepts_by_category: dict[str, int] = field(default_factory=dict)
    edges_by_type: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "total_concepts": self.total_concepts,
            "total_edges": self.total_edges,
            "orphaned_concepts": self.orphaned_concepts,
            "root_concepts": self.root_concepts,
            "avg_degree": self.avg_degree,
            "max_degree": self.max_degree,
            "concepts_by_category": dict(self.concepts_by_category),
            "edges_by_type": dict(self.edges_by_type),
        }


@dataclass(frozen=True)
class ViewStats:
    """Text shown around the graph panel for the current view."""

    mode: ViewMode
    node_count: int
    edge_count: int
    focus_label: str | None = None

    @property
    def title(self) -> str:
        return "Course Overview" if self.mode is ViewMode.OVERVIEW else "Detailed View"

    @property
    def summary(self) -> str:
        noun = "main concepts" if self.mode is ViewMode.OVERVIEW else "related concepts"
        return f"{self.node_count} {noun} • {self.edge_count} connections"

    @property
    def exploring(self) -> str | None:
        if self.mode is ViewMode.DETAIL and self.focus_label:
            return f"Exploring: {self.focus_label}"
        return None

    def to_dict(self) -> dict:
        return {
            "mode": self.mode.value,
            "title": self.title,
            "summary": self.summary,
            "exploring": self.exploring,
            "node_count": self.node_count,
            "edge_count": self.edge_count,
        }


def compute_structural_metrics(snapshot: GraphSnapshot) -> StructuralMetrics:
    """Compute structural metrics from an in-memory snapshot."""
    metrics = StructuralMetrics(
        total_concepts=len(snapshot.nodes),
        total_edges=len(snapshot.edges),
    )
    if snapshot.is_empty:
        return metrics

    degrees = dict(snapshot.undirected.degree())
    metrics.orphaned_concepts = sum(1 for d in degrees.values() if d == 0)
    metrics.root_concepts = sum(1 for nid in snapshot.nodes if nid not in snapshot.target_ids)
    metrics.avg_degree = sum(degrees.values()) / len(degrees)
    metrics.max_degree = max(degrees.values())

    metrics.concepts_by_category = dict(Counter(node.category for node in snapshot))
    metrics.edges_by_type = dict(Counter(edge.type for edge in snapshot.edges))

    logger.debug(
        f"Snapshot metrics: {metrics.total_concepts} concepts, "
        f"{metrics.orphaned_concepts} orphaned, max degree {metrics.max_degree}"
    )
    return metrics


def compute_view_stats(
    nodes: Sequence[ConceptNode],
    edges: Sequence[ConceptEdge],
    mode: ViewMode,
    focus: ConceptNode | None = None,
) -> ViewStats:
    """Counts and labels for the active view."""
    return ViewStats(
        mode=mode,
        node_count=len(nodes),
        edge_count=len(edges),
        focus_label=focus.label if focus else None,
    )
