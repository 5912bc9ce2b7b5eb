"""Derived graph views: first-order overview, two-hop detail and text search.

Both views are pure functions of a snapshot, so the same inputs always
yield the same node and edge sequences.
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

import networkx as nx

from edugraph.config import settings
from edugraph.models import ConceptEdge, ConceptNode, GraphSnapshot, ViewState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Neighborhood:
    """Nodes and edges within a fixed hop radius of a focus concept."""

    focus_id: str | None = None
    nodes: tuple[ConceptNode, ...] = ()
    edges: tuple[ConceptEdge, ...] = ()
    hops: dict[str, int] = field(default_factory=dict)  # node id -> hop distance

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    @property
    def node_ids(self) -> frozenset[str]:
        return frozenset(node.id for node in self.nodes)


def is_first_order(
    node: ConceptNode,
    target_ids: frozenset[str] | set[str],
    size_threshold: float,
) -> bool:
    """A concept is first-order if it is a root, a prerequisite, or heavy enough."""
    has_no_incoming = node.id not in target_ids
    is_prerequisite = node.category == "prerequisite"
    is_large = node.size >= size_threshold
    return has_no_incoming or is_prerequisite or is_large


def compute_first_order_nodes(
    snapshot: GraphSnapshot,
    size_threshold: float | None = None,
) -> list[ConceptNode]:
    """
    Select the top-level concepts shown in overview mode.

    Args:
        snapshot: Graph to select from
        size_threshold: Visual weight at or above which a node always qualifies

    Returns:
        Qualifying nodes sorted by size, largest first. Ties keep snapshot
        order (list.sort is stable).
    """
    if size_threshold is None:
        size_threshold = settings.first_order_size_threshold

    target_ids = snapshot.target_ids
    first_order = [
        node for node in snapshot if is_first_order(node, target_ids, size_threshold)
    ]
    first_order.sort(key=lambda node: node.size, reverse=True)
    return first_order


def filter_edges_within_node_set(
    edges: Iterable[ConceptEdge],
    node_ids: Iterable[str],
) -> list[ConceptEdge]:
    """Keep edges whose endpoints both lie in node_ids."""
    allowed = node_ids if isinstance(node_ids, (set, frozenset)) else set(node_ids)
    return [edge for edge in edges if edge.source in allowed and edge.target in allowed]


def filter_nodes_by_text(
    nodes: Iterable[ConceptNode],
    term: str | None,
) -> list[ConceptNode]:
    """
    Keep nodes whose label or description contains term, ignoring case.

    An empty term keeps every node.
    """
    if not term:
        return list(nodes)
    needle = term.lower()
    return [
        node for node in nodes
        if needle in node.label.lower() or needle in node.description.lower()
    ]


def compute_neighborhood(
    snapshot: GraphSnapshot,
    focus_id: str,
    hops: int | None = None,
) -> Neighborhood:
    """
    Expand breadth-first from focus_id, ignoring edge direction.

    Hop 1 is the focus plus every directly linked node; hop 2 adds every
    node linked to a hop-1 node. A focus id missing from the snapshot yields
    an empty neighbourhood rather than an error.
    """
    if hops is None:
        hops = settings.neighborhood_hops

    if focus_id not in snapshot:
        logger.debug(f"Focus node {focus_id!r} not in snapshot, empty neighbourhood")
        return Neighborhood(focus_id=focus_id)

    distances: dict[str, int] = nx.single_source_shortest_path_length(
        snapshot.undirected, focus_id, cutoff=hops
    )

    nodes = tuple(node for node in snapshot if node.id in distances)
    edges = tuple(filter_edges_within_node_set(snapshot.edges, distances.keys()))

    logger.debug(
        f"Neighbourhood of {focus_id!r}: {len(nodes)} nodes, {len(edges)} edges"
    )

    return Neighborhood(
        focus_id=focus_id,
        nodes=nodes,
        edges=edges,
        hops=dict(distances),
    )


def build_view(
    snapshot: GraphSnapshot,
    view: ViewState,
    size_threshold: float | None = None,
    hops: int | None = None,
    search: str | None = None,
) -> tuple[list[ConceptNode], list[ConceptEdge]]:
    """
    Return the (nodes, edges) displayed for a view state.

    A search term narrows the view to matching concepts and the edges
    between them.
    """
    if view.is_overview:
        nodes = compute_first_order_nodes(snapshot, size_threshold)
    elif view.focus_node_id is None:
        return [], []
    else:
        nodes = list(compute_neighborhood(snapshot, view.focus_node_id, hops).nodes)

    nodes = filter_nodes_by_text(nodes, search)
    edges = filter_edges_within_node_set(snapshot.edges, {node.id for node in nodes})
    return nodes, edges


def first_order_ranks(first_order: Sequence[ConceptNode]) -> dict[str, int]:
    """Index of each node in the sorted first-order sequence."""
    return {node.id: rank for rank, node in enumerate(first_order)}
