"""Graph snapshot - one immutable {nodes, edges} graph per processed video."""

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from functools import cached_property
from types import MappingProxyType
from typing import Any

import networkx as nx

from edugraph.models.concept import ConceptEdge, ConceptNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class GraphSnapshot:
    """
    Immutable graph received wholesale from the processing collaborator.

    Node order is the order of the payload; views that sort rely on it
    for stable tie-breaking.
    """

    nodes: Mapping[str, ConceptNode] = field(default_factory=dict)
    edges: tuple[ConceptEdge, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.nodes, MappingProxyType):
            object.__setattr__(self, "nodes", MappingProxyType(dict(self.nodes)))
        object.__setattr__(self, "edges", tuple(self.edges))

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.nodes

    def __iter__(self) -> Iterator[ConceptNode]:
        return iter(self.nodes.values())

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def get(self, node_id: str) -> ConceptNode | None:
        return self.nodes.get(node_id)

    def node_list(self) -> list[ConceptNode]:
        return list(self.nodes.values())

    @cached_property
    def target_ids(self) -> frozenset[str]:
        """Ids referenced as the target of any edge."""
        return frozenset(edge.target for edge in self.edges)

    @cached_property
    def undirected(self) -> nx.Graph:
        """Undirected view used for neighbourhood expansion."""
        graph = nx.Graph()
        graph.add_nodes_from(self.nodes)
        graph.add_edges_from((edge.source, edge.target) for edge in self.edges)
        return graph

    def to_dict(self) -> dict:
        """Convert back to the GraphPayload shape."""
        return {
            "nodes": [node.to_dict() for node in self.nodes.values()],
            "edges": [edge.to_dict() for edge in self.edges],
        }

    @classmethod
    def from_parts(
        cls, nodes: Iterable[ConceptNode], edges: Iterable[ConceptEdge]
    ) -> "GraphSnapshot":
        """Build from model objects, dropping duplicates and dangling edges."""
        node_map: dict[str, ConceptNode] = {}
        for node in nodes:
            if node.id in node_map:
                logger.warning(f"Duplicate node id {node.id!r}, keeping first occurrence")
                continue
            node_map[node.id] = node

        kept: list[ConceptEdge] = []
        dropped = 0
        for edge in edges:
            if edge.source in node_map and edge.target in node_map:
                kept.append(edge)
            else:
                dropped += 1

        if dropped:
            logger.debug(f"Dropped {dropped} dangling edges")

        return cls(nodes=node_map, edges=tuple(kept))

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any] | None) -> "GraphSnapshot":
        """Create from a GraphPayload dict.

        Malformed entries are repaired or skipped, never raised: a partly
        broken graph is still worth showing.
        """
        if not payload:
            return cls()

        nodes: list[ConceptNode] = []
        for raw in payload.get("nodes") or []:
            if not isinstance(raw, Mapping) or raw.get("id") in (None, ""):
                logger.warning(f"Skipping node without id: {raw!r}")
                continue
            nodes.append(ConceptNode.from_dict(dict(raw)))

        edges: list[ConceptEdge] = []
        for raw in payload.get("edges") or []:
            if not isinstance(raw, Mapping) or raw.get("source") is None or raw.get("target") is None:
                logger.debug(f"Skipping edge without endpoints: {raw!r}")
                continue
            edges.append(ConceptEdge.from_dict(dict(raw)))

        snapshot = cls.from_parts(nodes, edges)
        logger.info(f"Loaded snapshot: {len(snapshot.nodes)} nodes, {len(snapshot.edges)} edges")
        return snapshot
