"""Edugraph data models."""

from edugraph.models.concept import (
    EDGE_TYPES,
    NODE_CATEGORIES,
    ConceptEdge,
    ConceptNode,
    EdgeType,
    NodeCategory,
)
from edugraph.models.snapshot import GraphSnapshot
from edugraph.models.view import IDENTITY, ViewMode, ViewState, ZoomTransform

__all__ = [
    "ConceptNode",
    "ConceptEdge",
    "NodeCategory",
    "EdgeType",
    "NODE_CATEGORIES",
    "EDGE_TYPES",
    "GraphSnapshot",
    "ViewMode",
    "ViewState",
    "ZoomTransform",
    "IDENTITY",
]
