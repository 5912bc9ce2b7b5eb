"""Concept node and edge models - the units of a lecture's knowledge graph."""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Literal, get_args

logger = logging.getLogger(__name__)

NodeCategory = Literal["definition", "example", "application", "prerequisite"]
EdgeType = Literal["prerequisite", "related", "example", "application"]

NODE_CATEGORIES: tuple[str, ...] = get_args(NodeCategory)
EDGE_TYPES: tuple[str, ...] = get_args(EdgeType)

DEFAULT_NODE_SIZE = 12.0
MIN_EDGE_STRENGTH = 0.05


def parse_category(value: Any) -> NodeCategory:
    """Normalise a category value, falling back to 'definition'."""
    if isinstance(value, str) and value.lower() in NODE_CATEGORIES:
        return value.lower()  # type: ignore[return-value]
    if value is not None:
        logger.warning(f"Unknown node category {value!r}, using 'definition'")
    return "definition"


def parse_edge_type(value: Any) -> EdgeType:
    """Normalise an edge type value, falling back to 'related'."""
    if isinstance(value, str) and value.lower() in EDGE_TYPES:
        return value.lower()  # type: ignore[return-value]
    if value is not None:
        logger.warning(f"Unknown edge type {value!r}, using 'related'")
    return "related"


def parse_timestamps(values: Any) -> list[float]:
    """Keep finite, non-negative second offsets in caller order."""
    if not values:
        return []
    if isinstance(values, (int, float)):
        values = [values]

    timestamps: list[float] = []
    for value in values:
        try:
            ts = float(value)
        except (TypeError, ValueError):
            logger.debug(f"Dropping non-numeric timestamp {value!r}")
            continue
        if not math.isfinite(ts) or ts < 0:
            logger.debug(f"Dropping out-of-range timestamp {value!r}")
            continue
        timestamps.append(ts)
    return timestamps


def clamp_strength(value: Any) -> float:
    """Clamp an edge strength into (0, 1]."""
    try:
        strength = float(value)
    except (TypeError, ValueError):
        return 0.5
    if not math.isfinite(strength):
        return 0.5
    return min(1.0, max(MIN_EDGE_STRENGTH, strength))


@dataclass
class ConceptNode:
    """
    An educational concept referenced by the lecture.

    Examples: "Machine Learning" (definition), "Backpropagation" (application)

    Positions are not stored here: the layout engine owns them.
    """

    id: str
    label: str
    description: str = ""
    category: NodeCategory = "definition"
    size: float = DEFAULT_NODE_SIZE  # Visual weight, also drives collision radius

    # Seconds into the video where the concept is discussed (unsorted)
    timestamps: list[float] = field(default_factory=list)

    # Derived from the playback clock, recomputed every tick
    is_active: bool = False

    @property
    def first_timestamp(self) -> float | None:
        """Earliest reference into the video, if any."""
        return min(self.timestamps) if self.timestamps else None

    @property
    def last_timestamp(self) -> float | None:
        """Latest reference into the video, if any."""
        return max(self.timestamps) if self.timestamps else None

    def to_dict(self) -> dict:
        """Convert to the GraphPayload node shape."""
        return {
            "id": self.id,
            "label": self.label,
            "description": self.description,
            "category": self.category,
            "size": self.size,
            "timestamps": list(self.timestamps),
            "isActive": self.is_active,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ConceptNode":
        """Create from a GraphPayload node, repairing bad field values."""
        node_id = str(data["id"])
        try:
            size = float(data.get("size", DEFAULT_NODE_SIZE))
        except (TypeError, ValueError):
            size = DEFAULT_NODE_SIZE
        if not math.isfinite(size) or size <= 0:
            size = DEFAULT_NODE_SIZE

        return cls(
            id=node_id,
            label=str(data.get("label") or node_id),
            description=str(data.get("description") or ""),
            category=parse_category(data.get("category")),
            size=size,
            timestamps=parse_timestamps(data.get("timestamps")),
        )


@dataclass(frozen=True)
class ConceptEdge:
    """
    A typed, weighted relation between two concepts.

    Example: supervised --example--> machine learning (strength: 0.9)
    """

    source: str
    target: str
    type: EdgeType = "related"
    strength: float = 0.5  # (0, 1], link stiffness and stroke width

    def touches(self, node_id: str) -> bool:
        """True if either endpoint is node_id."""
        return self.source == node_id or self.target == node_id

    def to_dict(self) -> dict:
        """Convert to the GraphPayload edge shape."""
        return {
            "source": self.source,
            "target": self.target,
            "type": self.type,
            "strength": self.strength,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ConceptEdge":
        """Create from a GraphPayload edge."""
        return cls(
            source=str(data["source"]),
            target=str(data["target"]),
            type=parse_edge_type(data.get("type")),
            strength=clamp_strength(data.get("strength", 0.5)),
        )
