"""Timeline strip and concept panel data for the video player."""

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from edugraph.models import ConceptNode
from edugraph.render.style import ACTIVE_NODE_COLOR, color_for


def format_time(seconds: float) -> str:
    """Format seconds as m:ss, e.g. 125 -> "2:05"."""
    if not math.isfinite(seconds) or seconds < 0:
        seconds = 0.0
    minutes = int(seconds // 60)
    return f"{minutes}:{int(seconds % 60):02d}"


def fraction_of(time: float, duration: float) -> float:
    """Position of time along a video of the given duration, in [0, 1]."""
    if duration <= 0:
        return 0.0
    return min(1.0, max(0.0, time / duration))


def time_at_fraction(fraction: float, duration: float) -> float:
    """Playback time for a click at fraction of the timeline width."""
    return min(1.0, max(0.0, fraction)) * max(0.0, duration)


@dataclass(frozen=True)
class TimelineMarker:
    node_id: str
    label: str
    time: float
    position: float  # Percent of the timeline width
    color: str
    is_active: bool

    @property
    def caption(self) -> str:
        return f"{self.label} - {format_time(self.time)}"

    def to_dict(self) -> dict:
        return {
            "nodeId": self.node_id,
            "label": self.label,
            "time": self.time,
            "position": self.position,
            "color": self.color,
            "isActive": self.is_active,
            "caption": self.caption,
        }


def build_markers(nodes: Iterable[ConceptNode], duration: float) -> list[TimelineMarker]:
    """One marker per timestamp, ordered by time."""
    markers = [
        TimelineMarker(
            node_id=node.id,
            label=node.label,
            time=ts,
            position=fraction_of(ts, duration) * 100,
            color=ACTIVE_NODE_COLOR if node.is_active else color_for(node.category),
            is_active=node.is_active,
        )
        for node in nodes
        for ts in node.timestamps
    ]
    markers.sort(key=lambda marker: marker.time)
    return markers


def active_concepts(nodes: Iterable[ConceptNode]) -> list[ConceptNode]:
    """Concepts currently being discussed, in the given order."""
    return [node for node in nodes if node.is_active]


@dataclass(frozen=True)
class ConceptSummary:
    """Reference statistics for the concept detail panel."""

    node_id: str
    label: str
    reference_count: int
    first_reference: float | None
    last_reference: float | None

    @property
    def span_minutes(self) -> int | None:
        """Whole minutes between first and last reference; None for a single one."""
        if self.reference_count < 2 or self.first_reference is None or self.last_reference is None:
            return None
        return round((self.last_reference - self.first_reference) / 60)

    @property
    def span_text(self) -> str:
        span = self.span_minutes
        return "< 1min" if span is None else f"{span}min"

    @classmethod
    def of(cls, node: ConceptNode) -> "ConceptSummary":
        return cls(
            node_id=node.id,
            label=node.label,
            reference_count=len(node.timestamps),
            first_reference=node.first_timestamp,
            last_reference=node.last_timestamp,
        )

    def to_dict(self) -> dict:
        return {
            "nodeId": self.node_id,
            "label": self.label,
            "referenceCount": self.reference_count,
            "firstReference": self.first_reference,
            "lastReference": self.last_reference,
            "span": self.span_text,
        }


def timeline_payload(
    nodes: Sequence[ConceptNode],
    current_time: float,
    duration: float,
) -> dict:
    """Serializable timeline state for the player UI."""
    return {
        "currentTime": current_time,
        "duration": duration,
        "progress": fraction_of(current_time, duration) * 100,
        "label": f"{format_time(current_time)} / {format_time(duration)}",
        "markers": [marker.to_dict() for marker in build_markers(nodes, duration)],
        "active": [node.id for node in active_concepts(nodes)],
    }
