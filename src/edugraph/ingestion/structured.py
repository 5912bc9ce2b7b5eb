"""Convert a structured lecture breakdown into a concept graph payload.

Input format (produced by the lecture structuring service):

    {
        "hierarchical_structure": {
            "layer_1": [
                {"id": "1", "title": "Intro", "layer_2": [
                    {"id": "1.1", "title": "Motivation", "layer_3": [...]}
                ]}
            ]
        },
        "detailed_breakdown": [
            {"id": "1.1", "timestamp": "0:45-2:10", "category": "introduction",
             "detail": "Why the topic matters"}
        ]
    }

Each hierarchy item becomes a concept; each parent/child pair becomes a
"related" edge. Breakdown segments belong to an item when their id equals
the item id or starts with "<item id>.".
"""

import json
import logging
import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from edugraph.models import GraphSnapshot, NodeCategory

logger = logging.getLogger(__name__)

CHILD_LAYERS = ("layer_2", "layer_3")
PARENT_EDGE_STRENGTH = 0.7
MAX_NODE_SIZE = 20
MIN_NODE_SIZE = 12
SIZE_STEP_PER_DEPTH = 3
NO_DESCRIPTION = "No description available"

TIMESTAMP_PATTERN = re.compile(r"(\d+):(\d+)")

BREAKDOWN_CATEGORIES: dict[str, NodeCategory] = {
    "example": "example",
    "method": "application",
    "solution": "application",
    "introduction": "prerequisite",
}


def parse_timestamp(value: Any) -> float | None:
    """Seconds for the first m:ss in value ("1:05-2:00" -> 65.0)."""
    if not isinstance(value, str):
        return None
    match = TIMESTAMP_PATTERN.search(value)
    if not match:
        return None
    minutes, seconds = match.groups()
    return float(int(minutes) * 60 + int(seconds))


def map_category(value: Any) -> NodeCategory:
    """Map a breakdown segment category onto a concept category."""
    if not isinstance(value, str):
        return "definition"
    return BREAKDOWN_CATEGORIES.get(value.strip().lower(), "definition")


def node_size(depth: int) -> float:
    """Top-level items are largest; deeper items shrink down to a floor."""
    return float(max(MIN_NODE_SIZE, MAX_NODE_SIZE - depth * SIZE_STEP_PER_DEPTH))


def segment_matches(segment_id: Any, item_id: str) -> bool:
    if not isinstance(segment_id, str) or not item_id:
        return False
    return segment_id == item_id or segment_id.startswith(item_id + ".")


@dataclass
class ConversionResult:
    """Result of converting one structured breakdown."""

    nodes: list[dict] = field(default_factory=list)
    edges: list[dict] = field(default_factory=list)
    skipped_items: int = 0
    unmatched_items: int = 0  # Items with no breakdown segment

    @property
    def payload(self) -> dict:
        return {"nodes": self.nodes, "edges": self.edges}

    def to_snapshot(self) -> GraphSnapshot:
        return GraphSnapshot.from_payload(self.payload)


class StructuredLectureConverter:
    """Walks the hierarchy depth-first, numbering concepts node_0, node_1, ..."""

    def __init__(self, breakdown: Sequence[Mapping[str, Any]] | None = None) -> None:
        self.breakdown = [s for s in breakdown or [] if isinstance(s, Mapping)]
        self._next_id = 0

    def _segments_for(self, item_id: str) -> list[Mapping[str, Any]]:
        return [s for s in self.breakdown if segment_matches(s.get("id"), item_id)]

    def convert(self, hierarchy: Mapping[str, Any] | None) -> ConversionResult:
        result = ConversionResult()
        self._next_id = 0
        layer = (hierarchy or {}).get("layer_1") or []
        self._process_layer(layer, None, 0, result)

        logger.info(
            f"Converted lecture structure: {len(result.nodes)} concepts, "
            f"{len(result.edges)} edges"
        )
        if result.unmatched_items:
            logger.debug(f"{result.unmatched_items} items had no breakdown segment")
        return result

    def _process_layer(
        self,
        items: Iterable[Any],
        parent_id: str | None,
        depth: int,
        result: ConversionResult,
    ) -> None:
        for item in items:
            if not isinstance(item, Mapping):
                logger.warning(f"Skipping malformed structure item: {item!r}")
                result.skipped_items += 1
                continue

            node_id = f"node_{self._next_id}"
            self._next_id += 1

            item_id = str(item.get("id") or "")
            segments = self._segments_for(item_id)
            if not segments:
                result.unmatched_items += 1

            timestamps = [
                ts for ts in (parse_timestamp(s.get("timestamp")) for s in segments) if ts is not None
            ]
            first = segments[0] if segments else {}

            result.nodes.append({
                "id": node_id,
                "label": str(item.get("title") or item_id or node_id),
                "description": str(first.get("detail") or NO_DESCRIPTION),
                "category": map_category(first.get("category")),
                "size": node_size(depth),
                "timestamps": timestamps,
            })

            if parent_id is not None:
                result.edges.append({
                    "source": parent_id,
                    "target": node_id,
                    "type": "related",
                    "strength": PARENT_EDGE_STRENGTH,
                })

            for layer_key in CHILD_LAYERS:
                children = item.get(layer_key)
                if children:
                    self._process_layer(children, node_id, depth + 1, result)


def convert_structured(data: Mapping[str, Any]) -> ConversionResult:
    """Convert a structured lecture document into a GraphPayload."""
    converter = StructuredLectureConverter(data.get("detailed_breakdown"))
    return converter.convert(data.get("hierarchical_structure"))


def load_structured_file(path: Path | str) -> ConversionResult:
    """Read a structured lecture JSON file and convert it."""
    path = Path(path)
    with path.open(encoding="utf-8") as f:
        data = json.load(f)
    logger.debug(f"Read structured lecture from {path}")
    return convert_structured(data)
