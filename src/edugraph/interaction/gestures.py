"""Pointer gesture recognition: a press ends as either a click or a drag."""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Literal

OutcomeKind = Literal["click", "drag_start", "drag_move", "drag_end"]


class GesturePhase(str, Enum):
    IDLE = "idle"
    PRESSED = "pressed"
    DRAGGING = "dragging"


@dataclass(frozen=True)
class GestureOutcome:
    kind: OutcomeKind
    node_id: str
    x: float  # screen space
    y: float


class GestureTracker:
    """
    Tracks one pointer gesture at a time.

    Moving further than click_distance from the press point turns the
    gesture into a drag; a drag never ends in a click.
    """

    def __init__(self, click_distance: float = 3.0) -> None:
        self.click_distance = click_distance
        self.phase = GesturePhase.IDLE
        self.node_id: str | None = None
        self._origin: tuple[float, float] = (0.0, 0.0)

    @property
    def dragging(self) -> bool:
        return self.phase is GesturePhase.DRAGGING

    def press(self, node_id: str, x: float, y: float) -> list[GestureOutcome]:
        outcomes: list[GestureOutcome] = []
        if self.phase is GesturePhase.DRAGGING and self.node_id is not None:
            # A lost pointer-up must not leave the previous node pinned
            outcomes.append(GestureOutcome("drag_end", self.node_id, *self._origin))
        self.phase = GesturePhase.PRESSED
        self.node_id = node_id
        self._origin = (x, y)
        return outcomes

    def move(self, x: float, y: float) -> list[GestureOutcome]:
        if self.phase is GesturePhase.IDLE or self.node_id is None:
            return []

        if self.phase is GesturePhase.PRESSED:
            travelled = math.hypot(x - self._origin[0], y - self._origin[1])
            if travelled <= self.click_distance:
                return []
            self.phase = GesturePhase.DRAGGING
            return [
                GestureOutcome("drag_start", self.node_id, *self._origin),
                GestureOutcome("drag_move", self.node_id, x, y),
            ]

        return [GestureOutcome("drag_move", self.node_id, x, y)]

    def release(self, x: float, y: float) -> list[GestureOutcome]:
        if self.phase is GesturePhase.IDLE or self.node_id is None:
            return []

        kind: OutcomeKind = "drag_end" if self.phase is GesturePhase.DRAGGING else "click"
        outcome = GestureOutcome(kind, self.node_id, x, y)
        self.cancel()
        return [outcome]

    def cancel(self) -> None:
        self.phase = GesturePhase.IDLE
        self.node_id = None
