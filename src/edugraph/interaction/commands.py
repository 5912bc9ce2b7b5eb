"""User and clock commands, queued and consumed once per frame."""

from collections import deque
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class NodeClick:
    node_id: str


@dataclass(frozen=True)
class PointerDown:
    """Press on a node; becomes a click or a drag depending on travel."""

    node_id: str
    x: float  # screen space
    y: float


@dataclass(frozen=True)
class PointerMove:
    x: float
    y: float


@dataclass(frozen=True)
class PointerUp:
    x: float
    y: float


@dataclass(frozen=True)
class BackToOverview:
    pass


@dataclass(frozen=True)
class ZoomIn:
    pass


@dataclass(frozen=True)
class ZoomOut:
    pass


@dataclass(frozen=True)
class ResetView:
    pass


@dataclass(frozen=True)
class Pan:
    dx: float
    dy: float


@dataclass(frozen=True)
class WheelZoom:
    x: float
    y: float
    factor: float


@dataclass(frozen=True)
class ClockTick:
    """Current playback position in seconds."""

    time: float


@dataclass(frozen=True)
class SetSearch:
    """Text filter for the displayed concepts; empty clears it."""

    term: str = ""


Command = Union[
    NodeClick,
    PointerDown,
    PointerMove,
    PointerUp,
    BackToOverview,
    ZoomIn,
    ZoomOut,
    ResetView,
    Pan,
    WheelZoom,
    ClockTick,
    SetSearch,
]


class CommandQueue:
    """FIFO of pending commands."""

    def __init__(self) -> None:
        self._pending: deque[Command] = deque()

    def __len__(self) -> int:
        return len(self._pending)

    def __bool__(self) -> bool:
        return bool(self._pending)

    def put(self, command: Command) -> None:
        self._pending.append(command)

    def drain(self) -> list[Command]:
        """Take every pending command in submission order."""
        commands = list(self._pending)
        self._pending.clear()
        return commands

    def clear(self) -> None:
        self._pending.clear()
