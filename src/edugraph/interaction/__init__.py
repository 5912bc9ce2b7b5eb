"""User interaction and playback sync for the concept graph.

Provides:
- Command objects and the per-frame command queue
- Click/drag gesture recognition
- Playback-clock activation
- GraphSession, the owner of all mutable view state
- FrameScheduler, the asyncio frame loop
"""

from edugraph.interaction.activation import ActivationTracker, active_ids, is_active
from edugraph.interaction.commands import (
    BackToOverview,
    ClockTick,
    Command,
    CommandQueue,
    NodeClick,
    Pan,
    PointerDown,
    PointerMove,
    PointerUp,
    ResetView,
    SetSearch,
    WheelZoom,
    ZoomIn,
    ZoomOut,
)
from edugraph.interaction.gestures import GestureOutcome, GesturePhase, GestureTracker
from edugraph.interaction.scheduler import FrameScheduler
from edugraph.interaction.session import GraphSession

__all__ = [
    # Activation
    "ActivationTracker",
    "active_ids",
    "is_active",
    # Commands
    "Command",
    "CommandQueue",
    "NodeClick",
    "PointerDown",
    "PointerMove",
    "PointerUp",
    "BackToOverview",
    "ZoomIn",
    "ZoomOut",
    "ResetView",
    "Pan",
    "WheelZoom",
    "ClockTick",
    "SetSearch",
    # Gestures
    "GestureOutcome",
    "GesturePhase",
    "GestureTracker",
    # Session
    "GraphSession",
    "FrameScheduler",
]
