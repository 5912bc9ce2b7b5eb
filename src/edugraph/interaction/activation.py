"""Playback-clock activation of concepts.

A concept is active while the playback position is within the activation
window of any of its timestamps (strictly: |timestamp - t| < window).
"""

import logging
from collections.abc import Iterable

from edugraph.config import settings
from edugraph.models import ConceptNode

logger = logging.getLogger(__name__)


def is_active(timestamps: Iterable[float], t: float, window: float) -> bool:
    """True iff some timestamp lies strictly within window seconds of t."""
    return any(abs(ts - t) < window for ts in timestamps)


class ActivationTracker:
    """Recomputes is_active flags from the playback clock."""

    def __init__(self, window: float | None = None) -> None:
        self.window = window if window is not None else settings.activation_window
        self.current_time: float | None = None

    def update(self, nodes: Iterable[ConceptNode], t: float) -> list[str]:
        """
        Set is_active on every node for playback time t.

        Returns:
            Ids whose flag changed; empty when nothing needs redrawing
        """
        self.current_time = t
        changed: list[str] = []
        for node in nodes:
            active = is_active(node.timestamps, t, self.window)
            if active != node.is_active:
                node.is_active = active
                changed.append(node.id)

        if changed:
            logger.debug(f"t={t:.1f}s: {len(changed)} concepts changed activation")
        return changed

    def reapply(self, nodes: Iterable[ConceptNode]) -> list[str]:
        """Apply the last known clock to a freshly loaded set of nodes."""
        if self.current_time is None:
            return []
        return self.update(nodes, self.current_time)


def active_ids(nodes: Iterable[ConceptNode]) -> set[str]:
    return {node.id for node in nodes if node.is_active}
