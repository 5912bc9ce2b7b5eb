"""Viewport controller: pan, zoom and animated camera moves.

Programmatic moves (zoom buttons, reset, focus) animate from whatever the
camera currently shows, so the transform never jumps. User gestures
(pan, wheel zoom) apply immediately and interrupt a running animation.
"""

import logging
import time
from collections.abc import Callable

from edugraph.config import Settings, settings
from edugraph.models import IDENTITY, ZoomTransform
from edugraph.viewport.transform import (
    Transition,
    center_on,
    clamp,
    clamp_scale,
    ease_cubic_in_out,
    scale_about,
)

logger = logging.getLogger(__name__)


class ViewportController:
    """Maps model space to the visible canvas and owns the zoom transform."""

    def __init__(
        self,
        width: float | None = None,
        height: float | None = None,
        config: Settings | None = None,
        clock: Callable[[], float] = time.monotonic,
        on_reset: Callable[[], None] | None = None,
    ) -> None:
        self.config = config or settings
        self.width = width if width is not None else self.config.viewport_width
        self.height = height if height is not None else self.config.viewport_height
        self.clock = clock
        self.on_reset = on_reset

        self._transform = IDENTITY
        self._transition: Transition | None = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def size(self) -> tuple[float, float]:
        return (self.width, self.height)

    @property
    def center(self) -> tuple[float, float]:
        return (self.width / 2, self.height / 2)

    @property
    def transform(self) -> ZoomTransform:
        """Transform shown right now (mid-animation if one is running)."""
        return self.advance()

    @property
    def target(self) -> ZoomTransform:
        """Where the camera will rest once the current animation ends."""
        return self._transition.end if self._transition else self._transform

    @property
    def animating(self) -> bool:
        return self._transition is not None and not self._transition.done(self.clock())

    def advance(self, now: float | None = None) -> ZoomTransform:
        """Move the animation forward to now and return the current transform."""
        if self._transition is None:
            return self._transform
        now = self.clock() if now is None else now
        self._transform = self._transition.at(now)
        if self._transition.done(now):
            self._transition = None
        return self._transform

    def _clamped(self, transform: ZoomTransform) -> ZoomTransform:
        k = clamp_scale(transform.k, self.config.min_scale, self.config.max_scale)
        if k == transform.k:
            return transform
        # Keep the viewport centre fixed while clamping
        return scale_about(transform, k, self.center)

    def set_transform(self, transform: ZoomTransform) -> ZoomTransform:
        """Jump without animation; used only when a new graph is loaded."""
        self._transition = None
        self._transform = self._clamped(transform)
        return self._transform

    def transition_to(self, target: ZoomTransform, duration: float) -> ZoomTransform:
        """Animate from the current transform to target."""
        now = self.clock()
        start = self.advance(now)
        end = self._clamped(target)
        self._transition = Transition(
            start=start,
            end=end,
            started_at=now,
            duration=duration,
            ease=ease_cubic_in_out,
        )
        return end

    def resize(self, width: float, height: float) -> None:
        self.width = width
        self.height = height

    # ------------------------------------------------------------------
    # Programmatic moves
    # ------------------------------------------------------------------

    def scale_by(
        self,
        factor: float,
        anchor: tuple[float, float] | None = None,
        duration: float | None = None,
    ) -> ZoomTransform:
        """Multiply the resting scale by factor about anchor (default: centre)."""
        base = self.target
        k = clamp_scale(base.k * factor, self.config.min_scale, self.config.max_scale)
        target = scale_about(base, k, anchor or self.center)
        if duration is None:
            duration = self.config.zoom_transition_duration
        return self.transition_to(target, duration)

    def zoom_in(self) -> ZoomTransform:
        return self.scale_by(self.config.zoom_step)

    def zoom_out(self) -> ZoomTransform:
        return self.scale_by(1 / self.config.zoom_step)

    def reset(self) -> ZoomTransform:
        """Animate back to identity and let the layout re-settle."""
        target = self.transition_to(IDENTITY, self.config.zoom_transition_duration)
        if self.on_reset is not None:
            self.on_reset()
        return target

    def focus_scale(self, current_k: float) -> float:
        """Zoom level for a focus move: a step in, kept within legible bounds."""
        k = clamp(
            current_k * self.config.focus_zoom_factor,
            self.config.focus_min_scale,
            self.config.focus_max_scale,
        )
        return clamp_scale(k, self.config.min_scale, self.config.max_scale)

    def focus_on_node(self, x: float, y: float) -> ZoomTransform:
        """Centre the camera on a node, leaving room below for detail panels."""
        k = self.focus_scale(self.advance().k)
        anchor_y = y - self.height * self.config.focus_vertical_bias
        target = center_on((x, anchor_y), k, self.size)
        logger.debug(f"Focusing on ({x:.1f}, {y:.1f}) at scale {k:.2f}")
        return self.transition_to(target, self.config.focus_duration)

    # ------------------------------------------------------------------
    # Gestures
    # ------------------------------------------------------------------

    def pan(self, dx: float, dy: float) -> ZoomTransform:
        current = self.advance()
        self._transition = None
        self._transform = current.translate(dx, dy)
        return self._transform

    def zoom_at(self, point: tuple[float, float], factor: float) -> ZoomTransform:
        """Wheel zoom anchored at the pointer."""
        current = self.advance()
        self._transition = None
        k = clamp_scale(current.k * factor, self.config.min_scale, self.config.max_scale)
        self._transform = scale_about(current, k, point)
        return self._transform

    # ------------------------------------------------------------------
    # Coordinate mapping
    # ------------------------------------------------------------------

    def model_to_screen(self, point: tuple[float, float]) -> tuple[float, float]:
        return self.transform.apply(point)

    def screen_to_model(self, point: tuple[float, float]) -> tuple[float, float]:
        return self.transform.invert(point)
