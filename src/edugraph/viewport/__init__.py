"""Viewport: zoom transform maths and the animated camera controller."""

from edugraph.viewport.controller import ViewportController
from edugraph.viewport.transform import (
    Transition,
    center_on,
    clamp_scale,
    ease_cubic_in_out,
    interpolate,
    scale_about,
)

__all__ = [
    "ViewportController",
    "Transition",
    "center_on",
    "clamp_scale",
    "ease_cubic_in_out",
    "interpolate",
    "scale_about",
]
