"""Zoom transform arithmetic and easing."""

from collections.abc import Callable
from dataclasses import dataclass

from edugraph.models import ZoomTransform

Easing = Callable[[float], float]


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def clamp_scale(k: float, min_scale: float = 0.1, max_scale: float = 4.0) -> float:
    """Keep a zoom factor within the legible range."""
    return clamp(k, min_scale, max_scale)


def ease_cubic_in_out(t: float) -> float:
    """Symmetric cubic easing: slow start, fast middle, slow end."""
    t = clamp(t, 0.0, 1.0) * 2
    if t <= 1:
        return t * t * t / 2
    t -= 2
    return (t * t * t + 2) / 2


def interpolate(start: ZoomTransform, end: ZoomTransform, t: float) -> ZoomTransform:
    """Blend two transforms; t=0 gives start, t=1 gives end."""
    return ZoomTransform(
        x=start.x + (end.x - start.x) * t,
        y=start.y + (end.y - start.y) * t,
        k=start.k + (end.k - start.k) * t,
    )


def scale_about(
    transform: ZoomTransform,
    k: float,
    anchor: tuple[float, float],
) -> ZoomTransform:
    """Rescale to k while keeping the screen point anchor fixed."""
    mx, my = transform.invert(anchor)
    return ZoomTransform(x=anchor[0] - mx * k, y=anchor[1] - my * k, k=k)


def center_on(
    point: tuple[float, float],
    k: float,
    size: tuple[float, float],
) -> ZoomTransform:
    """Transform at scale k that puts the model point at the viewport centre."""
    width, height = size
    return ZoomTransform(x=width / 2 - point[0] * k, y=height / 2 - point[1] * k, k=k)


@dataclass(frozen=True)
class Transition:
    """A timed move between two transforms."""

    start: ZoomTransform
    end: ZoomTransform
    started_at: float
    duration: float
    ease: Easing = ease_cubic_in_out

    def progress(self, now: float) -> float:
        if self.duration <= 0:
            return 1.0
        return clamp((now - self.started_at) / self.duration, 0.0, 1.0)

    def at(self, now: float) -> ZoomTransform:
        p = self.progress(now)
        if p >= 1.0:
            return self.end
        return interpolate(self.start, self.end, self.ease(p))

    def done(self, now: float) -> bool:
        return self.progress(now) >= 1.0
