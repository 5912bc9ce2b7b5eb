"""View state models - which slice of the graph is shown and how it is framed."""

from dataclasses import dataclass, field, replace
from enum import Enum


class ViewMode(str, Enum):
    """Graph view modes."""

    OVERVIEW = "overview"  # First-order concepts only
    DETAIL = "detail"  # Two-hop neighbourhood of a focus concept


@dataclass(frozen=True)
class ZoomTransform:
    """Affine screen transform: screen = model * k + (x, y)."""

    x: float = 0.0
    y: float = 0.0
    k: float = 1.0

    def apply(self, point: tuple[float, float]) -> tuple[float, float]:
        """Map a model-space point to screen space."""
        return (point[0] * self.k + self.x, point[1] * self.k + self.y)

    def invert(self, point: tuple[float, float]) -> tuple[float, float]:
        """Map a screen-space point back to model space."""
        return ((point[0] - self.x) / self.k, (point[1] - self.y) / self.k)

    def translate(self, dx: float, dy: float) -> "ZoomTransform":
        """Shift by a screen-space delta."""
        return replace(self, x=self.x + dx, y=self.y + dy)

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y, "k": self.k}


IDENTITY = ZoomTransform()


@dataclass(frozen=True)
class ViewState:
    """
    Current view of a snapshot.

    Created in overview at load time, replaced on every transition.
    """

    mode: ViewMode = ViewMode.OVERVIEW
    focus_node_id: str | None = None  # Set only in detail mode
    selected_node_id: str | None = None
    transform: ZoomTransform = field(default_factory=ZoomTransform)

    @property
    def is_overview(self) -> bool:
        return self.mode is ViewMode.OVERVIEW

    @classmethod
    def overview(cls, selected_node_id: str | None = None) -> "ViewState":
        return cls(mode=ViewMode.OVERVIEW, selected_node_id=selected_node_id)

    @classmethod
    def detail(cls, focus_node_id: str, selected_node_id: str | None = None) -> "ViewState":
        return cls(
            mode=ViewMode.DETAIL,
            focus_node_id=focus_node_id,
            selected_node_id=selected_node_id,
        )

    def to_dict(self) -> dict:
        return {
            "mode": self.mode.value,
            "focus_node_id": self.focus_node_id,
            "selected_node_id": self.selected_node_id,
            "transform": self.transform.to_dict(),
        }
