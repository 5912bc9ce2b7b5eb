"""Configuration for the force layout, per view mode."""

import math
from dataclasses import dataclass

from edugraph.config import Settings, settings
from edugraph.models import ViewMode


@dataclass(frozen=True)
class LayoutParams:
    """Force and cooling parameters for one simulation."""

    # Link spring
    link_distance: float = 120.0
    link_strength: float = 0.5
    scale_link_by_edge_strength: bool = False

    # Pairwise repulsion (negative = push apart)
    charge_strength: float = -400.0
    charge_distance_min: float = 1.0

    # Centering translation toward the frame centre
    center_strength: float = 1.0

    # Collision radius = node.size + padding
    collision_padding: float = 10.0
    collision_strength: float = 1.0

    # Vertical hub bias, overview only (None disables)
    radial_strength: float | None = 0.3
    radial_radius_ratio: float = 0.3

    # Cooling
    alpha_min: float = 0.001
    alpha_decay: float = 1 - 0.001 ** (1 / 300)
    velocity_decay: float = 0.4
    drag_alpha_target: float = 0.3

    # Divergence guard
    max_coordinate: float = 1e5

    @classmethod
    def for_mode(cls, mode: ViewMode, config: Settings | None = None) -> "LayoutParams":
        """Parameters for overview or detail mode."""
        config = config or settings
        overview = mode is ViewMode.OVERVIEW
        return cls(
            link_distance=config.overview_link_distance if overview else config.detail_link_distance,
            link_strength=config.link_strength,
            scale_link_by_edge_strength=config.scale_link_by_edge_strength,
            charge_strength=(
                config.overview_charge_strength if overview else config.detail_charge_strength
            ),
            center_strength=config.center_strength,
            collision_padding=config.collision_padding,
            collision_strength=config.collision_strength,
            radial_strength=config.radial_strength if overview else None,
            radial_radius_ratio=config.radial_radius_ratio,
            alpha_min=config.alpha_min,
            alpha_decay=config.alpha_decay,
            velocity_decay=config.velocity_decay,
            drag_alpha_target=config.drag_alpha_target,
            max_coordinate=config.max_coordinate,
        )


@dataclass(frozen=True)
class LayoutFrame:
    """Viewport dimensions the layout is centred in."""

    width: float = 600.0
    height: float = 400.0

    @property
    def center(self) -> tuple[float, float]:
        return (self.width / 2, self.height / 2)

    @property
    def min_side(self) -> float:
        return min(self.width, self.height)

    def hub_target_y(self, rank: int, count: int, radius_ratio: float) -> float:
        """Vertical target for the rank-th of count first-order nodes on the hub circle."""
        if count <= 0:
            return self.height / 2
        angle = (rank / count) * 2 * math.pi
        return self.height / 2 + math.sin(angle) * self.min_side * radius_ratio

    @classmethod
    def from_settings(cls, config: Settings | None = None) -> "LayoutFrame":
        config = config or settings
        return cls(width=config.viewport_width, height=config.viewport_height)
