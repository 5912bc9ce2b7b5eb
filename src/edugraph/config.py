"""Configuration management using Pydantic Settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Concept graph views
    first_order_size_threshold: float = Field(
        default=18.0,
        description="Nodes at or above this visual weight are main concepts regardless of topology"
    )
    neighborhood_hops: int = 2

    # Playback synchronisation
    activation_window: float = Field(
        default=15.0,
        description="Seconds around a timestamp during which a concept counts as active"
    )

    # Viewport
    viewport_width: float = 600.0
    viewport_height: float = 400.0
    min_scale: float = 0.1
    max_scale: float = 4.0
    zoom_step: float = 1.5
    zoom_transition_duration: float = 0.25  # seconds, zoom buttons and reset
    focus_duration: float = 0.75  # seconds
    focus_zoom_factor: float = 1.3
    focus_min_scale: float = 1.2
    focus_max_scale: float = 2.0
    focus_vertical_bias: float = Field(
        default=0.1,
        description="Fraction of viewport height the view centre sits above a focused node"
    )

    # Force layout (overview / detail)
    overview_link_distance: float = 120.0
    detail_link_distance: float = 80.0
    link_strength: float = 0.5
    scale_link_by_edge_strength: bool = Field(
        default=False,
        description="Multiply link stiffness by each edge's strength"
    )
    overview_charge_strength: float = -400.0
    detail_charge_strength: float = -200.0
    center_strength: float = 1.0
    collision_padding: float = 10.0
    collision_strength: float = 1.0
    radial_strength: float = 0.3
    radial_radius_ratio: float = 0.3

    # Simulation schedule
    alpha_min: float = 0.001
    alpha_decay: float = Field(
        default=1 - 0.001 ** (1 / 300),
        description="Cools alpha from 1 to alpha_min in roughly 300 ticks"
    )
    velocity_decay: float = 0.4
    drag_alpha_target: float = 0.3
    max_coordinate: float = Field(
        default=1e5,
        description="Absolute bound on simulated coordinates"
    )
    layout_seed_from_previous: bool = Field(
        default=False,
        description="Keep positions of nodes shared between consecutive views"
    )
    layout_random_seed: int | None = 42

    # Interaction
    click_distance: float = Field(
        default=3.0,
        description="Pointer travel in pixels after which a press becomes a drag"
    )
    frame_rate: float = 60.0

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_debug: bool = False


def get_detail_page_settings() -> Settings:
    """Settings for the single-video page, which uses a tighter activation window."""
    return Settings(activation_window=5.0)


def get_test_settings() -> Settings:
    """Get test environment settings."""
    return Settings(
        layout_random_seed=7,
        frame_rate=1000.0,
    )


# Global settings instance
settings = Settings()
