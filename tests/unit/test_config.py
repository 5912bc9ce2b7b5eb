"""Unit tests for settings and presets."""

import pytest

import edugraph.config as config_module
from edugraph.config import Settings, get_detail_page_settings, get_test_settings


class TestPresets:
    """Tests for the settings preset factories."""

    def test_detail_page_window(self) -> None:
        """Test the single-video page tightens the activation window."""
        assert get_detail_page_settings().activation_window == 5.0
        assert Settings().activation_window == 15.0

    def test_test_settings(self) -> None:
        """Test the test preset fixes the seed and frame rate."""
        config = get_test_settings()
        assert config.layout_random_seed == 7
        assert config.frame_rate == 1000.0

    def test_only_used_presets_exported(self) -> None:
        """Test the module carries no presets beyond the page and test ones."""
        presets = sorted(name for name in vars(config_module) if name.startswith("get_"))
        assert presets == ["get_detail_page_settings", "get_test_settings"]


class TestLayoutKnobs:
    """Tests for layout settings."""

    def test_link_scaling_off_by_default(self) -> None:
        """Test link stiffness ignores edge strength unless enabled."""
        assert Settings().scale_link_by_edge_strength is False

    def test_link_scaling_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test link scaling can be switched on from the environment."""
        monkeypatch.setenv("SCALE_LINK_BY_EDGE_STRENGTH", "true")
        assert Settings().scale_link_by_edge_strength is True
