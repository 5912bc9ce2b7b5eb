"""Unit tests for the viewport controller."""

import pytest

from edugraph.models import IDENTITY, ZoomTransform
from edugraph.viewport import (
    Transition,
    ViewportController,
    center_on,
    clamp_scale,
    ease_cubic_in_out,
    scale_about,
)


@pytest.fixture
def viewport(test_settings, fake_clock) -> ViewportController:
    return ViewportController(600, 400, test_settings, clock=fake_clock)


class TestTransformMath:
    """Tests for transform helpers."""

    @pytest.mark.parametrize("k,expected", [(0.01, 0.1), (10, 4.0), (2.5, 2.5)])
    def test_clamp_scale(self, k: float, expected: float) -> None:
        """Test scale bounds."""
        assert clamp_scale(k) == expected

    def test_scale_about_keeps_anchor(self) -> None:
        """Test the anchor point stays under the pointer."""
        before = ZoomTransform(x=20, y=10, k=1.5)
        anchor = (250.0, 120.0)
        after = scale_about(before, 3.0, anchor)
        assert after.apply(before.invert(anchor)) == pytest.approx(anchor)

    def test_center_on(self) -> None:
        """Test a model point lands in the viewport centre."""
        transform = center_on((100, 50), 2.0, (600, 400))
        assert transform.apply((100, 50)) == pytest.approx((300, 200))

    def test_easing_endpoints(self) -> None:
        """Test cubic easing spans 0..1 symmetrically."""
        assert ease_cubic_in_out(0) == 0
        assert ease_cubic_in_out(1) == 1
        assert ease_cubic_in_out(0.5) == pytest.approx(0.5)
        assert ease_cubic_in_out(0.25) < 0.25

    def test_transition_progress(self) -> None:
        """Test transitions interpolate then rest on the end."""
        end = ZoomTransform(x=100, y=0, k=2)
        transition = Transition(IDENTITY, end, started_at=10, duration=1)
        assert transition.at(10) == IDENTITY
        assert transition.at(10.5).x == pytest.approx(50)
        assert transition.at(12) == end
        assert transition.done(11)

    def test_transition_eases_cubically(self) -> None:
        """Test camera moves use the cubic ease, slow at the start."""
        end = ZoomTransform(x=100, y=0, k=2)
        transition = Transition(IDENTITY, end, started_at=0, duration=1)
        assert transition.ease is ease_cubic_in_out
        assert transition.at(0.25).x == pytest.approx(100 * ease_cubic_in_out(0.25))
        assert transition.at(0.25).x < 25


class TestZoom:
    """Tests for zoom buttons and wheel zoom."""

    def test_zoom_in_animates(self, viewport: ViewportController, fake_clock) -> None:
        """Test zoom buttons ease toward the new scale."""
        target = viewport.zoom_in()
        assert target.k == pytest.approx(1.5)
        assert viewport.animating
        assert viewport.transform.k == 1.0

        fake_clock.advance(0.125)
        assert 1.0 < viewport.transform.k < 1.5

        fake_clock.advance(1.0)
        assert viewport.transform.k == pytest.approx(1.5)
        assert not viewport.animating

    def test_zoom_keeps_centre_fixed(self, viewport: ViewportController, fake_clock) -> None:
        """Test button zoom is anchored at the viewport centre."""
        viewport.zoom_in()
        fake_clock.advance(1)
        assert viewport.model_to_screen((300, 200)) == pytest.approx((300, 200))

    def test_repeated_zoom_in_clamped(self, viewport: ViewportController, fake_clock) -> None:
        """Test the scale never exceeds the maximum."""
        for _ in range(20):
            viewport.zoom_in()
            assert viewport.target.k <= 4.0
        fake_clock.advance(1)
        assert viewport.transform.k == pytest.approx(4.0)

    def test_repeated_zoom_out_clamped(self, viewport: ViewportController, fake_clock) -> None:
        """Test the scale never drops below the minimum."""
        for _ in range(20):
            viewport.zoom_out()
            fake_clock.advance(0.05)
            assert viewport.transform.k >= 0.1
        fake_clock.advance(1)
        assert viewport.transform.k == pytest.approx(0.1)

    def test_wheel_zoom_is_immediate(self, viewport: ViewportController) -> None:
        """Test wheel zoom applies at once and stays clamped."""
        viewport.zoom_at((100, 100), 100)
        assert viewport.transform.k == 4.0
        assert not viewport.animating
        assert viewport.model_to_screen(viewport.screen_to_model((100, 100))) == pytest.approx((100, 100))

    def test_set_transform_clamps(self, viewport: ViewportController) -> None:
        """Test direct jumps are clamped too."""
        assert viewport.set_transform(ZoomTransform(k=50)).k == 4.0


class TestResetAndPan:
    """Tests for reset and pan."""

    def test_reset_returns_to_identity(self, test_settings, fake_clock) -> None:
        """Test reset animates home and notifies the layout."""
        calls = []
        viewport = ViewportController(
            600, 400, test_settings, clock=fake_clock, on_reset=lambda: calls.append(1)
        )
        viewport.set_transform(ZoomTransform(x=40, y=-30, k=2))
        viewport.reset()
        assert calls == [1]
        fake_clock.advance(1)
        assert viewport.transform == IDENTITY

    def test_pan_cancels_animation(self, viewport: ViewportController, fake_clock) -> None:
        """Test a drag on the background interrupts a programmatic move."""
        viewport.zoom_in()
        fake_clock.advance(0.1)
        current = viewport.transform
        panned = viewport.pan(10, -5)
        assert not viewport.animating
        assert panned.x == pytest.approx(current.x + 10)
        fake_clock.advance(1)
        assert viewport.transform == panned

    def test_screen_model_inverse(self, viewport: ViewportController) -> None:
        """Test coordinate mapping round trip."""
        viewport.set_transform(ZoomTransform(x=15, y=25, k=2))
        assert viewport.screen_to_model((215, 225)) == pytest.approx((100, 100))


class TestFocusOnNode:
    """Tests for focus_on_node."""

    @pytest.mark.parametrize("k", [0.1, 0.5, 1.0, 1.2, 1.5, 2.0, 3.0, 4.0])
    def test_focus_scale_bounds(self, viewport: ViewportController, fake_clock, k: float) -> None:
        """Test focus zoom lands in [1.2, 2.0] and never zooms out from below 1.2."""
        viewport.set_transform(ZoomTransform(k=k))
        target = viewport.focus_on_node(100, 100)
        assert 1.2 <= target.k <= 2.0
        if k < 1.2:
            assert target.k >= k
        fake_clock.advance(1)
        assert viewport.transform == target

    def test_focus_scale_steps_in(self, viewport: ViewportController) -> None:
        """Test the focus zoom is a 1.3x step from the current scale."""
        assert viewport.focus_scale(1.0) == pytest.approx(1.3)
        assert viewport.focus_scale(1.5) == pytest.approx(1.95)

    def test_focus_centres_node_above_middle(self, viewport: ViewportController, fake_clock) -> None:
        """Test the node sits a tenth of the height below the centre."""
        target = viewport.focus_on_node(120, 80)
        k = target.k
        assert target.x == pytest.approx(300 - 120 * k)
        assert target.y == pytest.approx(200 - (80 - 40) * k)

    def test_focus_animation_duration(self, viewport: ViewportController, fake_clock) -> None:
        """Test focus moves take 750 ms."""
        viewport.focus_on_node(120, 80)
        fake_clock.advance(0.7)
        assert viewport.animating
        fake_clock.advance(0.06)
        assert not viewport.animating

    def test_focus_starts_from_current_transform(self, viewport: ViewportController, fake_clock) -> None:
        """Test a focus interrupting a zoom starts where the camera is."""
        viewport.zoom_in()
        fake_clock.advance(0.1)
        mid = viewport.transform
        viewport.focus_on_node(0, 0)
        assert viewport.transform == mid
