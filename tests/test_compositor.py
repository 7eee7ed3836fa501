# Tests for transition compositing
"""
Test the normal, fade-in and fade-out transitions.
"""

import numpy as np
import pytest

from gifstag import Canvas, TransitionCompositor, TransitionKind


@pytest.fixture
def compositor() -> TransitionCompositor:
    return TransitionCompositor()


def render(compositor, current, nxt, progress, effect) -> np.ndarray:
    canvas = Canvas(current.width, current.height)
    compositor.composite(canvas, current, nxt, progress, effect)
    return canvas.snapshot().get_pixels()


class TestTransitions:
    """Tests for TransitionCompositor."""

    @pytest.mark.parametrize("progress", [0.0, 0.3, 1.0])
    def test_normal_shows_next(self, compositor, red_image, blue_image, progress):
        pixels = render(compositor, red_image, blue_image, progress, TransitionKind.NORMAL)
        assert np.array_equal(pixels, blue_image.get_pixels())

    @pytest.mark.parametrize(
        "effect", [TransitionKind.FADE_IN, TransitionKind.FADE_OUT]
    )
    def test_fade_endpoints(self, compositor, red_image, blue_image, effect):
        """Progress 0 shows the current slide, progress 1 the next slide."""
        start = render(compositor, red_image, blue_image, 0.0, effect)
        end = render(compositor, red_image, blue_image, 1.0, effect)
        assert np.array_equal(start, red_image.get_pixels())
        assert np.array_equal(end, blue_image.get_pixels())

    @pytest.mark.parametrize("effect", ["fade-in", "fade-out"])
    def test_fade_halfway(self, compositor, red_image, blue_image, effect):
        pixels = render(compositor, red_image, blue_image, 0.5, effect).astype(int)
        assert abs(pixels[..., 0].mean() - 127.5) <= 2
        assert abs(pixels[..., 2].mean() - 127.5) <= 2
        assert pixels[..., 1].max() == 0

    def test_fade_is_monotonic(self, compositor, red_image, blue_image):
        blues = [
            render(compositor, red_image, blue_image, p, TransitionKind.FADE_IN)[0, 0, 2]
            for p in (0.0, 0.25, 0.5, 0.75, 1.0)
        ]
        assert blues == sorted(blues)

    @pytest.mark.parametrize("progress", [-0.1, 1.5])
    def test_invalid_progress(self, compositor, red_image, blue_image, progress):
        with pytest.raises(ValueError):
            render(compositor, red_image, blue_image, progress, TransitionKind.FADE_IN)

    def test_size_mismatch(self, compositor, red_image, make_image):
        with pytest.raises(ValueError):
            render(compositor, red_image, make_image(10, 10), 0.5, TransitionKind.NORMAL)


class TestCanvasAlpha:
    """Tests for the canvas' temporary opacity."""

    def test_alpha_restored(self):
        canvas = Canvas(10, 10)
        with canvas.alpha(0.25):
            assert canvas.global_alpha == 0.25
        assert canvas.global_alpha == 1.0

    def test_alpha_restored_on_error(self):
        canvas = Canvas(10, 10)
        with pytest.raises(RuntimeError):
            with canvas.alpha(0.5):
                raise RuntimeError("draw failed")
        assert canvas.global_alpha == 1.0

    def test_alpha_clamped(self):
        canvas = Canvas(10, 10)
        with canvas.alpha(3.0):
            assert canvas.global_alpha == 1.0
        with canvas.alpha(-1.0):
            assert canvas.global_alpha == 0.0

    def test_zero_alpha_draws_nothing(self, red_image):
        canvas = Canvas(40, 30)
        with canvas.alpha(0.0):
            canvas.draw_image(red_image)
        assert not np.any(canvas.snapshot().get_pixels())

    def test_clear(self, red_image):
        canvas = Canvas(40, 30, (0, 0, 255))
        canvas.draw_image(red_image)
        canvas.clear()
        assert np.all(canvas.snapshot().get_pixels()[..., 2] == 255)
