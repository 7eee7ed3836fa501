# Tests for center cropping
"""
Test that images are cropped from their center and fill the canvas exactly.
"""

import numpy as np
import pytest

from gifstag import Image, compute_crop_box, crop_center
from gifstag.interpolation import InterpolationMethod


class TestComputeCropBox:
    """Tests for the crop region computation."""

    def test_wider_source(self):
        """Wide sources keep their full height and lose left and right."""
        assert compute_crop_box(200, 100, 100, 100) == (50, 0, 150, 100)

    def test_taller_source(self):
        """Tall sources keep their full width and lose top and bottom."""
        assert compute_crop_box(100, 200, 100, 100) == (0, 50, 100, 150)

    def test_same_aspect_ratio(self):
        assert compute_crop_box(1600, 1200, 640, 480) == (0, 0, 1600, 1200)

    @pytest.mark.parametrize(
        "src,target",
        [((1001, 300), (400, 300)), ((333, 1000), (500, 500)), ((1920, 1080), (37, 29))],
    )
    def test_centered(self, src, target):
        """The margins on the cropped axis differ by at most one pixel."""
        x0, y0, x1, y1 = compute_crop_box(*src, *target)
        assert 0 <= x0 < x1 <= src[0]
        assert 0 <= y0 < y1 <= src[1]
        assert abs(x0 - (src[0] - x1)) <= 1
        assert abs(y0 - (src[1] - y1)) <= 1
        # one axis is never cropped
        assert (x0, x1) == (0, src[0]) or (y0, y1) == (0, src[1])

    def test_aspect_ratio_kept(self):
        x0, y0, x1, y1 = compute_crop_box(1920, 1080, 640, 480)
        assert (x1 - x0) / (y1 - y0) == pytest.approx(640 / 480, abs=0.01)

    def test_invalid(self):
        with pytest.raises(ValueError):
            compute_crop_box(0, 100, 100, 100)


class TestCropCenter:
    """Tests for cropping and scaling images."""

    def test_output_size(self, make_image):
        image = make_image(300, 100)
        assert crop_center(image, 50, 40).size == (50, 40)

    def test_center_is_kept(self):
        """Only the center band of a three band image survives."""
        data = np.zeros((100, 300, 3), dtype=np.uint8)
        data[:, :100] = (255, 0, 0)
        data[:, 100:200] = (0, 255, 0)
        data[:, 200:] = (0, 0, 255)
        cropped = crop_center(Image(data), 50, 50, InterpolationMethod.NEAREST)
        pixels = cropped.get_pixels()
        assert np.all(pixels[:, :, 1] == 255)
        assert np.all(pixels[:, :, 0] == 0)
        assert np.all(pixels[:, :, 2] == 0)

    def test_matching_size_is_unchanged(self, red_image):
        assert crop_center(red_image, 40, 30) is red_image

    def test_upscaling(self, make_image):
        assert crop_center(make_image(10, 10), 40, 30).size == (40, 30)
