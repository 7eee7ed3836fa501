# Tests for the Image class
"""
Test decoding, cropping, resizing and encoding of images.
"""

import io

import numpy as np
import PIL.Image
import pytest

from gifstag import Image
from gifstag.image import detect_mime_type
from gifstag.interpolation import InterpolationMethod


class TestImageCreation:
    """Tests for creating images from the supported sources."""

    def test_from_numpy(self):
        """An RGB array is kept as RGB image of the same size."""
        data = np.zeros((30, 40, 3), dtype=np.uint8)
        image = Image(data)
        assert image.size == (40, 30)
        assert image.mode == "RGB"

    def test_from_png_bytes(self, png_data):
        """Encoded file data is decoded."""
        image = Image(png_data)
        assert image.width == 64
        assert image.height == 48

    def test_invalid_bytes(self):
        """Data which is no image raises a ValueError."""
        with pytest.raises(ValueError):
            Image(b"definitely not an image")

    def test_blank_image(self):
        """A size without source creates a filled image."""
        image = Image(size=(10, 5), bg_color=(1, 2, 3))
        assert image.size == (10, 5)
        assert tuple(image.get_pixels()[0, 0]) == (1, 2, 3)

    def test_missing_source_and_size(self):
        with pytest.raises(ValueError):
            Image()

    def test_palette_with_transparency_becomes_rgba(self):
        """Palette images with a transparent color keep their transparency."""
        pil_image = PIL.Image.new("P", (8, 8), 0)
        pil_image.info["transparency"] = 0
        stream = io.BytesIO()
        pil_image.save(stream, format="PNG", transparency=0)
        image = Image(stream.getvalue())
        assert image.mode == "RGBA"
        assert image.is_transparent()

    def test_grayscale_becomes_rgb(self):
        image = Image(PIL.Image.new("L", (8, 8), 128))
        assert image.mode == "RGB"

    def test_dimensions_are_read_only(self, red_image):
        """Width and height can not be changed after initialization."""
        with pytest.raises(ValueError):
            red_image.width = 5

    def test_metadata_is_writable(self, red_image):
        red_image.metadata = {"name": "red.png"}
        assert red_image.metadata["name"] == "red.png"


class TestImageOperations:
    """Tests for cropping, resizing and flattening."""

    def test_cropped(self):
        """Cropping returns the region between x, y and x2, y2."""
        data = np.zeros((10, 10, 3), dtype=np.uint8)
        data[2:5, 3:8] = 255
        cropped = Image(data).cropped((3, 2, 8, 5))
        assert cropped.size == (5, 3)
        assert np.all(cropped.get_pixels() == 255)

    def test_cropped_out_of_bounds(self, red_image):
        with pytest.raises(ValueError):
            red_image.cropped((0, 0, 41, 30))

    def test_cropped_empty_box(self, red_image):
        with pytest.raises(ValueError):
            red_image.cropped((5, 5, 5, 10))

    def test_resized(self, red_image):
        resized = red_image.resized((20, 15), InterpolationMethod.NEAREST)
        assert resized.size == (20, 15)
        assert tuple(resized.get_pixels()[7, 7]) == (255, 0, 0)

    def test_resized_same_size_returns_self(self, red_image):
        assert red_image.resized((40, 30)) is red_image

    def test_flattened(self):
        """Transparent pixels show the background color."""
        data = np.zeros((4, 4, 4), dtype=np.uint8)
        data[:, :2] = (255, 255, 255, 255)
        flattened = Image(data).flattened((0, 0, 255))
        pixels = flattened.get_pixels()
        assert flattened.mode == "RGB"
        assert tuple(pixels[0, 0]) == (255, 255, 255)
        assert tuple(pixels[0, 3]) == (0, 0, 255)

    def test_flattened_opaque_returns_self(self, red_image):
        assert red_image.flattened() is red_image

    def test_copy_is_independent(self, red_image):
        red_image.metadata["name"] = "red"
        copy = red_image.copy()
        assert copy == red_image
        assert copy.to_pil() is not red_image.to_pil()
        assert copy.metadata == {"name": "red"}

    def test_equality(self, make_image):
        assert make_image(5, 5, (1, 2, 3)) == make_image(5, 5, (1, 2, 3))
        assert make_image(5, 5, (1, 2, 3)) != make_image(5, 5, (1, 2, 4))
        assert make_image(5, 5) != make_image(6, 5)


class TestImageEncoding:
    """Tests for encoding images."""

    def test_png_roundtrip(self, red_image):
        data = red_image.to_png()
        assert detect_mime_type(data) == "image/png"
        assert Image(data) == red_image

    def test_jpeg(self, red_image):
        data = red_image.to_jpeg(quality=80)
        assert detect_mime_type(data) == "image/jpeg"

    def test_unsupported_filetype(self, red_image):
        with pytest.raises(ValueError):
            red_image.encode("tiff")

    def test_data_url(self, red_image):
        assert red_image.to_data_url().startswith("data:image/png;base64,")

    def test_detect_unknown(self):
        assert detect_mime_type(b"hello world, no image") == "application/octet-stream"
