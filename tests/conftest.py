"""
Pytest fixtures for GifStag tests
"""

import io

import numpy as np
import PIL.Image
import pytest

from gifstag import Image, SlideSpec

RED = (255, 0, 0)
GREEN = (0, 255, 0)
BLUE = (0, 0, 255)


@pytest.fixture
def make_image():
    """Factory for images filled with a single color."""

    def _make(width: int = 40, height: int = 30, color=RED) -> Image:
        data = np.full((height, width, 3), color, dtype=np.uint8)
        return Image(data)

    return _make


@pytest.fixture
def make_file():
    """Factory for the encoded file data of a single colored image."""

    def _make(width: int = 64, height: int = 48, color=BLUE, fmt: str = "PNG") -> bytes:
        stream = io.BytesIO()
        PIL.Image.new("RGB", (width, height), color).save(stream, format=fmt)
        return stream.getvalue()

    return _make


@pytest.fixture
def red_image(make_image) -> Image:
    """A solid red 40x30 image."""
    return make_image(40, 30, RED)


@pytest.fixture
def blue_image(make_image) -> Image:
    """A solid blue 40x30 image."""
    return make_image(40, 30, BLUE)


@pytest.fixture
def make_slide(make_image):
    """Factory for slides with a solid colored image."""

    def _make(color=RED, size=(40, 30), **fields) -> SlideSpec:
        return SlideSpec(image=make_image(size[0], size[1], color), **fields)

    return _make


@pytest.fixture
def png_data(make_file) -> bytes:
    """File data of a 64x48 PNG."""
    return make_file(64, 48)
