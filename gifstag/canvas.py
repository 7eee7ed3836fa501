"""
Canvas - The drawing surface a single frame is composited on.

Every build owns its own canvas. Drawing honors a global alpha which is only
changed temporarily through :meth:`Canvas.alpha`, so transparency never leaks
from one draw call into the next.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

import PIL.Image
import PIL.ImageDraw

from .image import Image


class Canvas:
    """
    A mutable RGB drawing surface of fixed size.

    Example:
        canvas = Canvas(640, 480)
        canvas.draw_image(first)
        with canvas.alpha(0.5):
            canvas.draw_image(second)
        frame = canvas.snapshot()
    """

    def __init__(
        self,
        width: int,
        height: int,
        bg_color: tuple[int, int, int] | str = (0, 0, 0),
    ):
        """
        :param width: Width in pixels
        :param height: Height in pixels
        :param bg_color: The initial color
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Invalid canvas size {width}x{height}")
        self.width = width
        self.height = height
        self.bg_color = bg_color
        self._pil = PIL.Image.new("RGB", (width, height), bg_color)
        self._global_alpha = 1.0

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    @property
    def global_alpha(self) -> float:
        """The opacity applied to all draw calls"""
        return self._global_alpha

    @contextmanager
    def alpha(self, value: float) -> Iterator[Canvas]:
        """
        Applies an opacity to all draw calls within the block and restores
        full opacity afterwards.

        :param value: The opacity between 0.0 and 1.0
        """
        self._global_alpha = min(1.0, max(0.0, float(value)))
        try:
            yield self
        finally:
            self._global_alpha = 1.0

    def clear(self) -> None:
        """Fills the canvas with its background color."""
        self._pil.paste(self.bg_color, (0, 0, self.width, self.height))

    def draw_image(self, image: Image) -> None:
        """
        Draws an image covering the full canvas.

        :param image: The image, it has to match the canvas size
        """
        if image.size != self.size:
            raise ValueError(
                f"Image size {image.size} does not match canvas size {self.size}"
            )
        self._paste(image.to_pil())

    def draw_layer(self, layer: PIL.Image.Image) -> None:
        """
        Composites a transparent RGBA layer of canvas size onto the canvas.

        :param layer: The layer, e.g. rendered text
        """
        if layer.size != self.size:
            raise ValueError(
                f"Layer size {layer.size} does not match canvas size {self.size}"
            )
        self._paste(layer)

    def new_layer(self) -> tuple[PIL.Image.Image, PIL.ImageDraw.ImageDraw]:
        """
        Creates a fully transparent layer of canvas size to draw on.

        :return: The layer and a drawing context for it
        """
        layer = PIL.Image.new("RGBA", self.size, (0, 0, 0, 0))
        return layer, PIL.ImageDraw.Draw(layer)

    def _paste(self, source: PIL.Image.Image) -> None:
        """Pastes the source using its own alpha scaled by the global alpha."""
        alpha = self._global_alpha
        if alpha <= 0.0:
            return
        mask = source.getchannel("A") if source.mode == "RGBA" else None
        if alpha < 1.0:
            level = round(alpha * 255)
            if mask is None:
                mask = PIL.Image.new("L", self.size, level)
            else:
                mask = mask.point(lambda value: value * level // 255)
        rgb = source.convert("RGB") if source.mode != "RGB" else source
        if mask is None:
            self._pil.paste(rgb, (0, 0))
        else:
            self._pil.paste(rgb, (0, 0), mask)

    def snapshot(self) -> Image:
        """
        Returns the current content as a new, independent image.

        :return: The frame image
        """
        return Image(self._pil.copy())

    def to_pil(self) -> PIL.Image.Image:
        """Returns the PIL image backing this canvas."""
        return self._pil


__all__ = ["Canvas"]
