"""
Reconciles the sizes of all uploaded images into the single canvas size used
for every frame of the GIF.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CanvasSize:
    """The target canvas size in pixels."""

    width: int
    height: int

    def to_tuple(self) -> tuple[int, int]:
        return self.width, self.height

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


class DimensionReconciler:
    """
    Running minimum of the widths and heights of all observed images.

    The canvas only ever shrinks while images are added. Removing an image
    does not grow it again, only :meth:`reset` restores the default size.
    """

    def __init__(self, default_size: tuple[int, int] | None = None):
        """
        :param default_size: The canvas size before any image was observed.
            Defaults to the configured canvas size.
        """
        if default_size is None:
            default_size = (
                settings.DEFAULT_CANVAS_WIDTH,
                settings.DEFAULT_CANVAS_HEIGHT,
            )
        self.default_size = CanvasSize(int(default_size[0]), int(default_size[1]))
        self._canvas = self.default_size

    @property
    def canvas(self) -> CanvasSize:
        """The current target canvas size"""
        return self._canvas

    def observe(self, width: int, height: int) -> CanvasSize:
        """
        Takes an image's dimensions into account

        :param width: The image's width in pixels
        :param height: The image's height in pixels
        :return: The updated canvas size
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Invalid image dimensions {width}x{height}")
        self._canvas = CanvasSize(
            min(int(width), self._canvas.width), min(int(height), self._canvas.height)
        )
        logger.debug(f"Observed {width}x{height}, canvas is now {self._canvas}")
        return self._canvas

    def reset(self) -> None:
        """Restores the default canvas size, e.g. after all images were removed."""
        self._canvas = self.default_size
