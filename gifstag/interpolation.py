"""
Defines the interpolation methods used when slides are scaled to the canvas.
"""

from enum import Enum

import PIL.Image


class InterpolationMethod(Enum):
    """
    Enumeration of resampling filters
    """

    NEAREST = 0
    "Nearest neighbor, fastest and blocky"
    LINEAR = 1
    "Bilinear filtering"
    CUBIC = 2
    "Bicubic filtering"
    LANCZOS = 3
    "Lanczos filtering, best quality for photos"

    def to_pil(self) -> PIL.Image.Resampling:
        """
        Converts the method to its PIL resampling counterpart

        :return: The PIL resampling filter
        """
        return {
            InterpolationMethod.NEAREST: PIL.Image.Resampling.NEAREST,
            InterpolationMethod.LINEAR: PIL.Image.Resampling.BILINEAR,
            InterpolationMethod.CUBIC: PIL.Image.Resampling.BICUBIC,
            InterpolationMethod.LANCZOS: PIL.Image.Resampling.LANCZOS,
        }[self]
