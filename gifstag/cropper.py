# GifStag - Center cropping
"""
Crops images from their center so they fill the target canvas exactly.

Slides never get letterboxed or distorted: the largest centered region with
the canvas' aspect ratio is cut out of the source and scaled to the canvas.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .interpolation import InterpolationMethod

if TYPE_CHECKING:
    from .image import Image


def compute_crop_box(
    src_w: int, src_h: int, target_w: int, target_h: int
) -> tuple[int, int, int, int]:
    """
    Computes the centered region of the source with the target aspect ratio.

    :param src_w: Source width in pixels
    :param src_h: Source height in pixels
    :param target_w: Target width in pixels
    :param target_h: Target height in pixels
    :return: The box as x0, y0, x1, y1 (x1, y1 exclusive)
    """
    if min(src_w, src_h, target_w, target_h) <= 0:
        raise ValueError("All dimensions have to be positive")
    # compare src_w / src_h with target_w / target_h without float error
    if src_w * target_h > src_h * target_w:
        # source is wider, keep full height
        slice_w = min(src_w, max(1, round(src_h * target_w / target_h)))
        x0 = (src_w - slice_w) // 2
        return x0, 0, x0 + slice_w, src_h
    slice_h = min(src_h, max(1, round(src_w * target_h / target_w)))
    y0 = (src_h - slice_h) // 2
    return 0, y0, src_w, y0 + slice_h


def crop_center(
    image: Image,
    target_w: int,
    target_h: int,
    interpolation: InterpolationMethod = InterpolationMethod.LANCZOS,
) -> Image:
    """
    Crops the image from its center and scales it to exactly target_w x target_h.

    :param image: The source image
    :param target_w: The target width
    :param target_h: The target height
    :param interpolation: The resampling filter used for scaling
    :return: The new image
    """
    box = compute_crop_box(image.width, image.height, target_w, target_h)
    if box != (0, 0, image.width, image.height):
        image = image.cropped(box)
    return image.resized((target_w, target_h), interpolation=interpolation)


__all__ = ["compute_crop_box", "crop_center"]
