"""
Implements the class :class:`.Image` which is GifStag's container for decoded
slide images and rendered frames.
"""

from __future__ import annotations

import base64
import hashlib
import io
from typing import Union

import PIL.Image
import filetype
import numpy as np

from .interpolation import InterpolationMethod

SUPPORTED_IMAGE_FILETYPES = ["png", "bmp", "jpg", "jpeg", "gif", "webp"]
"List of image file types which can be read and written"

SUPPORTED_IMAGE_FILETYPE_SET = set(SUPPORTED_IMAGE_FILETYPES)
"Set of image file types which can be read and written"

Image = type

ImageSourceTypes = Union[bytes, np.ndarray, PIL.Image.Image, Image]
"The valid source type for creating an image"


class Image:
    """
    An immutable, decoded image.

    The pixels are stored as a PILLOW image in either RGB or RGBA mode. Images
    are shared by reference between slides, the timeline and the encoder, so
    width and height can not be changed after initialization and all
    operations return new images.
    """

    def __init__(
        self,
        source: ImageSourceTypes | None = None,
        size: tuple[int, int] | None = None,
        bg_color: tuple[int, ...] | str | None = None,
    ):
        """
        :param source: The image source. Either encoded file data, a numpy
            array of uint8 pixels or a PIL image. PIL images are referenced,
            not copied.
        :param size: The size of a new, blank image - if no source is passed.
        :param bg_color: The background color of the new, blank image

        Raises a ValueError if the image could not be loaded
        """
        self.metadata: dict = {}
        "Arbitrary metadata attached to this image, e.g. the file name."
        if source is None:
            if size is None:
                raise ValueError("Either a source or a size has to be provided")
            if size[0] <= 0 or size[1] <= 0:
                raise ValueError(f"Invalid image size {size}")
            self._pil_handle = PIL.Image.new(
                "RGB", (int(size[0]), int(size[1])), bg_color or (0, 0, 0)
            )
        else:
            self._pil_handle = self._pil_from_source(source)
        self.width = self._pil_handle.width
        "The image's width in pixels"
        self.height = self._pil_handle.height
        "The image's height in pixels"
        self.initialized = True
        self._read_only = {"width", "height", "_pil_handle"}

    def __setattr__(self, key, value):
        if "_read_only" in self.__dict__:
            if key in self.__dict__ and key not in ("metadata",):
                raise ValueError(f"{key} can not be modified after initialization")
        self.__dict__[key] = value

    @staticmethod
    def _pil_from_source(source: ImageSourceTypes) -> PIL.Image.Image:
        """
        Converts a supported source into a PIL image in RGB or RGBA mode

        :param source: The data source
        :return: The PIL image
        """
        try:
            if isinstance(source, bytes):
                pil_handle = PIL.Image.open(io.BytesIO(source))
                pil_handle.load()
            elif isinstance(source, np.ndarray):
                if not source.dtype == np.uint8:
                    raise ValueError("Unsupported array source")
                pil_handle = PIL.Image.fromarray(source)
            elif isinstance(source, PIL.Image.Image):
                pil_handle = source
            elif isinstance(source, Image):
                pil_handle = source.to_pil()
            else:
                raise NotImplementedError
        except (
            PIL.UnidentifiedImageError,
            PIL.Image.DecompressionBombError,
            OSError,
            SyntaxError,
        ) as e:
            raise ValueError("Invalid or damaged image data") from e
        if pil_handle.mode in ("RGB", "RGBA"):
            return pil_handle
        has_alpha = (
            pil_handle.mode in ("LA", "PA", "RGBa", "La")
            or "transparency" in pil_handle.info
        )
        return pil_handle.convert("RGBA" if has_alpha else "RGB")

    @property
    def size(self) -> tuple[int, int]:
        """
        Returns the image's size in pixels

        :return: The size as tuple (width, height)
        """
        return self.width, self.height

    @property
    def mode(self) -> str:
        """The PIL mode, either RGB or RGBA"""
        return self._pil_handle.mode

    def is_transparent(self) -> bool:
        """
        Returns if the image has an alpha channel

        :return: True if the image is transparent
        """
        return self._pil_handle.mode == "RGBA"

    def cropped(self, box: tuple[int, int, int, int]) -> Image:
        """
        Crops a region of the image and returns it

        :param box: The box in the form x, y, x2, y2 (x2, y2 exclusive)
        :return: The image of the defined subregion
        """
        box = tuple(int(value) for value in box)
        if box[2] <= box[0] or box[3] <= box[1]:
            raise ValueError("X2 or Y2 have to be larger than X or Y")
        if box[0] < 0 or box[1] < 0 or box[2] > self.width or box[3] > self.height:
            raise ValueError("Box region out of image bounds")
        return Image(self._pil_handle.crop(box=box))

    def resized(
        self,
        size: tuple[int, int],
        interpolation: InterpolationMethod = InterpolationMethod.LANCZOS,
    ) -> Image:
        """
        Returns an image resized to given resolution

        :param size: The new size
        :param interpolation: The interpolation method.
        """
        size = (int(size[0]), int(size[1]))
        if self.width == size[0] and self.height == size[1]:
            return self
        return Image(self._pil_handle.resize(size, resample=interpolation.to_pil()))

    def flattened(self, bg_color: tuple[int, int, int] | str = (0, 0, 0)) -> Image:
        """
        Returns an RGB version of this image, transparent regions are drawn
        on top of the given background color.

        :param bg_color: The background color
        :return: The opaque image
        """
        if not self.is_transparent():
            return self
        background = PIL.Image.new("RGB", self.size, bg_color)
        background.paste(self._pil_handle, (0, 0), self._pil_handle)
        return Image(background)

    def copy(self) -> Image:
        """
        Creates a deep copy of this image

        :return: The copy of this image
        """
        new_image = Image(self._pil_handle.copy())
        new_image.metadata = dict(self.metadata)
        return new_image

    def to_pil(self) -> PIL.Image.Image:
        """
        Returns the PIL image backing this image. Do not modify it.

        :return: The PIL image
        """
        return self._pil_handle

    @property
    def pixels(self) -> np.ndarray:
        """
        Returns the image's pixel data
        """
        return self.get_pixels()

    def get_pixels(self) -> np.ndarray:
        """
        Returns a copy of the image's pixel data as :class:`np.ndarray` of
        shape (height, width, channels).

        :return: The numpy array containing the pixels
        """
        # noinspection PyTypeChecker
        return np.array(self._pil_handle)

    def encode(self, filetype: str = "png", quality: int = 90) -> bytes:
        """
        Compresses the image and returns the compressed file's data

        :param filetype: The output file type, e.g. "png" or "jpg"
        :param quality: The image quality between (0 = worst quality) and
            (95 = best quality). Only used for JPEG.
        :return: The encoded data
        """
        filetype = filetype.lstrip(".").lower()
        if filetype == "jpg":
            filetype = "jpeg"
        if filetype not in SUPPORTED_IMAGE_FILETYPE_SET:
            raise ValueError(f"Unsupported file type {filetype}")
        image = self
        parameters = {}
        if filetype == "jpeg":
            if not 0 <= quality <= 100:
                raise ValueError("Quality has to be between 0 and 100")
            parameters["quality"] = quality
            image = self.flattened((255, 255, 255))
        output_stream = io.BytesIO()
        image.to_pil().save(output_stream, format=filetype, **parameters)
        return output_stream.getvalue()

    def to_png(self) -> bytes:
        """
        Encodes the image as png.

        :return: The image as bytes object
        """
        return self.encode("png")

    def to_jpeg(self, quality: int = 90) -> bytes:
        """
        Encodes the image as jpeg.

        :param quality: The compression grade.
        :return: The image as bytes object
        """
        return self.encode("jpg", quality)

    def to_data_url(self, filetype: str = "png", quality: int = 90) -> str:
        """
        Encodes the image as data URL, e.g. for inline previews.

        :param filetype: The output file type
        :param quality: The compression grade (JPEG only)
        :return: The data URL
        """
        data = self.encode(filetype, quality)
        mime_type = detect_mime_type(data)
        return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"

    def get_hash(self) -> str:
        """
        Returns a hash uniquely identifying the image's pixels

        :return: The image's hash
        """
        return hashlib.md5(self._pil_handle.tobytes()).hexdigest()

    def __eq__(self, other):
        if not isinstance(other, Image):
            return NotImplemented
        return (
            self.mode == other.mode
            and self.size == other.size
            and self._pil_handle.tobytes() == other._pil_handle.tobytes()
        )

    __hash__ = object.__hash__

    def __str__(self):
        return f"Image ({self.width}x{self.height} {self.mode})"


def detect_mime_type(data: bytes) -> str:
    """Detect an image's MIME type from its magic bytes.

    :param data: Encoded image bytes
    :returns: MIME type string, application/octet-stream if unknown
    """
    kind = filetype.guess(data)
    if kind is None or not kind.mime.startswith("image/"):
        return "application/octet-stream"
    return kind.mime


__all__ = [
    "Image",
    "ImageSourceTypes",
    "SUPPORTED_IMAGE_FILETYPES",
    "detect_mime_type",
]
