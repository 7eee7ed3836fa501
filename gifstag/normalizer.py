"""
Upload intake - decodes uploaded files, optionally downsizes them and reports
their dimensions to the canvas reconciliation.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import io
import logging
from dataclasses import dataclass
from typing import Iterable

import PIL.Image
import PIL.ImageOps

from .config import settings
from .dimensions import DimensionReconciler
from .exceptions import CompressionFailure, DecodeFailure, GifStagError
from .image import Image, detect_mime_type

logger = logging.getLogger(__name__)

UploadItem = bytes | tuple[str | None, bytes]
"Raw file data, optionally together with the file name"


@dataclass
class UploadOutcome:
    """The result of normalizing one uploaded file."""

    name: str | None
    image: Image | None = None
    error: GifStagError | None = None

    @property
    def ok(self) -> bool:
        return self.image is not None

    @property
    def message(self) -> str | None:
        """A short user facing message if the upload failed"""
        return self.error.user_message if self.error is not None else None


class ImageNormalizer:
    """
    Turns uploaded file data into decoded images.

    :param reconciler: Receives the dimensions of every decoded image
    :param compress: Defines if large uploads are downscaled and recompressed
    :param max_dimension: Maximum width or height after compression
    :param jpeg_quality: JPEG quality used for recompression
    """

    def __init__(
        self,
        reconciler: DimensionReconciler,
        compress: bool | None = None,
        max_dimension: int | None = None,
        jpeg_quality: int | None = None,
    ):
        self.reconciler = reconciler
        self.compress = settings.COMPRESS_UPLOADS if compress is None else compress
        self.max_dimension = (
            settings.MAX_UPLOAD_DIMENSION if max_dimension is None else max_dimension
        )
        self.jpeg_quality = (
            settings.UPLOAD_JPEG_QUALITY if jpeg_quality is None else jpeg_quality
        )

    def decode(self, raw: bytes, name: str | None = None) -> Image:
        """
        Decodes file data without compressing it. EXIF orientation is applied.

        :param raw: The file data
        :param name: The file name, used for messages
        :return: The decoded image
        :raises DecodeFailure: If the data is not a readable image
        """
        if not raw:
            raise DecodeFailure(f"{name or 'Upload'} is empty")
        if len(raw) > settings.MAX_UPLOAD_BYTES:
            raise DecodeFailure(
                f"{name or 'Upload'} is too large: {len(raw)} bytes",
                user_message="The file is too large",
            )
        try:
            with PIL.Image.open(io.BytesIO(raw)) as pil_image:
                pil_image.load()
                transposed = PIL.ImageOps.exif_transpose(pil_image)
            image = Image(transposed)
        except (
            PIL.UnidentifiedImageError,
            PIL.Image.DecompressionBombError,
            OSError,
            ValueError,
            SyntaxError,
        ) as e:
            raise DecodeFailure(
                f"{name or 'Upload'} ({detect_mime_type(raw)}) could not be decoded: {e}"
            ) from e
        if name:
            image.metadata["name"] = name
        return image

    def compressed(self, image: Image) -> Image:
        """
        Downscales the image to the maximum dimension and recompresses it
        as JPEG. Transparent regions are filled with the background color.

        :param image: The decoded image
        :return: The smaller image, the image itself if it is small enough
        :raises CompressionFailure: If scaling or recompression failed
        """
        if max(image.width, image.height) <= self.max_dimension:
            return image
        try:
            scale = self.max_dimension / max(image.width, image.height)
            size = (
                max(1, round(image.width * scale)),
                max(1, round(image.height * scale)),
            )
            opaque = image.flattened(settings.BACKGROUND_COLOR)
            data = opaque.resized(size).to_jpeg(self.jpeg_quality)
            result = Image(data)
        except (OSError, ValueError) as e:
            raise CompressionFailure(f"Compression failed: {e}") from e
        result.metadata.update(image.metadata)
        return result

    def _normalize(self, raw: bytes, name: str | None) -> Image:
        """Decodes and compresses without reporting the dimensions."""
        image = self.decode(raw, name)
        if not self.compress:
            return image
        try:
            return self.compressed(image)
        except CompressionFailure as e:
            logger.warning(f"{name or 'Upload'}: {e}, using the original image")
            return image

    def normalize(self, raw: bytes, name: str | None = None) -> Image:
        """
        Decodes, optionally compresses and registers a single upload.

        Compression failures fall back to the original image.

        :param raw: The file data
        :param name: The file name
        :return: The decoded image
        :raises DecodeFailure: If the data is not a readable image
        """
        image = self._normalize(raw, name)
        self.reconciler.observe(image.width, image.height)
        return image

    async def normalize_batch(
        self,
        items: Iterable[UploadItem],
        executor: concurrent.futures.Executor | None = None,
    ) -> list[UploadOutcome]:
        """
        Normalizes several uploads concurrently on worker threads.

        A failing upload does not affect the others. Outcomes and dimension
        reports follow the order of the input.

        :param items: File data or (name, data) tuples
        :param executor: The executor to decode on, the loop's default if None
        :return: One outcome per input item, in input order
        """
        loop = asyncio.get_running_loop()
        named = [item if isinstance(item, tuple) else (None, item) for item in items]
        tasks = [
            loop.run_in_executor(executor, self._normalize, raw, name)
            for name, raw in named
        ]
        results = await asyncio.gather(*tasks, return_exceptions=True)
        outcomes = []
        for (name, _), result in zip(named, results):
            if isinstance(result, GifStagError):
                logger.warning(f"Upload {name or ''} rejected: {result}")
                outcomes.append(UploadOutcome(name=name, error=result))
            elif isinstance(result, BaseException):
                raise result
            else:
                self.reconciler.observe(result.width, result.height)
                outcomes.append(UploadOutcome(name=name, image=result))
        logger.debug(
            f"Normalized {sum(o.ok for o in outcomes)} of {len(outcomes)} uploads"
        )
        return outcomes


__all__ = ["ImageNormalizer", "UploadOutcome", "UploadItem"]
