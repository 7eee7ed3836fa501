"""
GIF encoding - the boundary between frame synthesis and the GIF file format.

The timeline only depends on :class:`GifEncoder`. Palette quantization and
the GIF bitstream itself are left to Pillow.
"""

from __future__ import annotations

import asyncio
import base64
import concurrent.futures
import io
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Generic, Sequence, TypeVar

import PIL.Image

from .exceptions import EncodeFailure, GifStagError
from .image import Image
from .timeline import Frame

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]
"Receives the encoding progress in percent (0 to 100)"

T = TypeVar("T")


def frame_duration_ms(frame_interval_seconds: float) -> int:
    """
    Converts a frame interval to the delay written into the GIF.

    GIF delays are stored in whole centiseconds, so the interval is rounded
    to the nearest 10 ms, at least 10 ms.

    :param frame_interval_seconds: Display time of a frame
    :return: The delay in milliseconds, a multiple of 10
    """
    return max(1, round(frame_interval_seconds * 100)) * 10


@dataclass(frozen=True)
class EncodedGif:
    """An encoded, ready to download GIF."""

    data: bytes
    width: int
    height: int
    frame_count: int
    frame_interval_seconds: float
    mime_type: str = "image/gif"

    @property
    def size_bytes(self) -> int:
        return len(self.data)

    @property
    def duration_seconds(self) -> float:
        return self.frame_count * self.frame_interval_seconds

    def save(self, target: str | Path) -> Path:
        """
        Writes the GIF to disk

        :param target: The file name
        :return: The path written to
        """
        path = Path(target)
        path.write_bytes(self.data)
        return path

    def to_data_url(self) -> str:
        """Returns the GIF as data URL for inline display."""
        return f"data:{self.mime_type};base64,{base64.b64encode(self.data).decode('ascii')}"


class GifEncoder(ABC):
    """Turns an ordered frame sequence into a GIF file."""

    @abstractmethod
    def encode(
        self,
        frames: Sequence[Frame | Image],
        width: int,
        height: int,
        frame_interval_seconds: float,
        on_progress: ProgressCallback | None = None,
    ) -> EncodedGif:
        """
        Encodes the frames.

        :param frames: The frames in display order, all width x height
        :param width: The GIF's width
        :param height: The GIF's height
        :param frame_interval_seconds: Display time of every frame
        :param on_progress: Called zero or more times while encoding and
            exactly once with 100 on success
        :return: The encoded GIF
        :raises EncodeFailure: If the GIF could not be created
        """
        ...


class PillowGifEncoder(GifEncoder):
    """
    Encodes looping GIFs with Pillow.

    :param loop: Number of loops, 0 loops forever
    :param colors: Palette size per frame
    """

    def __init__(self, loop: int = 0, colors: int = 256):
        self.loop = loop
        self.colors = colors

    def encode(
        self,
        frames: Sequence[Frame | Image],
        width: int,
        height: int,
        frame_interval_seconds: float,
        on_progress: ProgressCallback | None = None,
    ) -> EncodedGif:
        if not frames:
            raise EncodeFailure("No frames to encode")
        if frame_interval_seconds <= 0:
            raise EncodeFailure(f"Invalid frame interval {frame_interval_seconds}")
        total = len(frames)
        paletted: list[PIL.Image.Image] = []
        for index, frame in enumerate(frames):
            image = frame.image if isinstance(frame, Frame) else frame
            if image.size != (width, height):
                raise EncodeFailure(
                    f"Frame {index} is {image.width}x{image.height}, "
                    f"expected {width}x{height}"
                )
            try:
                paletted.append(image.flattened().to_pil().quantize(colors=self.colors))
            except (OSError, ValueError) as e:
                raise EncodeFailure(f"Quantizing frame {index} failed: {e}") from e
            if on_progress is not None:
                # the last percents are reserved for writing the file
                on_progress(int((index + 1) * 90 / total))
        output_stream = io.BytesIO()
        try:
            paletted[0].save(
                output_stream,
                format="gif",
                save_all=True,
                append_images=paletted[1:],
                duration=frame_duration_ms(frame_interval_seconds),
                loop=self.loop,
                optimize=False,
                disposal=1,
            )
        except (OSError, ValueError) as e:
            raise EncodeFailure(f"Writing the GIF failed: {e}") from e
        data = output_stream.getvalue()
        if not data:
            raise EncodeFailure("The encoder produced no data")
        if on_progress is not None:
            on_progress(100)
        return EncodedGif(
            data=data,
            width=width,
            height=height,
            frame_count=total,
            frame_interval_seconds=frame_interval_seconds,
        )


class CompletionLatch(Generic[T]):
    """
    A single-use result channel which may be completed from any thread.

    The first :meth:`resolve` or :meth:`reject` wins, every later completion
    signal is ignored.

    :param loop: The event loop the result is awaited on
    """

    def __init__(self, loop: asyncio.AbstractEventLoop):
        self._loop = loop
        self._future: asyncio.Future[T] = loop.create_future()
        self._lock = threading.Lock()
        self._completed = False

    @property
    def completed(self) -> bool:
        return self._completed

    def _complete(self, setter: Callable[[Any], None], value: Any) -> bool:
        with self._lock:
            if self._completed:
                return False
            self._completed = True

        def apply():
            if not self._future.done():
                setter(value)

        try:
            self._loop.call_soon_threadsafe(apply)
        except RuntimeError:
            # the loop was closed, nobody waits for an abandoned result
            logger.debug("Dropping completion of an abandoned encode")
        return True

    def resolve(self, value: T) -> bool:
        """
        Completes with a result.

        :return: False if the latch was completed before
        """
        return self._complete(self._future.set_result, value)

    def reject(self, error: BaseException) -> bool:
        """
        Completes with an error.

        :return: False if the latch was completed before
        """
        return self._complete(self._future.set_exception, error)

    async def wait(self) -> T:
        """Waits for and returns the result, raising a rejection's error."""
        return await self._future


async def encode_async(
    encoder: GifEncoder,
    frames: Sequence[Frame | Image],
    width: int,
    height: int,
    frame_interval_seconds: float,
    on_progress: ProgressCallback | None = None,
    executor: concurrent.futures.Executor | None = None,
) -> EncodedGif:
    """
    Runs an encoder on a worker thread without blocking the event loop.

    Progress callbacks are delivered on the event loop's thread.

    :raises EncodeFailure: If the encoder failed
    """
    loop = asyncio.get_running_loop()
    latch: CompletionLatch[EncodedGif] = CompletionLatch(loop)

    def report(percent: int) -> None:
        if on_progress is not None and not latch.completed and not loop.is_closed():
            loop.call_soon_threadsafe(on_progress, percent)

    def job() -> None:
        try:
            latch.resolve(
                encoder.encode(frames, width, height, frame_interval_seconds, report)
            )
        except GifStagError as e:
            latch.reject(e)
        except Exception as e:
            logger.exception("Unexpected encoder error")
            latch.reject(EncodeFailure(f"Unexpected encoder error: {e}"))

    loop.run_in_executor(executor, job)
    return await latch.wait()


__all__ = [
    "EncodedGif",
    "GifEncoder",
    "PillowGifEncoder",
    "CompletionLatch",
    "encode_async",
    "ProgressCallback",
    "frame_duration_ms",
]
