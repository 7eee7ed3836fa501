"""
GifProject - the slides of one GIF together with the operations a user
performs on them: uploading, reordering, editing, previewing and exporting.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import functools
import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .config import settings
from .dimensions import CanvasSize, DimensionReconciler
from .encoder import (
    EncodedGif,
    GifEncoder,
    PillowGifEncoder,
    ProgressCallback,
    encode_async,
)
from .exceptions import EMPTY_SEQUENCE_MESSAGE, BuildCancelled, GifStagError
from .normalizer import ImageNormalizer, UploadItem, UploadOutcome
from .slide import SlideSequence, SlideSpec
from .timeline import TimelineBuilder

logger = logging.getLogger(__name__)


class BuildMode(str, Enum):
    PREVIEW = "preview"  # Rendered inline
    EXPORT = "export"  # Downloaded as file


class BuildStatus(str, Enum):
    OK = "ok"
    EMPTY = "empty"  # Nothing to build, not an error
    SUPERSEDED = "superseded"  # A newer build started, result dropped


@dataclass(frozen=True)
class BuildResult:
    """The outcome of a preview or export request."""

    mode: BuildMode
    status: BuildStatus
    generation: int
    gif: EncodedGif | None = None
    message: str | None = None
    file_name: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == BuildStatus.OK


def export_file_name(name: str | None = None) -> str:
    """Returns the download name, always ending with .gif"""
    name = name or settings.EXPORT_FILE_NAME
    return name if name.lower().endswith(".gif") else f"{name}.gif"


class GifProject:
    """
    Owns the slide sequence, the canvas reconciliation and the builds of a
    single GIF.

    Only the most recent build may publish its result. Starting a build
    cancels the one in flight, whose result is then reported as superseded.

    Example:
        project = GifProject()
        await project.add_images([("a.jpg", data_a), ("b.png", data_b)])
        project.edit(0, caption="Hello", effect="fade-in")
        result = await project.build(BuildMode.EXPORT)
        result.gif.save(result.file_name)

    :param encoder: The GIF encoder, Pillow based by default
    :param timeline: The frame synthesis, a default TimelineBuilder if None
    :param fps: Frames per second
    :param transition_frame_count: Frames per transition
    :param executor: Worker pool for decoding, rendering and encoding
    """

    def __init__(
        self,
        encoder: GifEncoder | None = None,
        timeline: TimelineBuilder | None = None,
        fps: float | None = None,
        transition_frame_count: int | None = None,
        executor: concurrent.futures.Executor | None = None,
    ):
        self.reconciler = DimensionReconciler()
        self.slides = SlideSequence()
        self.normalizer = ImageNormalizer(self.reconciler)
        self.timeline = timeline or TimelineBuilder()
        self.encoder = encoder or PillowGifEncoder()
        self.fps = settings.DEFAULT_FPS if fps is None else fps
        self.transition_frame_count = (
            settings.DEFAULT_TRANSITION_FRAMES
            if transition_frame_count is None
            else transition_frame_count
        )
        self._own_executor = executor is None
        self._executor = executor or concurrent.futures.ThreadPoolExecutor(
            max_workers=settings.WORKER_THREADS, thread_name_prefix="gifstag"
        )
        self._generation = 0
        self._build_task: asyncio.Task | None = None
        self._cancel_event: threading.Event | None = None
        self.preview: BuildResult | None = None
        "The last successful preview"

    @property
    def canvas(self) -> CanvasSize:
        """The size all frames are rendered at"""
        return self.reconciler.canvas

    @property
    def total_duration_seconds(self) -> float:
        return self.slides.total_duration_seconds

    @property
    def is_building(self) -> bool:
        return self._build_task is not None and not self._build_task.done()

    # ---- Sequence editing ----

    async def add_images(self, items: list[UploadItem]) -> list[UploadOutcome]:
        """
        Appends uploaded files as new slides, in upload order.

        Files which can not be decoded are reported in their outcome and
        skipped, the rest of the batch is added.

        :param items: File data or (name, data) tuples
        :return: One outcome per file
        """
        outcomes = await self.normalizer.normalize_batch(items, self._executor)
        self.slides.extend(
            [SlideSpec(image=o.image, name=o.name) for o in outcomes if o.ok]
        )
        return outcomes

    def add_image(self, raw: bytes, name: str | None = None) -> SlideSpec:
        """
        Synchronously appends a single uploaded file as new slide.

        :raises DecodeFailure: If the data is not a readable image
        """
        slide = SlideSpec(image=self.normalizer.normalize(raw, name), name=name)
        self.slides.append(slide)
        return slide

    def move(self, from_index: int, to_index: int) -> None:
        self.slides.move(from_index, to_index)

    def edit(self, index: int, **changes: Any) -> SlideSpec:
        return self.slides.edit(index, **changes)

    def remove(self, index: int) -> SlideSpec:
        """
        Removes a slide. The canvas size is not recomputed, it stays at the
        minimum of all images ever added.
        """
        return self.slides.remove(index)

    def clear(self) -> None:
        """Removes all slides and restores the default canvas size."""
        self.slides.clear()
        self.reconciler.reset()
        self.preview = None

    # ---- Building ----

    def _supersede(self) -> int:
        """Cancels the build in flight and returns the new generation."""
        self._generation += 1
        if self._cancel_event is not None:
            self._cancel_event.set()
        if self._build_task is not None and not self._build_task.done():
            self._build_task.cancel()
        return self._generation

    async def _render_and_encode(
        self,
        slides: list[SlideSpec],
        canvas: CanvasSize,
        cancel_event: threading.Event,
        on_progress: ProgressCallback | None,
    ) -> EncodedGif:
        loop = asyncio.get_running_loop()
        frames = await loop.run_in_executor(
            self._executor,
            functools.partial(
                self.timeline.build,
                slides,
                canvas,
                self.fps,
                self.transition_frame_count,
                cancel_event,
            ),
        )
        return await encode_async(
            self.encoder,
            frames,
            canvas.width,
            canvas.height,
            1.0 / self.fps,
            on_progress,
            self._executor,
        )

    async def build(
        self,
        mode: BuildMode = BuildMode.PREVIEW,
        on_progress: ProgressCallback | None = None,
    ) -> BuildResult:
        """
        Renders and encodes the GIF from the current slides.

        :param mode: Preview results are kept in :attr:`preview`, export
            results carry the download file name
        :param on_progress: Receives the encoding progress in percent
        :return: The result. Its status is EMPTY without slides and
            SUPERSEDED if a newer build started meanwhile.
        :raises EncodeFailure: If encoding failed, the sequence and the
            previous preview stay untouched
        """
        mode = BuildMode(mode)
        generation = self._supersede()
        if len(self.slides) == 0:
            return BuildResult(
                mode=mode,
                status=BuildStatus.EMPTY,
                generation=generation,
                message=EMPTY_SEQUENCE_MESSAGE,
            )
        cancel_event = threading.Event()
        self._cancel_event = cancel_event
        canvas = self.canvas
        logger.info(
            f"Starting {mode.value} #{generation} of {len(self.slides)} slides "
            f"at {canvas.width}x{canvas.height}"
        )
        task = asyncio.create_task(
            self._render_and_encode(
                self.slides.snapshot(), canvas, cancel_event, on_progress
            )
        )
        self._build_task = task
        superseded = BuildResult(
            mode=mode, status=BuildStatus.SUPERSEDED, generation=generation
        )
        try:
            gif = await task
        except asyncio.CancelledError:
            if generation != self._generation:
                return superseded
            cancel_event.set()
            raise
        except BuildCancelled:
            return superseded
        except GifStagError as e:
            logger.warning(f"{mode.value} #{generation} failed: {e}")
            raise
        if generation != self._generation:
            return superseded
        result = BuildResult(
            mode=mode,
            status=BuildStatus.OK,
            generation=generation,
            gif=gif,
            file_name=export_file_name() if mode == BuildMode.EXPORT else None,
        )
        if mode == BuildMode.PREVIEW:
            self.preview = result
        logger.info(
            f"Finished {mode.value} #{generation}: {gif.frame_count} frames, "
            f"{gif.size_bytes} bytes"
        )
        return result

    def cancel(self) -> None:
        """Abandons the build in flight, if any."""
        self._supersede()

    def close(self) -> None:
        """Cancels running work and releases the worker threads."""
        self._supersede()
        if self._own_executor:
            self._executor.shutdown(wait=False, cancel_futures=True)


__all__ = [
    "GifProject",
    "BuildMode",
    "BuildStatus",
    "BuildResult",
    "export_file_name",
]
