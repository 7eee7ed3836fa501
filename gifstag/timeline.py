"""
Timeline construction - turns the slide sequence into the ordered list of
composited frames handed to the GIF encoder.

For every slide the timeline contains its hold frames followed by the
transition frames into the next slide. The sequence is circular, so the last
slide transitions back into the first one::

    hold 0, transition 0->1, hold 1, transition 1->2, ..., hold N-1, transition N-1->0
"""

from __future__ import annotations

import logging
import math
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Sequence

from .canvas import Canvas
from .compositor import TransitionCompositor
from .config import settings
from .cropper import crop_center
from .dimensions import CanvasSize
from .exceptions import BuildCancelled
from .image import Image
from .interpolation import InterpolationMethod
from .slide import SlideSpec, TransitionKind
from .text_layout import TextLayoutEngine
from .text_style import TextStyle, parse_color

logger = logging.getLogger(__name__)


class FrameKind(str, Enum):
    HOLD = "hold"
    TRANSITION = "transition"


@dataclass(frozen=True)
class FrameRequest:
    """Everything needed to render one frame."""

    slide_index: int
    next_index: int
    kind: FrameKind
    progress: float
    effect: TransitionKind
    caption: str
    caption_style: TextStyle
    caption_opacity: float


@dataclass(frozen=True)
class Frame:
    """A fully composited frame at canvas size."""

    index: int
    image: Image
    request: FrameRequest


def round_half_up(value: float) -> int:
    """Rounds to the nearest integer, halves away from zero for positives."""
    return math.floor(value + 0.5)


def hold_frame_count(duration_seconds: float, fps: float) -> int:
    """
    Number of hold frames of a slide.

    One second of the duration is taken up by the following transition, so
    only the remaining time is held.

    :param duration_seconds: The slide's duration, at least 1
    :param fps: Frames per second
    :return: The frame count
    """
    return max(0, round_half_up((duration_seconds - 1) * fps))


def transition_progress(step: int, transition_frame_count: int) -> float:
    """
    The progress of a transition frame, 0.0 for the first and 1.0 for the last.

    :param step: The frame's index within the transition
    :param transition_frame_count: Number of frames of the transition
    :return: The progress, 0.0 if the transition only has one frame
    """
    if transition_frame_count <= 1:
        return 0.0
    return step / (transition_frame_count - 1)


class TimelineBuilder:
    """
    Builds the frame sequence of a GIF from its slides.

    Example:
        builder = TimelineBuilder()
        frames = builder.build(slides, CanvasSize(640, 480), fps=10,
                               transition_frame_count=10)
    """

    def __init__(
        self,
        compositor: TransitionCompositor | None = None,
        text_engine: TextLayoutEngine | None = None,
        interpolation: InterpolationMethod = InterpolationMethod.LANCZOS,
        bg_color: str | None = None,
    ):
        self.compositor = compositor or TransitionCompositor()
        self.text_engine = text_engine or TextLayoutEngine()
        self.interpolation = interpolation
        self.bg_color = parse_color(bg_color or settings.BACKGROUND_COLOR)

    @staticmethod
    def _validate(fps: float, transition_frame_count: int) -> None:
        if fps <= 0:
            raise ValueError("fps has to be positive")
        if transition_frame_count < 1:
            raise ValueError("A transition needs at least one frame")

    def plan(
        self,
        slides: Sequence[SlideSpec],
        fps: float,
        transition_frame_count: int,
    ) -> list[FrameRequest]:
        """
        Computes the frame schedule without rendering anything.

        :param slides: The slides in display order
        :param fps: Frames per second
        :param transition_frame_count: Frames per transition
        :return: One request per frame, in output order
        """
        self._validate(fps, transition_frame_count)
        requests = []
        count = len(slides)
        for index, slide in enumerate(slides):
            next_index = (index + 1) % count
            for _ in range(hold_frame_count(slide.duration_seconds, fps)):
                requests.append(
                    FrameRequest(
                        slide_index=index,
                        next_index=next_index,
                        kind=FrameKind.HOLD,
                        progress=0.0,
                        effect=slide.effect,
                        caption=slide.caption,
                        caption_style=slide.caption_style,
                        caption_opacity=1.0,
                    )
                )
            for step in range(transition_frame_count):
                progress = transition_progress(step, transition_frame_count)
                requests.append(
                    FrameRequest(
                        slide_index=index,
                        next_index=next_index,
                        kind=FrameKind.TRANSITION,
                        progress=progress,
                        effect=slide.effect,
                        caption=slide.caption,
                        caption_style=slide.caption_style,
                        caption_opacity=1.0 - progress,
                    )
                )
        return requests

    def prepare_images(
        self, slides: Sequence[SlideSpec], canvas_size: CanvasSize
    ) -> list[Image]:
        """
        Crops every slide's image to the canvas. Images shared by several
        slides are only cropped once.

        :param slides: The slides
        :param canvas_size: The target canvas size
        :return: The cropped, opaque images in slide order
        """
        cropped: dict[int, Image] = {}
        result = []
        for slide in slides:
            key = id(slide.image)
            if key not in cropped:
                cropped[key] = crop_center(
                    slide.image.flattened(self.bg_color),
                    canvas_size.width,
                    canvas_size.height,
                    interpolation=self.interpolation,
                )
            result.append(cropped[key])
        return result

    def render(
        self, canvas: Canvas, request: FrameRequest, images: Sequence[Image]
    ) -> Image:
        """
        Renders a single frame.

        :param canvas: The canvas to draw on, it is cleared first
        :param request: The frame to render
        :param images: The cropped slide images
        :return: A snapshot of the rendered frame
        """
        canvas.clear()
        current = images[request.slide_index]
        if request.kind == FrameKind.HOLD:
            canvas.draw_image(current)
        else:
            self.compositor.composite(
                canvas,
                current,
                images[request.next_index],
                request.progress,
                request.effect,
            )
        self.text_engine.render(
            canvas, request.caption, request.caption_style, request.caption_opacity
        )
        return canvas.snapshot()

    def iter_frames(
        self,
        slides: Sequence[SlideSpec],
        canvas_size: CanvasSize,
        fps: float,
        transition_frame_count: int,
        cancel_event: threading.Event | None = None,
    ) -> Iterator[Frame]:
        """
        Lazily renders the frames of the timeline.

        :param slides: The slides in display order
        :param canvas_size: The target canvas size
        :param fps: Frames per second
        :param transition_frame_count: Frames per transition
        :param cancel_event: If set while rendering, BuildCancelled is raised
        :return: Iterator over the frames in output order
        """
        requests = self.plan(slides, fps, transition_frame_count)
        if not requests:
            return
        images = self.prepare_images(slides, canvas_size)
        canvas = Canvas(canvas_size.width, canvas_size.height, self.bg_color)
        for index, request in enumerate(requests):
            if cancel_event is not None and cancel_event.is_set():
                raise BuildCancelled("Frame synthesis was cancelled")
            image = self.render(canvas, request, images)
            yield Frame(index=index, image=image, request=request)

    def build(
        self,
        slides: Sequence[SlideSpec],
        canvas_size: CanvasSize,
        fps: float | None = None,
        transition_frame_count: int | None = None,
        cancel_event: threading.Event | None = None,
    ) -> list[Frame]:
        """
        Renders all frames of the timeline.

        :param slides: The slides in display order. Empty input gives an
            empty result.
        :param canvas_size: The target canvas size
        :param fps: Frames per second, the configured default if omitted
        :param transition_frame_count: Frames per transition, the configured
            default if omitted
        :param cancel_event: If set while rendering, BuildCancelled is raised
        :return: The frames in output order
        """
        fps = settings.DEFAULT_FPS if fps is None else fps
        if transition_frame_count is None:
            transition_frame_count = settings.DEFAULT_TRANSITION_FRAMES
        frames = list(
            self.iter_frames(
                slides, canvas_size, fps, transition_frame_count, cancel_event
            )
        )
        logger.info(
            f"Built {len(frames)} frames for {len(slides)} slides at "
            f"{canvas_size.width}x{canvas_size.height}"
        )
        return frames


__all__ = [
    "FrameKind",
    "FrameRequest",
    "Frame",
    "TimelineBuilder",
    "hold_frame_count",
    "transition_progress",
    "round_half_up",
]
