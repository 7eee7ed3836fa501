"""Slides and the ordered slide sequence."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Iterator, Mapping

from .config import settings
from .image import Image
from .text_style import TextStyle


class TransitionKind(str, Enum):
    """How a slide hands over to the next one."""

    NORMAL = "normal"  # Hard cut
    FADE_IN = "fade-in"  # Next slide fades in over the current one
    FADE_OUT = "fade-out"  # Current slide fades out, revealing the next one


@dataclass
class SlideSpec:
    """One image of the sequence with its timing, transition and caption."""

    image: Image
    effect: TransitionKind = TransitionKind.NORMAL
    duration_seconds: float = field(
        default_factory=lambda: settings.DEFAULT_DURATION_SECONDS
    )
    caption: str = ""
    caption_style: TextStyle = field(default_factory=TextStyle)
    name: str | None = None  # Original file name
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    EDITABLE_FIELDS = ("effect", "duration_seconds", "caption", "caption_style")

    def __post_init__(self):
        """Convert string values and validate."""
        if isinstance(self.effect, str):
            self.effect = TransitionKind(self.effect)
        if isinstance(self.caption_style, Mapping):
            self.caption_style = TextStyle.model_validate(dict(self.caption_style))
        self._validate_duration(self.duration_seconds)

    @staticmethod
    def _validate_duration(value: float) -> None:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"Invalid duration {value!r}")
        if value < 1:
            raise ValueError("A slide has to be shown for at least one second")
        if value > settings.MAX_DURATION_SECONDS:
            raise ValueError(
                f"A slide can be shown for at most {settings.MAX_DURATION_SECONDS} seconds"
            )

    def update(self, **changes: Any) -> None:
        """
        Merges the given fields into this slide, all others stay untouched.

        The caption style may be given as a partial mapping which is merged
        field by field into the current style.

        :raises ValueError: For unknown fields or invalid values
        """
        unknown = set(changes) - set(self.EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f"Unknown slide fields: {', '.join(sorted(unknown))}")
        effect = changes.get("effect", self.effect)
        effect = TransitionKind(effect)
        duration = changes.get("duration_seconds", self.duration_seconds)
        self._validate_duration(duration)
        caption = changes.get("caption", self.caption)
        if not isinstance(caption, str):
            raise ValueError("The caption has to be a string")
        style = changes.get("caption_style")
        if style is None:
            style = self.caption_style
        elif isinstance(style, Mapping):
            style = self.caption_style.merged(style)
        elif not isinstance(style, TextStyle):
            raise ValueError("Invalid caption style")
        # only assign once everything validated
        self.effect = effect
        self.duration_seconds = duration
        self.caption = caption
        self.caption_style = style

    def to_api_dict(self) -> dict[str, Any]:
        """Convert to dict for API response."""
        return {
            "id": self.id,
            "name": self.name,
            "width": self.image.width,
            "height": self.image.height,
            "effect": self.effect.value,
            "duration_seconds": self.duration_seconds,
            "caption": self.caption,
            "caption_style": self.caption_style.to_api_dict(),
        }


class SlideSequence:
    """
    The user's ordered slides. Insertion order is display order.

    For transitions the sequence is circular: the last slide hands over to
    the first one.
    """

    def __init__(self, slides: list[SlideSpec] | None = None):
        self._slides: list[SlideSpec] = list(slides or [])

    def __len__(self) -> int:
        return len(self._slides)

    def __iter__(self) -> Iterator[SlideSpec]:
        return iter(self._slides)

    def __getitem__(self, index: int) -> SlideSpec:
        return self._slides[index]

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._slides):
            raise IndexError(f"Slide index {index} out of range")

    def append(self, slide: SlideSpec) -> None:
        self._slides.append(slide)

    def extend(self, slides: list[SlideSpec]) -> None:
        self._slides.extend(slides)

    def move(self, from_index: int, to_index: int) -> None:
        """
        Moves a slide, the order of all other slides is kept.

        :param from_index: Current position of the slide
        :param to_index: Position of the slide after the move
        """
        self._check_index(from_index)
        self._check_index(to_index)
        slide = self._slides.pop(from_index)
        self._slides.insert(to_index, slide)

    def edit(self, index: int, **changes: Any) -> SlideSpec:
        """
        Merges changes into the slide at given index.

        :param index: The slide's position
        :param changes: See :meth:`SlideSpec.update`
        :return: The updated slide
        """
        self._check_index(index)
        slide = self._slides[index]
        slide.update(**changes)
        return slide

    def remove(self, index: int) -> SlideSpec:
        """Removes and returns the slide at given index."""
        self._check_index(index)
        return self._slides.pop(index)

    def clear(self) -> None:
        self._slides.clear()

    def index_of(self, slide_id: str) -> int:
        """
        Returns the position of the slide with given id.

        :raises KeyError: If no such slide exists
        """
        for index, slide in enumerate(self._slides):
            if slide.id == slide_id:
                return index
        raise KeyError(slide_id)

    def next_index(self, index: int) -> int:
        """The index of the slide the given one transitions into."""
        self._check_index(index)
        return (index + 1) % len(self._slides)

    def snapshot(self) -> list[SlideSpec]:
        """
        Returns shallow copies of all slides, e.g. to build from while the
        sequence is edited further.
        """
        return [
            SlideSpec(**{f.name: getattr(slide, f.name) for f in fields(slide)})
            for slide in self._slides
        ]

    @property
    def total_duration_seconds(self) -> float:
        return sum(slide.duration_seconds for slide in self._slides)


__all__ = ["TransitionKind", "SlideSpec", "SlideSequence"]
