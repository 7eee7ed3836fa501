"""
TextStyle - Typography of a slide's caption.

The style is a closed record of seven fields which are all defaulted when a
slide is created. Updates merge field by field and never add new keys.
"""

from enum import Enum
from typing import Any, Literal, Mapping

import PIL.ImageColor
from pydantic import BaseModel, Field, field_validator


class HorizontalAlign(str, Enum):
    """Horizontal alignment of a caption line relative to the canvas center."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"
    START = "start"
    END = "end"

    def to_pil_anchor(self) -> str:
        """The horizontal part of a PIL text anchor"""
        return {
            HorizontalAlign.LEFT: "l",
            HorizontalAlign.START: "l",
            HorizontalAlign.CENTER: "m",
            HorizontalAlign.RIGHT: "r",
            HorizontalAlign.END: "r",
        }[self]


class VerticalAnchor(str, Enum):
    """Which part of a caption line sits on the line's y coordinate."""

    TOP = "top"
    HANGING = "hanging"
    MIDDLE = "middle"
    ALPHABETIC = "alphabetic"
    IDEOGRAPHIC = "ideographic"
    BOTTOM = "bottom"

    def to_pil_anchor(self) -> str:
        """The vertical part of a PIL text anchor"""
        return {
            VerticalAnchor.TOP: "a",
            VerticalAnchor.HANGING: "t",
            VerticalAnchor.MIDDLE: "m",
            VerticalAnchor.ALPHABETIC: "s",
            VerticalAnchor.IDEOGRAPHIC: "d",
            VerticalAnchor.BOTTOM: "d",
        }[self]


def parse_color(value: str) -> tuple[int, int, int]:
    """
    Converts a CSS color such as "#ff0000" or "white" to an RGB tuple

    :param value: The color string
    :return: The color as (r, g, b)
    """
    rgb = PIL.ImageColor.getrgb(value)
    return rgb[0], rgb[1], rgb[2]


class TextStyle(BaseModel):
    """
    Caption typography.

    Accepts the field names as well as the camel case names used by
    browser clients (fontSize, fillStyle, strokeStyle, textAlign, ...).
    """

    font_size: int = Field(default=30, gt=0, alias="fontSize")
    font_weight: Literal["normal", "bold", "bolder"] = Field(
        default="bold", alias="fontWeight"
    )
    font_family: str = Field(default="Arial", min_length=1, alias="fontFamily")
    fill_color: str = Field(default="#ffffff", alias="fillStyle")
    stroke_color: str = Field(default="#000000", alias="strokeStyle")
    horizontal_align: HorizontalAlign = Field(
        default=HorizontalAlign.CENTER, alias="textAlign"
    )
    vertical_anchor: VerticalAnchor = Field(
        default=VerticalAnchor.BOTTOM, alias="textBaseline"
    )

    model_config = {
        "populate_by_name": True,
        "extra": "forbid",
        "frozen": True,
    }

    @field_validator("fill_color", "stroke_color")
    @classmethod
    def _validate_color(cls, v: str) -> str:
        try:
            parse_color(v)
        except ValueError as e:
            raise ValueError(f"Invalid color {v!r}") from e
        return v

    @property
    def is_bold(self) -> bool:
        return self.font_weight in ("bold", "bolder")

    @property
    def fill_rgb(self) -> tuple[int, int, int]:
        return parse_color(self.fill_color)

    @property
    def stroke_rgb(self) -> tuple[int, int, int]:
        return parse_color(self.stroke_color)

    @property
    def stroke_width(self) -> float:
        """Outline width, an eighth of the font size"""
        return self.font_size / 8

    def merged(self, changes: Mapping[str, Any] | None = None, **kwargs) -> "TextStyle":
        """
        Returns a copy with the given fields replaced.

        :param changes: Field values by field name or camel case alias
        :param kwargs: Further field values
        :return: The new style
        :raises ValueError: For unknown fields or invalid values
        """
        updates = dict(changes or {})
        updates.update(kwargs)
        names = {}
        for name, info in type(self).model_fields.items():
            names[name] = name
            if info.alias:
                names[info.alias] = name
        data = self.model_dump()
        for key, value in updates.items():
            if key not in names:
                raise ValueError(f"Unknown text style field {key!r}")
            data[names[key]] = value
        return type(self).model_validate(data)

    def to_api_dict(self) -> dict[str, Any]:
        """Serializes the style using the camel case names."""
        return self.model_dump(by_alias=True, mode="json")
