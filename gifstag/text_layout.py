"""
Lays out and renders slide captions.

Captions are word wrapped to 90% of the canvas width and drawn from the
bottom up, each line outlined and filled, horizontally centered.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .config import settings
from .font_registry import FontHandle, FontRegistry
from .text_style import TextStyle

if TYPE_CHECKING:
    from .canvas import Canvas


class TextLayoutEngine:
    """
    Word wraps captions and draws them onto a canvas.

    :param margin: Distance of the last line to the canvas' bottom edge
    :param line_height: Line distance as multiple of the font size
    :param max_width_ratio: Maximum line width as fraction of the canvas width
    """

    def __init__(
        self,
        margin: int | None = None,
        line_height: float | None = None,
        max_width_ratio: float | None = None,
    ):
        self.margin = settings.CAPTION_MARGIN if margin is None else margin
        self.line_height = settings.LINE_HEIGHT if line_height is None else line_height
        self.max_width_ratio = (
            settings.TEXT_MAX_WIDTH_RATIO if max_width_ratio is None else max_width_ratio
        )

    @staticmethod
    def font_for(style: TextStyle) -> FontHandle:
        """Returns the font a style renders with."""
        return FontRegistry.get_font(style.font_family, style.font_size, style.is_bold)

    def measure(self, text: str, style: TextStyle) -> float:
        """
        Returns the rendered width of a single line.

        :param text: The line
        :param style: The style to measure with
        :return: The width in pixels
        """
        return self.font_for(style).getlength(text)

    def layout(self, text: str, style: TextStyle, canvas_width: int) -> list[str]:
        """
        Greedily wraps the text into lines fitting the width budget.

        A single word wider than the budget is kept on a line of its own.

        :param text: The caption
        :param style: The caption's style
        :param canvas_width: The canvas width in pixels
        :return: The lines in reading order, empty for empty text
        """
        words = text.split()
        if not words:
            return []
        font = self.font_for(style)
        max_width = canvas_width * self.max_width_ratio
        lines = []
        current = words[0]
        for word in words[1:]:
            candidate = f"{current} {word}"
            if font.getlength(candidate) <= max_width:
                current = candidate
            else:
                lines.append(current)
                current = word
        lines.append(current)
        return lines

    def line_positions(
        self, line_count: int, style: TextStyle, canvas_width: int, canvas_height: int
    ) -> list[tuple[float, float]]:
        """
        Computes the anchor point of each line, the last line sits at the
        bottom margin and earlier lines stack upwards.

        :param line_count: Number of lines
        :param style: The caption's style
        :param canvas_width: Canvas width in pixels
        :param canvas_height: Canvas height in pixels
        :return: The (x, y) anchor per line in reading order
        """
        step = style.font_size * self.line_height
        bottom = canvas_height - self.margin
        x = canvas_width / 2
        return [
            (x, bottom - (line_count - 1 - index) * step) for index in range(line_count)
        ]

    def render(
        self, canvas: Canvas, text: str, style: TextStyle, opacity: float = 1.0
    ) -> int:
        """
        Draws the caption onto the canvas.

        :param canvas: The target canvas
        :param text: The caption, nothing is drawn if it is empty
        :param style: The caption's style
        :param opacity: Caption opacity between 0.0 and 1.0
        :return: The number of lines drawn
        """
        lines = self.layout(text, style, canvas.width)
        if not lines or opacity <= 0.0:
            return 0
        font = self.font_for(style)
        anchor = (
            style.horizontal_align.to_pil_anchor() + style.vertical_anchor.to_pil_anchor()
        )
        stroke_width = max(1, round(style.stroke_width))
        layer, draw = canvas.new_layer()
        positions = self.line_positions(len(lines), style, canvas.width, canvas.height)
        for line, position in zip(lines, positions):
            draw.text(
                position,
                line,
                font=font,
                fill=style.fill_rgb + (255,),
                anchor=anchor,
                stroke_width=stroke_width,
                stroke_fill=style.stroke_rgb + (255,),
            )
        with canvas.alpha(opacity):
            canvas.draw_layer(layer)
        return len(lines)


__all__ = ["TextLayoutEngine"]
