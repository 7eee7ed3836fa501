"""Transition compositing between two adjacent slides."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .slide import TransitionKind

if TYPE_CHECKING:
    from .canvas import Canvas
    from .image import Image


class TransitionCompositor:
    """
    Renders a single transition frame from the current and the next slide.

    Both images have to match the canvas size. The progress runs from 0.0
    (transition just started) to 1.0 (transition finished).
    """

    def composite(
        self,
        canvas: Canvas,
        current: Image,
        nxt: Image,
        progress: float,
        effect: TransitionKind,
    ) -> None:
        """
        Draws the transition state onto the canvas.

        :param canvas: The target canvas, modified in place
        :param current: The slide being left
        :param nxt: The slide being entered
        :param progress: The transition progress between 0.0 and 1.0
        :param effect: The effect of the slide being left
        """
        if not 0.0 <= progress <= 1.0:
            raise ValueError(f"Progress {progress} outside of [0, 1]")
        effect = TransitionKind(effect)
        if effect == TransitionKind.NORMAL:
            canvas.draw_image(nxt)
        elif effect == TransitionKind.FADE_IN:
            canvas.draw_image(current)
            with canvas.alpha(progress):
                canvas.draw_image(nxt)
        elif effect == TransitionKind.FADE_OUT:
            canvas.draw_image(nxt)
            with canvas.alpha(1.0 - progress):
                canvas.draw_image(current)
        else:
            raise NotImplementedError(f"Unsupported transition {effect}")


__all__ = ["TransitionCompositor"]
