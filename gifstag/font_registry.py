"""
Font registry for resolving caption fonts in GifStag.

This module provides a font registry that:
1. Maps the CSS font families offered to users to TrueType files
2. Searches the system font directories through PIL
3. Falls back to PIL's bundled default font if nothing matches
4. Caches fonts for performance
"""

from __future__ import annotations

import io
import logging
from threading import RLock

import PIL.ImageFont

logger = logging.getLogger(__name__)

FontHandle = PIL.ImageFont.FreeTypeFont | PIL.ImageFont.ImageFont

# Candidate files per family, metric compatible substitutes after the originals
SANS_REGULAR = ["arial.ttf", "Arial.ttf", "LiberationSans-Regular.ttf", "DejaVuSans.ttf"]
SANS_BOLD = ["arialbd.ttf", "Arial Bold.ttf", "LiberationSans-Bold.ttf", "DejaVuSans-Bold.ttf"]
SERIF_REGULAR = ["times.ttf", "Times New Roman.ttf", "LiberationSerif-Regular.ttf", "DejaVuSerif.ttf"]
SERIF_BOLD = ["timesbd.ttf", "Times New Roman Bold.ttf", "LiberationSerif-Bold.ttf", "DejaVuSerif-Bold.ttf"]


class RegisteredFont:
    """
    A registered font face with a regular and an optional bold variation.

    Upon request it creates PIL font handles of the requested size.
    """

    def __init__(
        self,
        font_face: str,
        regular: list[str | bytes],
        bold: list[str | bytes] | None = None,
    ):
        """
        :param font_face: The font's face name, e.g. Arial
        :param regular: File names, paths or raw font data of the regular
            variation, tried in order
        :param bold: Candidates of the bold variation. The regular ones are
            used if none is given or none can be loaded.
        """
        self.font_face = font_face
        self.regular = list(regular)
        self.bold = list(bold or [])

    def get_handle(self, size: int, bold: bool = False) -> FontHandle | None:
        """
        Tries to create a font handle for this font.

        :param size: The font's size in pixels
        :param bold: Defines if the bold variation is preferred
        :return: On success the handle of the font
        """
        candidates = (self.bold + self.regular) if bold else self.regular
        for candidate in candidates:
            try:
                if isinstance(candidate, bytes):
                    return PIL.ImageFont.truetype(io.BytesIO(candidate), size)
                return PIL.ImageFont.truetype(candidate, size)
            except OSError:
                continue
        return None


class FontRegistry:
    """
    Manages all fonts which can be used for captions.

    Unknown or unavailable families never fail, they resolve to PIL's default
    font.
    """

    access_lock = RLock()
    "Multi-thread access lock"
    _base_fonts_registered = False
    "Defines if the base fonts were configured already"
    fonts: dict[str, RegisteredFont] = {}
    "Dictionary of registered fonts by lower case face name"
    _cached_fonts: dict[tuple[str, int, bool], FontHandle] = {}
    "Font handles by face, size and weight"
    _warned: set[str] = set()
    "Faces for which a fallback warning was logged"

    @classmethod
    def register_font(
        cls,
        font_face: str,
        regular: list[str | bytes],
        bold: list[str | bytes] | None = None,
    ):
        """
        Registers a single font.

        :param font_face: The font's face name, e.g. Roboto
        :param regular: Candidates of the regular variation
        :param bold: Candidates of the bold variation
        """
        cls._ensure_setup()
        key = font_face.lower()
        with cls.access_lock:
            if key in cls.fonts:
                raise ValueError(f"Font '{font_face}' was already registered")
            cls.fonts[key] = RegisteredFont(font_face, regular, bold)

    @classmethod
    def unregister_font(cls, font_face: str) -> None:
        """Removes a font and its cached handles."""
        key = font_face.lower()
        with cls.access_lock:
            cls.fonts.pop(key, None)
            for cache_key in [k for k in cls._cached_fonts if k[0] == key]:
                del cls._cached_fonts[cache_key]

    @classmethod
    def get_font(cls, font_face: str, size: int, bold: bool = False) -> FontHandle:
        """
        Returns a font handle for given face.

        :param font_face: The font's face, e.g. "Times New Roman"
        :param size: The font's size in pixels
        :param bold: Defines if the bold variation is preferred
        :return: The font handle, PIL's default font if the face is unavailable
        """
        cls._ensure_setup()
        key = font_face.lower()
        cache_key = (key, size, bold)
        with cls.access_lock:
            if cache_key in cls._cached_fonts:
                return cls._cached_fonts[cache_key]
            reg_font = cls.fonts.get(key)
        font = reg_font.get_handle(size, bold) if reg_font is not None else None
        if font is None:
            with cls.access_lock:
                if key not in cls._warned:
                    cls._warned.add(key)
                    logger.warning(
                        f"Font '{font_face}' not available, using the default font"
                    )
            font = PIL.ImageFont.load_default(size=size)
        with cls.access_lock:
            cls._cached_fonts[cache_key] = font
        return font

    @classmethod
    def get_fonts(cls) -> dict[str, RegisteredFont]:
        """
        Returns all registered fonts.

        :return: A dictionary of all registered fonts by lower case face name
        """
        cls._ensure_setup()
        with cls.access_lock:
            return dict(cls.fonts)

    @classmethod
    def clear_cache(cls) -> None:
        """Drops all cached font handles."""
        with cls.access_lock:
            cls._cached_fonts.clear()
            cls._warned.clear()

    @classmethod
    def _ensure_setup(cls):
        """Ensures the standard fonts were set up."""
        with cls.access_lock:
            if not cls._base_fonts_registered:
                cls._base_fonts_registered = True
                cls._register_base_fonts()

    @classmethod
    def _register_base_fonts(cls):
        """Registers the families offered in the caption dialog."""
        cls.fonts["arial"] = RegisteredFont("Arial", SANS_REGULAR, SANS_BOLD)
        cls.fonts["helvetica"] = RegisteredFont(
            "Helvetica", ["Helvetica.ttf", "helvetica.ttf"] + SANS_REGULAR, SANS_BOLD
        )
        cls.fonts["times new roman"] = RegisteredFont(
            "Times New Roman", SERIF_REGULAR, SERIF_BOLD
        )


__all__ = ["FontRegistry", "RegisteredFont", "FontHandle"]
