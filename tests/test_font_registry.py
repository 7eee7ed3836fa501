# Tests for the font registry
"""
Test resolving caption fonts including the fallback for missing families.
"""

import logging

import pytest

from gifstag import FontRegistry


@pytest.fixture(autouse=True)
def clean_cache():
    """Every test starts without cached font handles."""
    FontRegistry.clear_cache()
    yield
    FontRegistry.clear_cache()


class TestFontRegistry:
    """Tests for FontRegistry."""

    def test_base_fonts(self):
        """The families offered to users are always registered."""
        fonts = FontRegistry.get_fonts()
        assert {"arial", "helvetica", "times new roman"} <= set(fonts)

    @pytest.mark.parametrize("family", ["Arial", "Helvetica", "Times New Roman"])
    def test_base_fonts_resolve(self, family):
        """A usable font is returned even if the system lacks the files."""
        font = FontRegistry.get_font(family, 24, bold=True)
        assert font.getlength("Hello") > 0

    def test_unknown_family_falls_back(self, caplog):
        with caplog.at_level(logging.WARNING, logger="gifstag.font_registry"):
            font = FontRegistry.get_font("No Such Font", 20)
            FontRegistry.get_font("No Such Font", 22)
        assert font.getlength("Hello") > 0
        warnings = [r for r in caplog.records if "No Such Font" in r.getMessage()]
        assert len(warnings) == 1

    def test_cached(self):
        first = FontRegistry.get_font("Arial", 18)
        assert FontRegistry.get_font("arial", 18) is first

    def test_sizes_are_cached_separately(self):
        assert FontRegistry.get_font("Arial", 18) is not FontRegistry.get_font(
            "Arial", 36
        )

    def test_register_and_unregister(self):
        FontRegistry.register_font("Test Face", ["does-not-exist.ttf"])
        try:
            assert "test face" in FontRegistry.get_fonts()
            with pytest.raises(ValueError):
                FontRegistry.register_font("test face", ["other.ttf"])
            assert FontRegistry.get_font("Test Face", 12).getlength("a") > 0
        finally:
            FontRegistry.unregister_font("Test Face")
        assert "test face" not in FontRegistry.get_fonts()
