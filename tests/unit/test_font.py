"""Unit tests for font loading."""

import io
from pathlib import Path
from unittest.mock import patch

import pytest
from fontTools.ttLib import TTFont

from epl2label.exceptions import FontDecodeError
from epl2label.io.font import decode_font, load_font


class TestDecodeFont:
    """Tests for decode_font."""

    def test_metrics(self, font_bytes: bytes) -> None:
        """Test metrics and names are read from the font tables."""
        font = decode_font(font_bytes)
        assert font.family_name == "Label Test"
        assert font.units_per_em == 1000
        assert font.ascender == 800
        assert font.descender == -200
        assert font.glyph_count > 60

    def test_codepoints(self, font_bytes: bytes) -> None:
        """Test the cmap is captured."""
        font = decode_font(font_bytes)
        assert ord("A") in font.codepoints
        assert ord("ع") in font.codepoints
        assert ord("€") not in font.codepoints

    def test_keeps_bytes(self, font_bytes: bytes) -> None:
        assert decode_font(font_bytes).data == font_bytes

    def test_empty(self) -> None:
        with pytest.raises(FontDecodeError, match="empty"):
            decode_font(b"")

    def test_garbage(self) -> None:
        """Test bytes that are not a font are rejected with the source name."""
        with pytest.raises(FontDecodeError) as exc_info:
            decode_font(b"definitely not a font", source="broken.ttf")
        assert exc_info.value.source == "broken.ttf"

    def test_missing_tables(self, font_bytes: bytes) -> None:
        """Test fonts without a cmap are rejected."""
        font = TTFont(io.BytesIO(font_bytes))
        del font["cmap"]
        buffer = io.BytesIO()
        font.save(buffer)

        with pytest.raises(FontDecodeError, match="cmap"):
            decode_font(buffer.getvalue())

    @patch("epl2label.io.font.TTFont")
    def test_font_closed(self, mock_ttfont, font_bytes: bytes) -> None:
        """Test the fontTools handle is closed after decoding."""
        mock_font = mock_ttfont.return_value
        mock_font.__contains__.return_value = False
        with pytest.raises(FontDecodeError):
            decode_font(font_bytes)
        mock_font.close.assert_called_once()


class TestLoadFont:
    """Tests for load_font."""

    def test_load(self, font_file: Path) -> None:
        font = load_font(font_file)
        assert font.family_name == "Label Test"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_font(tmp_path / "missing.ttf")
