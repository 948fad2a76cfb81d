"""Shared fixtures: a small synthesized TrueType font.

The font maps ASCII letters, digits, a few punctuation marks and a handful
of Arabic letters to solid boxes, which is enough to exercise shaping,
rasterization and layout without shipping a real font file.
"""

import io
import string

import pytest
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen

from epl2label.domain import LoadedFont, Product
from epl2label.io.font import decode_font

UNITS_PER_EM = 1000
ASCENT = 800
DESCENT = -200
ADVANCE = 600
BOX = (60, 0, 540, 700)

# Arabic letters of the sample product names and currency, isolated forms only
ARABIC_CHARS = "ابتجدرعصيقلمنهة"
MAPPED_CHARS = string.ascii_letters + string.digits + ".,-" + ARABIC_CHARS


def _box_glyph(x0: int, y0: int, x1: int, y1: int):
    pen = TTGlyphPen(None)
    pen.moveTo((x0, y0))
    pen.lineTo((x0, y1))
    pen.lineTo((x1, y1))
    pen.lineTo((x1, y0))
    pen.closePath()
    return pen.glyph()


def build_test_font(family: str = "Label Test") -> bytes:
    """Build a TrueType font whose mapped glyphs are all filled boxes."""
    names = {char: f"uni{ord(char):04X}" for char in MAPPED_CHARS}
    glyph_order = [".notdef", "space", *names.values()]

    glyphs = {".notdef": _box_glyph(*BOX), "space": TTGlyphPen(None).glyph()}
    metrics = {".notdef": (ADVANCE, BOX[0]), "space": (ADVANCE // 2, 0)}
    for name in names.values():
        glyphs[name] = _box_glyph(*BOX)
        metrics[name] = (ADVANCE, BOX[0])

    cmap = {ord(" "): "space"}
    cmap.update({ord(char): name for char, name in names.items()})

    builder = FontBuilder(UNITS_PER_EM, isTTF=True)
    builder.setupGlyphOrder(glyph_order)
    builder.setupCharacterMap(cmap)
    builder.setupGlyf(glyphs)
    builder.setupHorizontalMetrics(metrics)
    builder.setupHorizontalHeader(ascent=ASCENT, descent=DESCENT)
    builder.setupNameTable({"familyName": family, "styleName": "Regular"})
    builder.setupOS2(
        sTypoAscender=ASCENT,
        sTypoDescender=DESCENT,
        usWinAscent=ASCENT,
        usWinDescent=-DESCENT,
    )
    builder.setupPost()

    buffer = io.BytesIO()
    builder.save(buffer)
    return buffer.getvalue()


@pytest.fixture(scope="session")
def font_bytes() -> bytes:
    return build_test_font()


@pytest.fixture(scope="session")
def loaded_font(font_bytes: bytes) -> LoadedFont:
    return decode_font(font_bytes, source="label-test.ttf")


@pytest.fixture
def font_file(tmp_path, font_bytes: bytes):
    path = tmp_path / "label-test.ttf"
    path.write_bytes(font_bytes)
    return path


@pytest.fixture
def two_products() -> tuple[Product, Product]:
    return (
        Product(name="عصير برتقال", price="5.00", barcode="622300123456"),
        Product(name="مياه معدنية", price="3.50", barcode="622300654321"),
    )


@pytest.fixture
def four_products() -> tuple[Product, ...]:
    return (
        Product(name="عصير", price="5.00", barcode="622300123456"),
        Product(name="مياه", price="3.50", barcode="622300654321"),
        Product(name="Tea", price="12.00", barcode="4006381333931"),
        Product(name="لبن", price="8.25", barcode="5901234123457"),
    )
