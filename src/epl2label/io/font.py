"""Font loading for label composition.

Fonts are decoded once with fonttools (validation, metrics, cmap) and
handed around as immutable LoadedFont values, so a batch of labels shares a
single parsed font.
"""

import io
from pathlib import Path

from fontTools.ttLib import TTFont, TTLibError

from epl2label.domain.font import LoadedFont
from epl2label.exceptions import FontDecodeError

# Name table IDs read for the family name, preferred first
NAME_ID_TYPOGRAPHIC_FAMILY = 16
NAME_ID_FAMILY = 1

# Tables a font needs to be laid out and rasterized
REQUIRED_TABLES = ("head", "hhea", "hmtx", "maxp", "cmap")


def _family_name(font: TTFont) -> str:
    if "name" not in font:
        return "unknown"
    name_table = font["name"]
    for name_id in (NAME_ID_TYPOGRAPHIC_FAMILY, NAME_ID_FAMILY):
        record = name_table.getDebugName(name_id)
        if record:
            return record
    return "unknown"


def decode_font(data: bytes, source: str = "<bytes>") -> LoadedFont:
    """Parse and validate font bytes.

    Args:
        data: Raw TTF/OTF bytes
        source: Label used in error messages (usually the file path)

    Returns:
        LoadedFont holding the bytes plus metrics and cmap coverage

    Raises:
        FontDecodeError: If the bytes are not a usable font
    """
    if not data:
        raise FontDecodeError("font data is empty", source=source)

    try:
        font = TTFont(io.BytesIO(data), lazy=True)
    except (TTLibError, OSError, ValueError) as e:
        raise FontDecodeError(str(e), source=source) from e

    try:
        missing = [tag for tag in REQUIRED_TABLES if tag not in font]
        if missing:
            raise FontDecodeError(f"missing tables: {', '.join(missing)}", source=source)

        cmap = font.getBestCmap() or {}
        hhea = font["hhea"]
        return LoadedFont(
            data=bytes(data),
            family_name=_family_name(font),
            units_per_em=font["head"].unitsPerEm,  # type: ignore[attr-defined]
            ascender=hhea.ascent,  # type: ignore[attr-defined]
            descender=hhea.descent,  # type: ignore[attr-defined]
            glyph_count=font["maxp"].numGlyphs,  # type: ignore[attr-defined]
            codepoints=frozenset(cmap),
        )
    except FontDecodeError:
        raise
    except Exception as e:
        raise FontDecodeError(str(e), source=source) from e
    finally:
        font.close()


def load_font(path: Path) -> LoadedFont:
    """Read and decode a font file.

    Raises:
        FileNotFoundError: If the font file does not exist
        FontDecodeError: If the file is not a usable font
    """
    if not path.exists():
        raise FileNotFoundError(f"Font file not found: {path}")

    return decode_font(path.read_bytes(), source=str(path))
