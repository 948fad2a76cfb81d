"""Parsed font resource shared by shaping and rasterization."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class LoadedFont:
    """A decoded font, loaded once and shared read-only across labels.

    Attributes:
        data: Raw font file bytes (handed to FreeType at each size)
        family_name: Family name from the name table
        units_per_em: Font design units per em
        ascender: hhea ascender in font units
        descender: hhea descender in font units (negative below baseline)
        glyph_count: Number of glyphs in the font
        codepoints: Unicode code points mapped by the cmap
    """

    data: bytes = field(repr=False)
    family_name: str
    units_per_em: int
    ascender: int
    descender: int
    glyph_count: int
    codepoints: frozenset[int] = field(default_factory=frozenset, repr=False)

    def has_glyph(self, char: str) -> bool:
        """Check whether the font maps a character to a glyph."""
        return ord(char) in self.codepoints

    def missing_characters(self, text: str) -> list[str]:
        """List printable characters of ``text`` the font cannot draw, in order."""
        missing: list[str] = []
        for char in text:
            if char.isspace() or self.has_glyph(char) or char in missing:
                continue
            missing.append(char)
        return missing
