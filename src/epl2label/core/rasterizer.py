"""Glyph rasterization into tight monochrome bitmaps.

Display-order text is drawn glyph by glyph, left to right, with FreeType
(through Pillow) and every pass is binarized against a fixed coverage
threshold. Thermal heads print intermediate gray levels unreliably, so no
pixel is ever alpha-blended.
"""

import io
import math

from PIL import Image, ImageChops, ImageDraw, ImageFont

from epl2label.config import RenderConfig
from epl2label.domain.font import LoadedFont
from epl2label.domain.raster import MonoBitmap
from epl2label.exceptions import FontDecodeError


def open_face(font: LoadedFont, size: int) -> ImageFont.FreeTypeFont:
    """Open a FreeType face for ``font`` at ``size`` pixels.

    The BASIC layout engine places glyphs strictly in string order; the text
    is already in display order, so a second bidi pass must not happen.

    Raises:
        FontDecodeError: If FreeType rejects the font bytes
    """
    try:
        return ImageFont.truetype(
            io.BytesIO(font.data),
            size=size,
            layout_engine=ImageFont.Layout.BASIC,
        )
    except OSError as e:
        raise FontDecodeError(str(e), source=font.family_name) from e


class GlyphRasterizer:
    """Renders display-order strings into MonoBitmaps.

    Stateless apart from its immutable RenderConfig; identical inputs yield
    identical bitmaps, which keeps golden-bitmap tests stable.

    Example:
        rasterizer = GlyphRasterizer(RenderConfig(bold_passes=2))
        bitmap = rasterizer.rasterize(display_text, font, size=36, padding=10, bold=True)
    """

    def __init__(self, config: RenderConfig | None = None) -> None:
        self.config = config or RenderConfig()

    def line_height(self, face: ImageFont.FreeTypeFont) -> int:
        """Ascent + descent of ``face``, floored at the configured minimum."""
        ascent, descent = face.getmetrics()
        return max(math.ceil(ascent + descent), self.config.min_line_height)

    def _passes(self, bold: bool) -> int:
        return self.config.bold_passes if bold else 1

    def _ink_width(self, face: ImageFont.FreeTypeFont, text: str, bold: bool) -> int:
        if not text:
            return 0
        _left, _top, right, _bottom = face.getbbox(text, anchor="la")
        return max(math.ceil(right), 0) + self._passes(bold) - 1

    def measure(self, text: str, font: LoadedFont, size: int, bold: bool = False) -> tuple[int, int]:
        """Measure ``text`` without drawing it.

        Returns:
            (ink width including bold offsets, line height) in pixels
        """
        face = open_face(font, size)
        return self._ink_width(face, text, bold), self.line_height(face)

    def rasterize(
        self,
        text: str,
        font: LoadedFont,
        size: int,
        padding: int = 0,
        bold: bool = False,
        max_width: int | None = None,
        target_width: int | None = None,
    ) -> MonoBitmap:
        """Render ``text`` into a tight 1-bit bitmap.

        Args:
            text: Display-order text (see TextShaper)
            font: Decoded font
            size: Font size in pixels
            padding: Blank columns on each side of the ink
            bold: Simulate a heavier stroke with extra offset passes
            max_width: Cap on the bitmap width; ink beyond it is clipped
            target_width: Produce a bitmap exactly this wide with the text
                right-aligned so its right edge sits at
                ``target_width - padding``

        Returns:
            MonoBitmap (1 = black)
        """
        face = open_face(font, size)
        height = self.line_height(face)
        text_width = self._ink_width(face, text, bold)

        if target_width is not None:
            width = target_width
            start_x = target_width - padding - text_width
        else:
            width = text_width + 2 * padding
            start_x = padding
        if max_width is not None:
            width = min(width, max_width)
        width = max(width, 1)

        cutoff = self.config.coverage_threshold * 255
        lut = [255 if level > cutoff else 0 for level in range(256)]

        def draw_pass(dx: int) -> Image.Image:
            coverage = Image.new("L", (width, height), 0)
            if text:
                draw = ImageDraw.Draw(coverage)
                draw.text((start_x + dx, 0), text, fill=255, font=face, anchor="la")
            return coverage.point(lut, mode="1")

        merged = draw_pass(0)
        for dx in range(1, self._passes(bold)):
            merged = ImageChops.logical_or(merged, draw_pass(dx))

        return image_to_bitmap(merged)


def image_to_bitmap(image: Image.Image) -> MonoBitmap:
    """Convert a Pillow image whose non-zero pixels are ink into a MonoBitmap."""
    mask = image.convert("L").point([0] + [1] * 255)
    return MonoBitmap(width=image.width, height=image.height, bits=mask.tobytes())


def bitmap_to_image(bitmap: MonoBitmap) -> Image.Image:
    """Convert a MonoBitmap into a black-on-white Pillow "L" image."""
    pixels = bytes(0 if value else 255 for value in bitmap.bits)
    return Image.frombytes("L", (bitmap.width, bitmap.height), pixels)
