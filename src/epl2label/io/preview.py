"""Approximate on-screen preview of a planned label.

Text blocks are drawn from their packed rasters; barcodes, which only the
printer firmware can draw, appear as hatched boxes with their digits.
"""

from pathlib import Path

from PIL import Image, ImageDraw

from epl2label.config import Polarity
from epl2label.core.packer import unpack_raster
from epl2label.core.rasterizer import bitmap_to_image
from epl2label.domain.document import Barcode, LabelDocument, Rule, TextBlock

BARCODE_FILL = 160


def render_preview(document: LabelDocument, polarity: Polarity = Polarity.NORMAL) -> Image.Image:
    """Draw ``document`` onto a white grayscale canvas.

    Args:
        document: Planned label
        polarity: Polarity the text rasters were packed with

    Returns:
        Pillow "L" image of canvas size
    """
    canvas = Image.new("L", (document.canvas_width, document.canvas_height), 255)
    draw = ImageDraw.Draw(canvas)

    for element in document.elements:
        if isinstance(element, TextBlock):
            bitmap = unpack_raster(element.raster, polarity)
            image = bitmap_to_image(bitmap)
            # Paste only the ink so overlapping blocks stay visible
            mask = image.point(lambda level: 255 if level == 0 else 0)
            canvas.paste(0, (element.x, element.y), mask)
        elif isinstance(element, Barcode):
            x0, y0, x1, y1 = element.bounds()
            draw.rectangle((x0, y0, x1 - 1, y1 - 1), outline=0, fill=BARCODE_FILL)
            draw.text((x0 + 2, y0 + 2), element.digits, fill=0)
        elif isinstance(element, Rule):
            x0, y0, x1, y1 = element.bounds()
            draw.rectangle((x0, y0, x1 - 1, y1 - 1), fill=0)

    return canvas


def save_preview(document: LabelDocument, path: Path, polarity: Polarity = Polarity.NORMAL) -> None:
    """Render ``document`` and save it as an image file (format from suffix)."""
    render_preview(document, polarity).save(path)
