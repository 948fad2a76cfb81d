"""Core composition algorithms for epl2label.

This module contains the label composition pipeline:

- Text shaping (bidi reordering, Arabic contextual forms)
- Glyph rasterization into thresholded monochrome bitmaps
- Bit packing into GW raster rows
- EAN-13 normalization and checksum
- Layout planning for stacked-pair and 2x2 grid labels

All services are designed to be:
- Stateless after construction (safe to share between threads)
- Pure (no I/O during composition)

Key functions:
- shape_text: Logical to display order
- pack_bitmap / unpack_raster: Bitmap <-> packed rows
- normalize_ean13 / ean13_checksum: Barcode digits
- compose_label: Request to EPL2 bytes

Key classes:
- TextShaper: Configured bidi + Arabic shaper
- GlyphRasterizer: Draws display-order text into MonoBitmaps
- LayoutPlanner: Places elements on the canvas
- LabelComposer: Plans and serializes labels
"""

from epl2label.core.barcode import (
    barcode_payload,
    ean13_checksum,
    ean13_width,
    is_valid_ean13,
    normalize_ean13,
    normalize_payload,
)
from epl2label.core.composer import LabelComposer, compose_label
from epl2label.core.layout import LayoutPlanner, stacked_barcode_y
from epl2label.core.packer import pack_bitmap, unpack_raster
from epl2label.core.rasterizer import GlyphRasterizer
from epl2label.core.shaper import TextShaper, has_rtl, shape_text

__all__ = [
    "GlyphRasterizer",
    "LabelComposer",
    "LayoutPlanner",
    "TextShaper",
    "barcode_payload",
    "compose_label",
    "ean13_checksum",
    "ean13_width",
    "has_rtl",
    "is_valid_ean13",
    "normalize_ean13",
    "normalize_payload",
    "pack_bitmap",
    "shape_text",
    "stacked_barcode_y",
    "unpack_raster",
]
