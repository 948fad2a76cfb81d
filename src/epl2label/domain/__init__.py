"""Domain models for epl2label.

This module contains the value types that flow through label composition.
All models are frozen dataclasses, independent of Pillow and fonttools, so a
finished LabelDocument can be handed between threads freely.

Key classes:
- Product, LabelRequest: What to print
- LoadedFont: A decoded font shared across a batch of labels
- MonoBitmap: Logical 1-bit image
- PackedRaster: Bit-packed rows for the GW directive
- TextBlock, Barcode, Rule: Positioned label elements
- LabelDocument: Canvas settings plus ordered elements
"""

from epl2label.domain.document import (
    EAN13_MODULES,
    Barcode,
    LabelDocument,
    LabelElement,
    Rule,
    RuleOrientation,
    TextBlock,
)
from epl2label.domain.font import LoadedFont
from epl2label.domain.product import SUPPORTED_PRODUCT_COUNTS, LabelRequest, Product
from epl2label.domain.raster import BLACK, WHITE, MonoBitmap, PackedRaster

__all__: list[str] = [
    # Constants
    "BLACK",
    "EAN13_MODULES",
    "SUPPORTED_PRODUCT_COUNTS",
    "WHITE",
    # Enums
    "RuleOrientation",
    # Request types
    "LabelRequest",
    "LoadedFont",
    "Product",
    # Raster types
    "MonoBitmap",
    "PackedRaster",
    # Document types
    "Barcode",
    "LabelDocument",
    "LabelElement",
    "Rule",
    "TextBlock",
]
