"""Positioned label elements and the document that orders them.

A LabelDocument is the output of layout planning: a canvas description plus
an ordered tuple of absolutely positioned elements. The emitter serializes the
elements in exactly this order.
"""

from dataclasses import dataclass
from enum import Enum

from epl2label.domain.raster import PackedRaster

# EAN-13 symbol width in modules: 3 + 6*7 + 5 + 6*7 + 3
EAN13_MODULES = 95

Bounds = tuple[int, int, int, int]


class RuleOrientation(str, Enum):
    """Direction a rule extends from its origin."""

    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


@dataclass(frozen=True)
class TextBlock:
    """A rendered, packed text bitmap placed at (x, y)."""

    raster: PackedRaster
    x: int
    y: int

    def bounds(self) -> Bounds:
        return (self.x, self.y, self.x + self.raster.width, self.y + self.raster.height)


@dataclass(frozen=True)
class Barcode:
    """An EAN-13 barcode drawn by printer firmware.

    Attributes:
        x: Anchor x in dots
        y: Anchor y in dots
        rotation: Quarter turns clockwise (0-3); the anchor rotates with the symbol
        narrow: Narrow module width in dots
        wide: Wide bar width in dots
        height: Bar height in dots
        hri_visible: Whether the human readable digits are printed
        digits: Digits sent to the printer
        hri_height: Room reserved under the bars for the digits
    """

    x: int
    y: int
    rotation: int
    narrow: int
    wide: int
    height: int
    hri_visible: bool
    digits: str
    hri_height: int = 0

    def __post_init__(self) -> None:
        if self.rotation not in (0, 1, 2, 3):
            raise ValueError(f"Barcode rotation must be 0-3, got {self.rotation}")

    @property
    def symbol_width(self) -> int:
        return EAN13_MODULES * self.narrow

    @property
    def symbol_height(self) -> int:
        return self.height + (self.hri_height if self.hri_visible else 0)

    def bounds(self) -> Bounds:
        w, h = self.symbol_width, self.symbol_height
        if self.rotation == 0:
            return (self.x, self.y, self.x + w, self.y + h)
        if self.rotation == 1:
            return (self.x - h, self.y, self.x, self.y + w)
        if self.rotation == 2:
            return (self.x - w, self.y - h, self.x, self.y)
        return (self.x, self.y - w, self.x + h, self.y)


@dataclass(frozen=True)
class Rule:
    """A solid line drawn by the LO directive."""

    x: int
    y: int
    thickness: int
    length: int
    orientation: RuleOrientation = RuleOrientation.VERTICAL

    def bounds(self) -> Bounds:
        if self.orientation is RuleOrientation.VERTICAL:
            return (self.x, self.y, self.x + self.thickness, self.y + self.length)
        return (self.x, self.y, self.x + self.length, self.y + self.thickness)


LabelElement = TextBlock | Barcode | Rule


@dataclass(frozen=True)
class LabelDocument:
    """A fully planned label.

    Attributes:
        canvas_width: Label width in dots
        canvas_height: Label height in dots
        gap: Inter-label gap in dots
        darkness: Print darkness (0-15)
        speed: Print speed (1-6)
        elements: Elements in emission order
    """

    canvas_width: int
    canvas_height: int
    gap: int
    darkness: int
    speed: int
    elements: tuple[LabelElement, ...]

    def out_of_bounds(self) -> list[LabelElement]:
        """Return the elements whose bounds leave the canvas."""
        outside: list[LabelElement] = []
        for element in self.elements:
            x0, y0, x1, y1 = element.bounds()
            if x0 < 0 or y0 < 0 or x1 > self.canvas_width or y1 > self.canvas_height:
                outside.append(element)
        return outside

    def text_blocks(self) -> list[TextBlock]:
        return [e for e in self.elements if isinstance(e, TextBlock)]

    def barcodes(self) -> list[Barcode]:
        return [e for e in self.elements if isinstance(e, Barcode)]

    def rules(self) -> list[Rule]:
        return [e for e in self.elements if isinstance(e, Rule)]
