"""Layout planning for fixed product-count labels.

Two arrangements are supported, selected by the number of products:

- Stacked pair (2 products): the canvas is split into two equal bands; each
  band holds a right-aligned text line with a centered barcode below it.
- 2x2 grid (4 products): four equal quadrants separated by a gap; each
  quadrant stacks an optional brand caption, the product line and a barcode,
  all centered.

Every vertical position below the first element is derived from the measured
height of the element above it, never from fixed offsets, so fonts with tall
ascenders cannot push text into a barcode. Plans are made in a logical
coordinate system; for landscape printing the finished plan is rotated a
quarter turn clockwise onto the physical canvas.
"""

from dataclasses import dataclass

import structlog

from epl2label.config import ComposerSettings, Orientation
from epl2label.core.barcode import barcode_payload, ean13_width, normalize_ean13
from epl2label.core.packer import pack_bitmap
from epl2label.core.rasterizer import GlyphRasterizer
from epl2label.core.shaper import TextShaper
from epl2label.domain.document import (
    Barcode,
    LabelDocument,
    LabelElement,
    Rule,
    RuleOrientation,
    TextBlock,
)
from epl2label.domain.font import LoadedFont
from epl2label.domain.product import SUPPORTED_PRODUCT_COUNTS, LabelRequest, Product
from epl2label.domain.raster import MonoBitmap
from epl2label.exceptions import CanvasTooSmallError, InvalidProductCountError
from epl2label.io.font import decode_font

logger = structlog.get_logger("epl2label.layout")

PAIR = "stacked_pair"
GRID = "grid_2x2"


@dataclass(frozen=True)
class PlannedText:
    """A text bitmap placed in plan coordinates, not yet packed."""

    bitmap: MonoBitmap
    x: int
    y: int


PlannedElement = PlannedText | Barcode | Rule


def arrangement_for(count: int) -> str:
    """Name the arrangement for ``count`` products.

    Raises:
        InvalidProductCountError: If ``count`` is not 2 or 4
    """
    if count not in SUPPORTED_PRODUCT_COUNTS:
        raise InvalidProductCountError(count)
    return PAIR if count == 2 else GRID


def resolve_font(font: LoadedFont | bytes) -> LoadedFont:
    """Return ``font`` decoded, decoding raw bytes when needed."""
    if isinstance(font, LoadedFont):
        return font
    return decode_font(bytes(font))


def stacked_barcode_y(text_y: int, text_height: int, gap: int) -> int:
    """Top of a barcode stacked under a text block of measured height."""
    return text_y + text_height + gap


def centered_x(origin: int, available: int, width: int) -> int:
    """Left edge that centers ``width`` inside ``[origin, origin + available)``."""
    return origin + max(available - width, 0) // 2


def rotate_clockwise(element: PlannedElement, logical_height: int) -> PlannedElement:
    """Map a logical element onto the physical canvas turned a quarter clockwise.

    A logical box at (x, y) of size (w, h) lands at
    (logical_height - y - h, x) with size (h, w).
    """
    if isinstance(element, PlannedText):
        bitmap = element.bitmap.rotate_clockwise()
        return PlannedText(
            bitmap=bitmap,
            x=logical_height - element.y - element.bitmap.height,
            y=element.x,
        )
    if isinstance(element, Barcode):
        # Firmware rotates the symbol around its anchor, which moves with it
        return Barcode(
            x=logical_height - element.y,
            y=element.x,
            rotation=(element.rotation + 1) % 4,
            narrow=element.narrow,
            wide=element.wide,
            height=element.height,
            hri_visible=element.hri_visible,
            digits=element.digits,
            hri_height=element.hri_height,
        )
    x0, y0, x1, y1 = element.bounds()
    if element.orientation is RuleOrientation.VERTICAL:
        orientation = RuleOrientation.HORIZONTAL
    else:
        orientation = RuleOrientation.VERTICAL
    return Rule(
        x=logical_height - y1,
        y=x0,
        thickness=element.thickness,
        length=element.length,
        orientation=orientation,
    )


class LayoutPlanner:
    """Plans LabelDocuments from LabelRequests.

    Validation happens first and in a fixed order: product count, barcode
    digits, font decoding, minimum canvas size. Nothing is rendered for a
    request that fails any of them.

    Example:
        planner = LayoutPlanner(ComposerSettings())
        document = planner.plan(request)
    """

    def __init__(
        self,
        settings: ComposerSettings | None = None,
        shaper: TextShaper | None = None,
        rasterizer: GlyphRasterizer | None = None,
    ) -> None:
        self.settings = settings or ComposerSettings()
        self.shaper = shaper or TextShaper(self.settings.render)
        self.rasterizer = rasterizer or GlyphRasterizer(self.settings.render)

    @property
    def logical_canvas(self) -> tuple[int, int]:
        """Canvas (width, height) the arrangement is planned on."""
        layout = self.settings.layout
        if self.settings.printer.orientation is Orientation.LANDSCAPE:
            return layout.canvas_height, layout.canvas_width
        return layout.canvas_width, layout.canvas_height

    def plan(self, request: LabelRequest) -> LabelDocument:
        """Plan the full label for ``request``.

        Raises:
            InvalidProductCountError: If the request holds other than 2 or 4 products
            InvalidBarcodeDigitsError: If a barcode has no digits
            FontDecodeError: If the font cannot be parsed
            CanvasTooSmallError: If the elements do not fit the canvas
        """
        arrangement = arrangement_for(request.product_count)
        codes = [normalize_ean13(product.barcode) for product in request.products]
        font = resolve_font(request.font)

        width, height = self.logical_canvas
        self._check_minimum_size(arrangement, width, height, has_caption=bool(request.title))
        self._warn_missing_glyphs(request, font)

        if arrangement == PAIR:
            planned = self._plan_pair(request.products, codes, font, width, height)
        else:
            planned = self._plan_grid(request.products, codes, request.title, font, width, height)

        if self.settings.printer.orientation is Orientation.LANDSCAPE:
            planned = [rotate_clockwise(element, logical_height=height) for element in planned]

        document = self._build_document(planned)
        self._check_bounds(document)

        logger.debug(
            "Label planned",
            arrangement=arrangement,
            elements=len(document.elements),
            orientation=self.settings.printer.orientation.value,
        )
        return document

    def _check_minimum_size(self, arrangement: str, width: int, height: int, has_caption: bool) -> None:
        layout = self.settings.layout
        printer = self.settings.printer
        min_line = self.settings.render.min_line_height
        hri = printer.hri_height if printer.hri_visible else 0
        symbol_width = ean13_width(printer.narrow)

        if arrangement == PAIR:
            cell_width, cell_height = width, height // 2
            needed = layout.top_margin + min_line + layout.element_gap + layout.pair_barcode_height + hri
            detail = "stacked pair band"
        else:
            cell_width = (width - layout.grid_gap) // 2
            cell_height = (height - layout.grid_gap) // 2
            needed = layout.top_margin + min_line + layout.element_gap + layout.grid_barcode_height + hri
            if has_caption:
                needed += min_line + layout.element_gap
            symbol_width += layout.grid_barcode_nudge
            detail = "2x2 grid quadrant"

        if symbol_width > cell_width:
            raise CanvasTooSmallError(symbol_width, max(cell_width, 0), f"{detail} width")
        if needed > cell_height:
            raise CanvasTooSmallError(needed, max(cell_height, 0), f"{detail} height")

    def _warn_missing_glyphs(self, request: LabelRequest, font: LoadedFont) -> None:
        texts = [p.label_text(self.settings.layout.currency) for p in request.products]
        if request.title:
            texts.append(request.title)
        missing = font.missing_characters("".join(texts))
        if missing:
            logger.warning(
                "Font has no glyph for characters",
                font=font.family_name,
                characters="".join(missing),
                codepoints=[f"U+{ord(char):04X}" for char in missing],
            )

    def _render_line(self, text: str, font: LoadedFont, size: int, max_width: int) -> MonoBitmap:
        return self.rasterizer.rasterize(
            self.shaper.shape(text),
            font,
            size=size,
            padding=self.settings.layout.text_padding,
            bold=True,
            max_width=max_width,
        )

    def _barcode(self, x: int, y: int, code: str, height: int) -> Barcode:
        printer = self.settings.printer
        return Barcode(
            x=x,
            y=y,
            rotation=0,
            narrow=printer.narrow,
            wide=printer.wide,
            height=height,
            hri_visible=printer.hri_visible,
            digits=barcode_payload(code, printer),
            hri_height=printer.hri_height,
        )

    def _plan_pair(
        self,
        products: tuple[Product, ...],
        codes: list[str],
        font: LoadedFont,
        width: int,
        height: int,
    ) -> list[PlannedElement]:
        layout = self.settings.layout
        band_height = height // 2
        symbol_width = ean13_width(self.settings.printer.narrow)
        planned: list[PlannedElement] = []

        for index, (product, code) in enumerate(zip(products, codes, strict=True)):
            band_top = index * band_height
            bitmap = self._render_line(
                product.label_text(layout.currency), font, layout.pair_font_px, max_width=width
            )
            text_y = band_top + layout.top_margin
            # Right-aligned: the bitmap already carries the right padding
            text = PlannedText(bitmap=bitmap, x=width - bitmap.width, y=text_y)

            barcode = self._barcode(
                x=centered_x(0, width, symbol_width),
                y=stacked_barcode_y(text_y, bitmap.height, layout.element_gap),
                code=code,
                height=layout.pair_barcode_height,
            )
            bottom = barcode.y + barcode.symbol_height
            if bottom > band_top + band_height:
                raise CanvasTooSmallError(
                    bottom - band_top, band_height, f"product {index + 1} of stacked pair"
                )
            planned.extend([text, barcode])

        return planned

    def _plan_grid(
        self,
        products: tuple[Product, ...],
        codes: list[str],
        title: str | None,
        font: LoadedFont,
        width: int,
        height: int,
    ) -> list[PlannedElement]:
        layout = self.settings.layout
        gap = layout.grid_gap
        cell_width = (width - gap) // 2
        cell_height = (height - gap) // 2
        symbol_width = ean13_width(self.settings.printer.narrow)
        origins = [
            (0, 0),
            (cell_width + gap, 0),
            (0, cell_height + gap),
            (cell_width + gap, cell_height + gap),
        ]

        caption = None
        if title:
            caption = self._render_line(title, font, layout.caption_font_px, max_width=cell_width)

        planned: list[PlannedElement] = []
        for index, (product, code) in enumerate(zip(products, codes, strict=True)):
            cell_x, cell_y = origins[index]
            y = cell_y + layout.top_margin

            if caption is not None:
                planned.append(
                    PlannedText(bitmap=caption, x=centered_x(cell_x, cell_width, caption.width), y=y)
                )
                y += caption.height + layout.element_gap

            bitmap = self._render_line(
                product.label_text(layout.currency), font, layout.grid_font_px, max_width=cell_width
            )
            planned.append(PlannedText(bitmap=bitmap, x=centered_x(cell_x, cell_width, bitmap.width), y=y))
            y += bitmap.height + layout.element_gap

            # Nudge right so the leading HRI digit clears the quadrant edge
            barcode_x = centered_x(cell_x, cell_width, symbol_width) + layout.grid_barcode_nudge
            barcode_x = min(barcode_x, cell_x + cell_width - symbol_width)
            barcode = self._barcode(barcode_x, y, code, layout.grid_barcode_height)
            bottom = barcode.y + barcode.symbol_height
            if bottom > cell_y + cell_height:
                raise CanvasTooSmallError(
                    bottom - cell_y, cell_height, f"product {index + 1} of 2x2 grid"
                )
            planned.append(barcode)

            if index == 1 and layout.separators:
                planned.extend(self._horizontal_separator(width, cell_height))

        if layout.separators:
            planned.extend(self._vertical_separator(height, cell_width))

        return planned

    def _horizontal_separator(self, width: int, cell_height: int) -> list[Rule]:
        layout = self.settings.layout
        length = width - 2 * layout.rule_margin
        if length <= 0:
            return []
        y = cell_height + (layout.grid_gap - layout.rule_thickness) // 2
        return [
            Rule(
                x=layout.rule_margin,
                y=max(y, 0),
                thickness=layout.rule_thickness,
                length=length,
                orientation=RuleOrientation.HORIZONTAL,
            )
        ]

    def _vertical_separator(self, height: int, cell_width: int) -> list[Rule]:
        layout = self.settings.layout
        length = height - 2 * layout.rule_margin
        if length <= 0:
            return []
        x = cell_width + (layout.grid_gap - layout.rule_thickness) // 2
        return [
            Rule(
                x=max(x, 0),
                y=layout.rule_margin,
                thickness=layout.rule_thickness,
                length=length,
                orientation=RuleOrientation.VERTICAL,
            )
        ]

    def _build_document(self, planned: list[PlannedElement]) -> LabelDocument:
        layout = self.settings.layout
        printer = self.settings.printer
        elements: list[LabelElement] = []
        for element in planned:
            if isinstance(element, PlannedText):
                raster = pack_bitmap(element.bitmap, printer.polarity)
                elements.append(TextBlock(raster=raster, x=element.x, y=element.y))
            else:
                elements.append(element)

        return LabelDocument(
            canvas_width=layout.canvas_width,
            canvas_height=layout.canvas_height,
            gap=printer.gap,
            darkness=printer.darkness,
            speed=printer.speed,
            elements=tuple(elements),
        )

    def _check_bounds(self, document: LabelDocument) -> None:
        outside = document.out_of_bounds()
        if not outside:
            return
        x0, y0, x1, y1 = outside[0].bounds()
        if x0 < 0 or x1 > document.canvas_width:
            raise CanvasTooSmallError(
                x1 - min(x0, 0), document.canvas_width, f"{type(outside[0]).__name__} at x={x0}"
            )
        raise CanvasTooSmallError(
            y1 - min(y0, 0), document.canvas_height, f"{type(outside[0]).__name__} at y={y0}"
        )
