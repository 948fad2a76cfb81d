"""Label request models: products and the request that carries them."""

from dataclasses import dataclass

from epl2label.domain.font import LoadedFont

SUPPORTED_PRODUCT_COUNTS = (2, 4)

# Spacing between a product name and its price on the same line
NAME_PRICE_SEPARATOR = "    "


@dataclass(frozen=True)
class Product:
    """A product printed on the label.

    Attributes:
        name: Product name, any script
        price: Price text as printed (e.g. "5.00")
        barcode: Raw barcode text; normalized to EAN-13 during layout
    """

    name: str
    price: str
    barcode: str

    def label_text(self, currency: str = "") -> str:
        """Return the single logical-order line printed for this product.

        Args:
            currency: Suffix appended after the price; omitted when empty

        Returns:
            "<name>    <price> <currency>"
        """
        price = f"{self.price} {currency}" if currency else self.price
        return f"{self.name}{NAME_PRICE_SEPARATOR}{price}"


@dataclass(frozen=True)
class LabelRequest:
    """Everything needed to compose one label.

    Attributes:
        products: 2 products (stacked pair) or 4 products (2x2 grid)
        font: Parsed font shared across a batch, or raw font bytes
        title: Optional brand caption
    """

    products: tuple[Product, ...]
    font: LoadedFont | bytes
    title: str | None = None

    def __post_init__(self) -> None:
        # Accept any sequence but store a tuple so the request stays immutable
        if not isinstance(self.products, tuple):
            object.__setattr__(self, "products", tuple(self.products))

    @property
    def product_count(self) -> int:
        return len(self.products)
