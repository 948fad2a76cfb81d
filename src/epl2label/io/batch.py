"""Batch files: many labels printed with one shared font.

A batch file is a JSON array of label entries::

    [
      {"title": "أسواق ابوعمر",
       "products": [
         {"name": "عصير برتقال", "price": "5.00", "barcode": "622300123456"},
         {"name": "مياه معدنية", "price": "3.50", "barcode": "622300654321"}
       ]}
    ]
"""

from pathlib import Path

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from epl2label.domain.font import LoadedFont
from epl2label.domain.product import LabelRequest, Product
from epl2label.exceptions import LabelError


class BatchFileError(LabelError):
    """Batch file is unreadable or malformed."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid batch file '{path}': {reason}")


class ProductEntry(BaseModel):
    """One product of a batch entry."""

    name: str
    price: str
    barcode: str


class LabelEntry(BaseModel):
    """One label of a batch file.

    The product count is checked by the layout planner, not here, so a bad
    entry fails on its own without rejecting the whole file.
    """

    title: str | None = None
    products: list[ProductEntry] = Field(default_factory=list)

    def to_request(self, font: LoadedFont) -> LabelRequest:
        return LabelRequest(
            products=tuple(Product(p.name, p.price, p.barcode) for p in self.products),
            font=font,
            title=self.title,
        )


_ENTRIES = TypeAdapter(list[LabelEntry])


def load_batch(path: Path) -> list[LabelEntry]:
    """Read and validate a batch file.

    Raises:
        BatchFileError: If the file cannot be read or does not match the schema
    """
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise BatchFileError(str(path), str(e)) from e

    try:
        return _ENTRIES.validate_json(raw)
    except ValidationError as e:
        raise BatchFileError(str(path), str(e)) from e
