"""Monochrome bitmap and packed raster representations.

MonoBitmap is the logical 1-bit image produced by the rasterizer; PackedRaster
is the same image bit-packed into the row format carried by a GW directive.
"""

from collections.abc import Sequence
from dataclasses import dataclass

BLACK = 1
WHITE = 0


@dataclass(frozen=True)
class MonoBitmap:
    """A 1-bit-per-pixel image.

    Attributes:
        width: Width in pixels (> 0)
        height: Height in pixels (> 0)
        bits: One byte per pixel, row-major, 1 = black, 0 = white
    """

    width: int
    height: int
    bits: bytes

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Bitmap dimensions must be positive, got {self.width}x{self.height}")
        if len(self.bits) != self.width * self.height:
            raise ValueError(
                f"Bitmap of {self.width}x{self.height} needs {self.width * self.height} "
                f"pixels, got {len(self.bits)}"
            )
        if any(b not in (WHITE, BLACK) for b in set(self.bits)):
            raise ValueError("Bitmap pixels must be 0 (white) or 1 (black)")

    @classmethod
    def blank(cls, width: int, height: int) -> "MonoBitmap":
        """Create an all-white bitmap."""
        return cls(width=width, height=height, bits=bytes(width * height))

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]]) -> "MonoBitmap":
        """Build a bitmap from a list of rows of 0/1 values.

        Args:
            rows: Equal-length rows, top to bottom

        Returns:
            MonoBitmap instance

        Raises:
            ValueError: If rows are empty or ragged
        """
        if not rows or not rows[0]:
            raise ValueError("Bitmap needs at least one row and one column")
        width = len(rows[0])
        if any(len(row) != width for row in rows):
            raise ValueError("All bitmap rows must have the same length")
        bits = bytes(BLACK if value else WHITE for row in rows for value in row)
        return cls(width=width, height=len(rows), bits=bits)

    def pixel(self, x: int, y: int) -> int:
        """Return 1 for a black pixel, 0 for white."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} bitmap")
        return self.bits[y * self.width + x]

    def row(self, y: int) -> bytes:
        """Return row ``y`` as one byte per pixel."""
        start = y * self.width
        return self.bits[start : start + self.width]

    def black_count(self) -> int:
        """Count black pixels."""
        return self.bits.count(BLACK)

    def rotate_clockwise(self) -> "MonoBitmap":
        """Return this bitmap rotated 90 degrees clockwise.

        Pixel (x, y) moves to (height - 1 - y, x); the result is
        height x width.
        """
        rotated = bytearray(self.width * self.height)
        new_width = self.height
        for y in range(self.height):
            src = self.row(y)
            new_x = self.height - 1 - y
            for x, value in enumerate(src):
                if value:
                    rotated[x * new_width + new_x] = BLACK
        return MonoBitmap(width=new_width, height=self.width, bits=bytes(rotated))


@dataclass(frozen=True)
class PackedRaster:
    """Row-padded, MSB-first packed bitmap ready for a GW directive.

    Attributes:
        width: Width in pixels
        height: Height in rows
        bytes_per_row: ceil(width / 8)
        rows: Packed row bytes, ``bytes_per_row * height`` long
    """

    width: int
    height: int
    bytes_per_row: int
    rows: bytes

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Raster dimensions must be positive, got {self.width}x{self.height}")
        if self.bytes_per_row != (self.width + 7) // 8:
            raise ValueError(
                f"bytes_per_row {self.bytes_per_row} does not match width {self.width}"
            )
        if len(self.rows) != self.bytes_per_row * self.height:
            raise ValueError(
                f"Raster payload is {len(self.rows)} bytes, expected "
                f"{self.bytes_per_row * self.height}"
            )
