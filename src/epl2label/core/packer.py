"""Bit packing of monochrome bitmaps into GW raster rows."""

from epl2label.config import Polarity
from epl2label.domain.raster import BLACK, WHITE, MonoBitmap, PackedRaster


def bytes_per_row(width: int) -> int:
    """Number of bytes holding one row of ``width`` pixels."""
    return (width + 7) // 8


def pack_bitmap(bitmap: MonoBitmap, polarity: Polarity = Polarity.NORMAL) -> PackedRaster:
    """Pack a bitmap MSB-first, one padded byte run per row.

    Bit 7 of each row's first byte is the leftmost pixel; bits past the
    bitmap width are zero. With ``Polarity.INVERTED`` every byte is flipped
    afterwards, padding included.

    Args:
        bitmap: Source bitmap (1 = black)
        polarity: Raster polarity expected by the print head

    Returns:
        PackedRaster with ``bytes_per_row * height`` bytes
    """
    bpr = bytes_per_row(bitmap.width)
    out = bytearray(bpr * bitmap.height)

    for y in range(bitmap.height):
        row = bitmap.row(y)
        base = y * bpr
        for x, value in enumerate(row):
            if value == BLACK:
                out[base + (x >> 3)] |= 0x80 >> (x & 7)

    if polarity is Polarity.INVERTED:
        out = bytearray(b ^ 0xFF for b in out)

    return PackedRaster(
        width=bitmap.width,
        height=bitmap.height,
        bytes_per_row=bpr,
        rows=bytes(out),
    )


def unpack_raster(raster: PackedRaster, polarity: Polarity = Polarity.NORMAL) -> MonoBitmap:
    """Reverse of pack_bitmap: recover the exact source bitmap."""
    data = raster.rows
    if polarity is Polarity.INVERTED:
        data = bytes(b ^ 0xFF for b in data)

    bits = bytearray(raster.width * raster.height)
    for y in range(raster.height):
        base = y * raster.bytes_per_row
        for x in range(raster.width):
            if data[base + (x >> 3)] & (0x80 >> (x & 7)):
                bits[y * raster.width + x] = BLACK
            else:
                bits[y * raster.width + x] = WHITE

    return MonoBitmap(width=raster.width, height=raster.height, bits=bytes(bits))
