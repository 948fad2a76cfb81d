"""epl2label - Compose EPL2 print jobs for thermal label printers.

epl2label renders bidirectional (Latin/Arabic) product text into monochrome
bitmaps, normalizes EAN-13 barcodes, lays out two- or four-product labels and
serializes the result into an EPL2 byte stream ready for the printer.

Example:
    $ epl2label compose -f Amiri-Regular.ttf \\
        --product "عصير برتقال|5.00|622300123456" \\
        --product "مياه معدنية|3.50|622300654321" \\
        --printer "Zebra LP2824"
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
