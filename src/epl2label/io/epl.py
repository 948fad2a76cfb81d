"""EPL2 byte-stream emitter.

Every textual directive is ASCII followed by CRLF. A GW raster block is its
header line, then exactly ``bytes_per_row * height`` raw bytes, then CRLF;
the payload is appended verbatim and never scanned for line endings.
"""

from collections.abc import Iterator

from epl2label.domain.document import (
    Barcode,
    LabelDocument,
    Rule,
    RuleOrientation,
    TextBlock,
)
from epl2label.domain.raster import PackedRaster

EOL = b"\r\n"

# EPL2 barcode type code for EAN-13
EAN13_TYPE = "E30"


class Epl2Emitter:
    """Append-only builder of an EPL2 print job.

    Example:
        emitter = Epl2Emitter()
        emitter.emit_header(440, 320, gap=24, darkness=8, speed=2)
        emitter.emit_barcode(20, 90, 0, 2, 3, 52, True, "6223001234562")
        emitter.emit_end()
        job = emitter.getvalue()
    """

    def __init__(self) -> None:
        self._buffer = bytearray()

    def _line(self, directive: str) -> None:
        self._buffer.extend(directive.encode("ascii"))
        self._buffer.extend(EOL)

    def emit_header(
        self,
        canvas_width: int,
        canvas_height: int,
        gap: int,
        darkness: int,
        speed: int,
    ) -> None:
        """Clear the image buffer and set label geometry, darkness and speed."""
        self._line("N")
        self._line(f"q{canvas_width}")
        self._line(f"Q{canvas_height},{gap}")
        self._line(f"D{darkness}")
        self._line(f"S{speed}")

    def emit_image(self, x: int, y: int, raster: PackedRaster) -> None:
        """Append a GW raster block."""
        self._line(f"GW{x},{y},{raster.bytes_per_row},{raster.height}")
        self._buffer.extend(raster.rows)
        self._buffer.extend(EOL)

    def emit_barcode(
        self,
        x: int,
        y: int,
        rotation: int,
        narrow: int,
        wide: int,
        height: int,
        hri_visible: bool,
        digits: str,
    ) -> None:
        """Append an EAN-13 B directive."""
        hri_flag = "B" if hri_visible else "N"
        self._line(
            f'B{x},{y},{rotation},{EAN13_TYPE},{narrow},{wide},{height},{hri_flag},"{digits}"'
        )

    def emit_rule(
        self,
        x: int,
        y: int,
        thickness: int,
        length: int,
        orientation: RuleOrientation = RuleOrientation.VERTICAL,
    ) -> None:
        """Append an LO line directive.

        LO takes the horizontal extent before the vertical one, so a
        horizontal rule writes its length first.
        """
        if orientation is RuleOrientation.VERTICAL:
            self._line(f"LO{x},{y},{thickness},{length}")
        else:
            self._line(f"LO{x},{y},{length},{thickness}")

    def emit_end(self) -> None:
        """Print exactly one copy."""
        self._line("P1")

    def emit_document(self, document: LabelDocument) -> bytes:
        """Emit a whole document, in document order, and return the job bytes."""
        self.emit_header(
            document.canvas_width,
            document.canvas_height,
            document.gap,
            document.darkness,
            document.speed,
        )
        for element in document.elements:
            if isinstance(element, TextBlock):
                self.emit_image(element.x, element.y, element.raster)
            elif isinstance(element, Barcode):
                self.emit_barcode(
                    element.x,
                    element.y,
                    element.rotation,
                    element.narrow,
                    element.wide,
                    element.height,
                    element.hri_visible,
                    element.digits,
                )
            elif isinstance(element, Rule):
                self.emit_rule(
                    element.x,
                    element.y,
                    element.thickness,
                    element.length,
                    element.orientation,
                )
            else:
                raise TypeError(f"Unknown label element: {type(element).__name__}")
        self.emit_end()
        return self.getvalue()

    def getvalue(self) -> bytes:
        return bytes(self._buffer)

    def __len__(self) -> int:
        return len(self._buffer)


def emit_document(document: LabelDocument) -> bytes:
    """Serialize ``document`` with a fresh emitter."""
    return Epl2Emitter().emit_document(document)


def iter_directives(data: bytes) -> Iterator[tuple[str, bytes]]:
    """Split an EPL2 job into ``(directive, payload)`` pairs.

    ``payload`` is the raw raster of a GW block and ``b""`` for every other
    directive. The raster length comes from the GW header, so payload bytes
    that look like CRLF are never mistaken for a line end.

    Raises:
        ValueError: If the stream is truncated or a GW block is malformed
    """
    pos = 0
    while pos < len(data):
        end = data.find(EOL, pos)
        if end < 0:
            raise ValueError(f"Unterminated directive at offset {pos}")
        directive = data[pos:end].decode("ascii")
        pos = end + len(EOL)

        payload = b""
        if directive.startswith("GW"):
            try:
                _x, _y, bpr, height = (int(part) for part in directive[2:].split(","))
            except ValueError as e:
                raise ValueError(f"Malformed GW header {directive!r}") from e
            size = bpr * height
            payload = data[pos : pos + size]
            if len(payload) != size or data[pos + size : pos + size + len(EOL)] != EOL:
                raise ValueError(f"Truncated GW block {directive!r}")
            pos += size + len(EOL)

        yield directive, payload
