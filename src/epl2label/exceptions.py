"""Exception hierarchy for epl2label."""

from enum import Enum


class LabelError(Exception):
    """Base exception for all epl2label errors."""

    pass


class CompositionError(LabelError):
    """Errors detected while composing a label, before any byte is emitted."""

    pass


class InvalidProductCountError(CompositionError):
    """Product list length is not one of the supported arrangements."""

    def __init__(self, count: int) -> None:
        self.count = count
        super().__init__(f"Unsupported product count {count}: expected 2 or 4")


class InvalidBarcodeDigitsError(CompositionError):
    """Barcode text contains no digits to encode."""

    def __init__(self, raw: str) -> None:
        self.raw = raw
        super().__init__(f"Barcode {raw!r} contains no digits")


class FontDecodeError(CompositionError):
    """Font bytes could not be parsed as a font."""

    def __init__(self, reason: str, source: str = "<bytes>") -> None:
        self.reason = reason
        self.source = source
        super().__init__(f"Failed to decode font '{source}': {reason}")


class CanvasTooSmallError(CompositionError):
    """Canvas cannot hold the elements of the chosen arrangement."""

    def __init__(self, required: int, available: int, detail: str) -> None:
        self.required = required
        self.available = available
        self.detail = detail
        super().__init__(
            f"Canvas too small for {detail}: needs {required} dots, has {available}"
        )


class SendErrorKind(str, Enum):
    """Failure categories reported by printer sinks."""

    NOT_FOUND = "not_found"
    ACCESS_DENIED = "access_denied"
    IO_FAILURE = "io_failure"
    PARTIAL_WRITE = "partial_write"


class SendError(LabelError):
    """Delivering a finished job to a printer or file failed."""

    def __init__(self, kind: SendErrorKind, target: str, reason: str) -> None:
        self.kind = kind
        self.target = target
        self.reason = reason
        super().__init__(f"Sending to '{target}' failed ({kind.value}): {reason}")
