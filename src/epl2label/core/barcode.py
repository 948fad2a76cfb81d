"""EAN-13 normalization and checksum.

The engine always computes the check digit itself; bars and spaces are drawn
by printer firmware from the digits carried by the B directive.
"""

from epl2label.config import PrinterProfile
from epl2label.domain.document import EAN13_MODULES
from epl2label.exceptions import InvalidBarcodeDigitsError

PAYLOAD_LENGTH = 12


def ean13_checksum(payload: str) -> int:
    """Compute the EAN-13 check digit of a 12-digit payload.

    Digits at even indices weigh 1, odd indices weigh 3;
    check = (10 - sum mod 10) mod 10.

    Args:
        payload: Exactly 12 ASCII digits

    Returns:
        Check digit 0-9

    Raises:
        ValueError: If payload is not 12 digits
    """
    if len(payload) != PAYLOAD_LENGTH or not payload.isascii() or not payload.isdigit():
        raise ValueError(f"EAN-13 payload must be 12 digits, got {payload!r}")

    total = sum(int(d) * (3 if i % 2 else 1) for i, d in enumerate(payload))
    return (10 - total % 10) % 10


def normalize_payload(raw: str) -> str:
    """Reduce arbitrary text to a 12-digit EAN-13 payload.

    Non-digits are dropped. From 13 or more digits the first 12 are kept (a
    trailing check digit is recomputed, never trusted); fewer than 12 are
    right-padded with '0'.

    Raises:
        InvalidBarcodeDigitsError: If ``raw`` holds no digits at all
    """
    digits = "".join(char for char in raw if char.isascii() and char.isdigit())
    if not digits:
        raise InvalidBarcodeDigitsError(raw)
    return digits[:PAYLOAD_LENGTH].ljust(PAYLOAD_LENGTH, "0")


def normalize_ean13(raw: str) -> str:
    """Return the full 13-digit EAN-13 code for ``raw``.

    Example:
        >>> normalize_ean13("622300123456")
        '6223001234562'
    """
    payload = normalize_payload(raw)
    return payload + str(ean13_checksum(payload))


def is_valid_ean13(code: str) -> bool:
    """Check that ``code`` is 13 digits with a consistent check digit."""
    if len(code) != PAYLOAD_LENGTH + 1 or not code.isascii() or not code.isdigit():
        return False
    return ean13_checksum(code[:PAYLOAD_LENGTH]) == int(code[-1])


def barcode_payload(code: str, profile: PrinterProfile) -> str:
    """Digits to place in the B directive for a normalized 13-digit code.

    With ``firmware_checksum`` the printer appends the check digit itself,
    so only the 12-digit payload is sent.
    """
    return code[:PAYLOAD_LENGTH] if profile.firmware_checksum else code


def ean13_width(narrow: int) -> int:
    """Printed width of an EAN-13 symbol in dots."""
    return EAN13_MODULES * narrow
