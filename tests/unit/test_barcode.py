"""Unit tests for EAN-13 normalization and checksum."""

import pytest

from epl2label.config import PrinterProfile
from epl2label.core.barcode import (
    barcode_payload,
    ean13_checksum,
    ean13_width,
    is_valid_ean13,
    normalize_ean13,
    normalize_payload,
)
from epl2label.exceptions import InvalidBarcodeDigitsError


class TestChecksum:
    """Tests for ean13_checksum."""

    @pytest.mark.parametrize(
        ("payload", "check"),
        [
            ("622300123456", 2),
            ("622300654321", 8),
            ("400638133393", 1),
            ("590123412345", 7),
            ("000000000000", 0),
        ],
    )
    def test_known_codes(self, payload: str, check: int) -> None:
        assert ean13_checksum(payload) == check

    @pytest.mark.parametrize("payload", ["12345", "1234567890123", "62230012345a", ""])
    def test_rejects_non_payload(self, payload: str) -> None:
        with pytest.raises(ValueError, match="12 digits"):
            ean13_checksum(payload)


class TestNormalize:
    """Tests for payload and code normalization."""

    def test_twelve_digits(self) -> None:
        """Test a 12-digit payload gets its check digit."""
        assert normalize_ean13("622300123456") == "6223001234562"
        assert normalize_ean13("622300654321") == "6223006543218"

    def test_check_digit_is_recomputed(self) -> None:
        """Test a wrong trailing check digit is replaced."""
        assert normalize_ean13("6223001234569") == "6223001234562"

    def test_long_input_truncated(self) -> None:
        """Test only the first 12 digits are kept."""
        assert normalize_payload("62230012345678901") == "622300123456"

    def test_short_input_padded(self) -> None:
        """Test short input is right-padded with zeros."""
        assert normalize_payload("123") == "123000000000"

    def test_non_digits_dropped(self) -> None:
        """Test separators and letters are ignored."""
        assert normalize_payload("622-300 123/456") == "622300123456"

    def test_non_ascii_digits_dropped(self) -> None:
        """Test Arabic-Indic digits do not count as payload digits."""
        assert normalize_payload("١٢٣45") == "450000000000"

    @pytest.mark.parametrize("raw", ["", "abc", "---", "١٢٣"])
    def test_no_digits_rejected(self, raw: str) -> None:
        with pytest.raises(InvalidBarcodeDigitsError) as exc_info:
            normalize_ean13(raw)
        assert exc_info.value.raw == raw

    def test_result_always_valid(self) -> None:
        """Test every normalized code passes validation."""
        for raw in ["1", "99", "622300123456", "4006381333931", "x7y"]:
            assert is_valid_ean13(normalize_ean13(raw))


class TestValidation:
    """Tests for is_valid_ean13."""

    def test_valid(self) -> None:
        assert is_valid_ean13("5901234123457")

    def test_wrong_check_digit(self) -> None:
        assert not is_valid_ean13("5901234123458")

    def test_wrong_length(self) -> None:
        assert not is_valid_ean13("590123412345")


class TestPayload:
    """Tests for the digits placed in the B directive."""

    def test_full_code_by_default(self) -> None:
        assert barcode_payload("6223001234562", PrinterProfile()) == "6223001234562"

    def test_firmware_checksum_sends_payload(self) -> None:
        profile = PrinterProfile(firmware_checksum=True)
        assert barcode_payload("6223001234562", profile) == "622300123456"

    def test_symbol_width(self) -> None:
        assert ean13_width(2) == 190
        assert ean13_width(3) == 285
