"""Tests for phone number normalization."""

import pytest

from vapi_gateway.core.exceptions import ValidationError
from vapi_gateway.utils.helpers import normalize_phone_number


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("+14155550123", "+14155550123"),
        ("14155550123", "+14155550123"),
        ("+1 (415) 555-0123", "+14155550123"),
        ("(555) 123-4567", "+5551234567"),
        ("44 20 7946 0958", "+442079460958"),
        ("123456789", "+123456789"),                # 9 digits, shortest accepted
        ("+123456789012345", "+123456789012345"),   # 15 digits, longest accepted
    ],
)
def test_valid_numbers_get_leading_plus(raw, expected):
    assert normalize_phone_number(raw) == expected


@pytest.mark.parametrize(
    "raw",
    [
        "12345678",            # 8 digits
        "1234567890123456",    # 16 digits
        "0123456789",          # leading zero
        "+0123456789",
        "555-CALL-NOW",
        "++14155550123",
        "+1.415.555.0123",     # dots are not stripped
        "",
    ],
)
def test_invalid_numbers_are_rejected(raw):
    with pytest.raises(ValidationError) as exc_info:
        normalize_phone_number(raw)

    assert "Invalid phone number format" in exc_info.value.message
    assert exc_info.value.status_code == 400
