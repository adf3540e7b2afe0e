from decimal import Decimal

import pytest

from tableside.core.errors import ValidationError
from tableside.services.pricing import format_amount, parse_amount


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("12.99", Decimal("12.99")),
        (12.99, Decimal("12.99")),
        (3, Decimal("3.00")),
        ("$4.5", Decimal("4.50")),
        (" 0.005 ", Decimal("0.01")),
    ],
)
def test_parse_amount_accepts_text_and_numbers(raw, expected):
    assert parse_amount(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "  ", True])
def test_parse_amount_requires_a_value(raw):
    with pytest.raises(ValidationError) as exc_info:
        parse_amount(raw, field="Price")
    assert exc_info.value.message == "Price is required"


@pytest.mark.parametrize("raw", ["abc", "NaN", "Infinity", "1,50"])
def test_parse_amount_rejects_non_decimals(raw):
    with pytest.raises(ValidationError):
        parse_amount(raw)


def test_parse_amount_rejects_negative():
    with pytest.raises(ValidationError) as exc_info:
        parse_amount("-1.00", field="Price")
    assert exc_info.value.message == "Price must not be negative"


def test_float_sums_do_not_drift():
    total = parse_amount(0.1) + parse_amount(0.2)
    assert format_amount(total) == "0.30"


@pytest.mark.parametrize("raw", ["1e30", "1000000", 10**19])
def test_parse_amount_rejects_oversized_values(raw):
    with pytest.raises(ValidationError) as exc_info:
        parse_amount(raw, field="Price")
    assert exc_info.value.message == "Price must not exceed 999999.99"


def test_parse_amount_accepts_custom_ceiling():
    assert parse_amount("5000000", maximum=Decimal("99999999.99")) == Decimal("5000000.00")
