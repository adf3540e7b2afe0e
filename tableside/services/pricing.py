from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from tableside.core.errors import ValidationError

CENT = Decimal("0.01")
MAX_AMOUNT = Decimal("999999.99")


def parse_amount(value: Any, field: str = "price", maximum: Decimal = MAX_AMOUNT) -> Decimal:
    """Parse a money value sent as text or number into a 2-place Decimal.

    Floats are read through their repr, so 12.99 parses as Decimal("12.99").
    Values above ``maximum`` are rejected.
    """
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{field} is required")
    if isinstance(value, float):
        value = repr(value)
    raw = str(value).strip().lstrip("$")
    if not raw:
        raise ValidationError(f"{field} is required")
    try:
        amount = Decimal(raw)
    except InvalidOperation as exc:
        raise ValidationError(f"{field} must be a decimal number") from exc
    if not amount.is_finite():
        raise ValidationError(f"{field} must be a decimal number")
    if amount < 0:
        raise ValidationError(f"{field} must not be negative")
    if amount > maximum:
        raise ValidationError(f"{field} must not exceed {format_amount(maximum)}")
    try:
        return amount.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise ValidationError(f"{field} must be a decimal number") from exc


def format_amount(amount: Decimal) -> str:
    return str(amount.quantize(CENT, rounding=ROUND_HALF_UP))
