from __future__ import annotations

from decimal import Decimal
from typing import Any

from ..core.constants import MAX_AMOUNT
from ..core.exceptions import ValidationError
from .money import to_decimal


def require_non_negative(value: Decimal, field_name: str) -> Decimal:
    if value.is_nan() or value < 0:
        raise ValidationError(f"{field_name} cannot be negative (got {value})")
    return value


def amount_violations(amount: Any, field_name: str) -> list[str]:
    """Problems with a money amount: not a number, negative, or above ``MAX_AMOUNT``."""
    errors: list[str] = []
    value = to_decimal(amount, default=Decimal("NaN"))

    if value.is_nan():
        errors.append(f"{field_name} is not a valid number")
        return errors

    if value < 0:
        errors.append(f"{field_name} cannot be negative")

    if value > MAX_AMOUNT:
        errors.append(f"{field_name} exceeds the maximum allowed amount ({MAX_AMOUNT})")

    return errors


def require_amount(amount: Any, field_name: str) -> Decimal:
    errors = amount_violations(amount, field_name)
    if errors:
        raise ValidationError(f"Invalid {field_name}", errors)
    return to_decimal(amount)


def require_period(month: int, year: int) -> tuple[int, int]:
    if not 1 <= int(month) <= 12:
        raise ValidationError(f"month must be between 1 and 12 (got {month})")
    if int(year) < 1900:
        raise ValidationError(f"year is out of range (got {year})")
    return int(month), int(year)
