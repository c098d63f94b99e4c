"""Numeric parsing and rounding helpers shared by models and services."""

from __future__ import annotations

import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Any

from core.exceptions import ValidationError


def parse_number(value: Any, field: str) -> float:
    """Parse a user-supplied number, rejecting booleans, blanks, NaN and infinities.

    Args:
        value: Raw value (int, float, or numeric string from a form/JSON body)
        field: Field name reported in the ValidationError

    Returns:
        The value as a float
    """
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{field} must be a number", field=field, value=value)

    if isinstance(value, str):
        value = value.strip().replace(",", ".")
        if not value:
            raise ValidationError(f"{field} must be a number", field=field, value=value)

    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a number", field=field, value=value)

    if math.isnan(number) or math.isinf(number):
        raise ValidationError(f"{field} must be a finite number", field=field, value=value)

    return number


def parse_positive(value: Any, field: str) -> float:
    """Parse a number that must be strictly greater than zero."""
    number = parse_number(value, field)
    if number <= 0:
        raise ValidationError(f"{field} must be greater than zero", field=field, value=value)
    return number


def parse_non_negative(value: Any, field: str) -> float:
    """Parse a number that must be zero or greater."""
    number = parse_number(value, field)
    if number < 0:
        raise ValidationError(f"{field} must not be negative", field=field, value=value)
    return number


def parse_whole(value: Any, field: str, allow_zero: bool = False) -> int:
    """Parse a whole number (quantities, currency amounts).

    Floats with no fractional part (e.g. ``3.0`` from JSON) are accepted.
    """
    number = parse_non_negative(value, field) if allow_zero else parse_positive(value, field)
    if not number.is_integer():
        raise ValidationError(f"{field} must be a whole number", field=field, value=value)
    return int(number)


def clamp(value: float, lower: float, upper: float) -> float:
    """Clamp value into [lower, upper]."""
    return max(lower, min(upper, value))


def to_whole_units(amount: float) -> int:
    """Round a currency amount to whole units, halves rounding away from zero."""
    return int(Decimal(repr(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def round_area(area: float) -> float:
    """Round an area to 2 decimals. Display only, never feed back into totals."""
    return round(area, 2)
