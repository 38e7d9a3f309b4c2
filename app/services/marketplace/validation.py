# app/services/marketplace/validation.py
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from app.core.errors import ValidationError

CENT = Decimal("0.01")
# Numeric(18, 2) columns: at most 16 digits before the decimal point
MAX_INTEGER_DIGITS = 16
MIN_RATING = 1
MAX_RATING = 5


def validate_amount(value: Any, field: str = "amount") -> Decimal:
    """Strictly positive decimal with at most 2 fractional digits"""
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a decimal number")
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError(f"{field} must be a decimal number")
    if not amount.is_finite() or amount <= 0:
        raise ValidationError(f"{field} must be greater than zero")
    if amount.as_tuple().exponent < -2:
        raise ValidationError(f"{field} must have at most 2 decimal places")
    if amount.adjusted() >= MAX_INTEGER_DIGITS:
        raise ValidationError(f"{field} must have at most {MAX_INTEGER_DIGITS} digits before the decimal point")
    return amount.quantize(CENT)


def validate_int_range(value: Any, low: int, high: int, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field} must be an integer")
    if value < low or value > high:
        raise ValidationError(f"{field} must be between {low} and {high}")
    return value


def validate_rating(value: Any) -> int:
    return validate_int_range(value, MIN_RATING, MAX_RATING, "rating")


def validate_text(value: Optional[str], field: str, max_length: Optional[int] = None) -> str:
    """Non-blank string, stripped"""
    text = (value or "").strip()
    if not text:
        raise ValidationError(f"{field} is required")
    if max_length is not None and len(text) > max_length:
        raise ValidationError(f"{field} must be at most {max_length} characters")
    return text
