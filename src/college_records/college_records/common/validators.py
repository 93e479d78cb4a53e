from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from ..core.constants import CENT
from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_id(value: Any, field_name: str) -> int:
    """Accept a positive integer id (int or digit string)."""
    if isinstance(value, bool):
        raise ValidationError(f"Invalid {field_name}")
    if isinstance(value, str):
        value = value.strip()
        if not value.isdigit():
            raise ValidationError(f"Invalid {field_name}")
    try:
        ident = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {field_name}")
    if ident <= 0:
        raise ValidationError(f"Invalid {field_name}")
    return ident


def require_amount(
    value: Any,
    field_name: str,
    *,
    max_value: Decimal,
    allow_zero: bool = False,
) -> Decimal:
    """Coerce to a Decimal with at most two decimal places within (0, max_value].

    With ``allow_zero`` the lower bound becomes inclusive.
    """
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{field_name} is required")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if not amount.is_finite():
        raise ValidationError(f"{field_name} must be a number")
    if amount < 0 or (amount == 0 and not allow_zero):
        raise ValidationError(f"{field_name} must be greater than 0" if not allow_zero else f"{field_name} cannot be negative")
    if amount > max_value:
        raise ValidationError(f"{field_name} cannot exceed {max_value}")
    if amount != amount.quantize(CENT):
        raise ValidationError(f"{field_name} cannot have more than 2 decimal places")
    return amount.quantize(CENT)
