"""
Input coercion shared by the lifecycle and ledgers.
Each helper returns the cleaned value or raises InvalidInput.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from app.buisness.procurement.errors import InvalidInput
from app.buisness.procurement.financials import to_decimal


def integer(value, field: str, minimum: int = 0, **details) -> int:
    """Whole number >= ``minimum``. Booleans and fractional values are refused."""
    if isinstance(value, bool):
        raise InvalidInput(f"{field} must be an integer", field=field, value=value, **details)
    if isinstance(value, str):
        value = value.strip()
        if not value.lstrip("-").isdigit():
            raise InvalidInput(f"{field} must be an integer", field=field, value=value, **details)
        value = int(value)
    elif isinstance(value, float):
        if not value.is_integer():
            raise InvalidInput(f"{field} must be an integer", field=field, value=value, **details)
        value = int(value)
    elif not isinstance(value, int):
        raise InvalidInput(f"{field} must be an integer", field=field, value=value, **details)

    if value < minimum:
        raise InvalidInput(f"{field} must be at least {minimum}", field=field, value=value, **details)
    return value


def decimal(value, field: str, minimum=None, maximum=None, **details) -> Decimal:
    if value is None or isinstance(value, bool):
        raise InvalidInput(f"{field} must be a number", field=field, value=value, **details)
    try:
        result = to_decimal(value)
    except (InvalidOperation, ValueError):
        raise InvalidInput(f"{field} must be a number", field=field, value=str(value), **details)
    if not result.is_finite():
        raise InvalidInput(f"{field} must be a number", field=field, value=str(value), **details)
    if minimum is not None and result < minimum:
        raise InvalidInput(f"{field} must be at least {minimum}", field=field, value=str(result), **details)
    if maximum is not None and result > maximum:
        raise InvalidInput(f"{field} must be at most {maximum}", field=field, value=str(result), **details)
    return result


def rate(value, field: str) -> Decimal:
    """Percentage in [0, 100]; None means 0."""
    if value is None:
        return Decimal(0)
    return decimal(value, field, minimum=Decimal(0), maximum=Decimal(100))


def text(value, field: str, required: bool = False, max_length: int | None = None) -> str | None:
    if value is None:
        value = ""
    if not isinstance(value, str):
        raise InvalidInput(f"{field} must be text", field=field)
    value = value.strip()
    if required and not value:
        raise InvalidInput(f"{field} is required", field=field)
    if max_length is not None and len(value) > max_length:
        raise InvalidInput(f"{field} must be at most {max_length} characters", field=field)
    return value or None
