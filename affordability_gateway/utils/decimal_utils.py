"""Decimal coercion and validation for monetary inputs"""

from decimal import Decimal, InvalidOperation
from typing import Union

from affordability_gateway.domain.exceptions import InvalidInputError

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number, field: str) -> Decimal:
    """Convert to a finite Decimal, going through str so floats keep their shortest repr"""
    if isinstance(value, bool) or value is None:
        raise InvalidInputError(f"{field} must be a number, got {value!r}")
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidInputError(f"{field} must be a number, got {value!r}")
    if not result.is_finite():
        raise InvalidInputError(f"{field} must be finite, got {value!r}")
    return result


def require_positive(value: Number, field: str) -> Decimal:
    result = to_decimal(value, field)
    if result <= 0:
        raise InvalidInputError(f"{field} must be greater than zero, got {value!r}")
    return result


def require_non_negative(value: Number, field: str) -> Decimal:
    result = to_decimal(value, field)
    if result < 0:
        raise InvalidInputError(f"{field} must not be negative, got {value!r}")
    return result
