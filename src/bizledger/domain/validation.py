from __future__ import annotations

import math
from typing import Optional

from bizledger.domain.errors import ValidationError


def require_text(value: Optional[str], field: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValidationError(f"{field} is required.")
    return text


def optional_text(value: Optional[str]) -> Optional[str]:
    text = (value or "").strip()
    return text or None


def _number(value, field: str) -> float:
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number.")
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{field} must be a number.") from e
    if not math.isfinite(number):
        raise ValidationError(f"{field} must be a number.")
    return number


def non_negative(value, field: str) -> float:
    number = _number(value, field)
    if number < 0:
        raise ValidationError(f"{field} must be >= 0.")
    return number


def positive(value, field: str) -> float:
    number = _number(value, field)
    if number <= 0:
        raise ValidationError(f"{field} must be > 0.")
    return number


def whole_number(value, field: str, minimum: int = 0) -> int:
    number = _number(value, field)
    if not number.is_integer():
        raise ValidationError(f"{field} must be a whole number.")
    if number < minimum:
        raise ValidationError(f"{field} must be >= {minimum}.")
    return int(number)
