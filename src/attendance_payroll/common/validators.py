from __future__ import annotations

import math
from datetime import date
from typing import Any, Optional

from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_date(value: Any, field_name: str = "date") -> date:
    if isinstance(value, date):
        return value
    if not value:
        raise ValidationError(f"{field_name} is required")
    try:
        return parse_iso_date(str(value))
    except ValueError as e:
        raise ValidationError(f"{field_name} must be YYYY-MM-DD") from e


def require_int(value: Any, field_name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{field_name} must be an integer") from e


def require_month_year(month: Any, year: Any) -> tuple[int, int]:
    m = require_int(month, "month")
    y = require_int(year, "year")
    if not 1 <= m <= 12:
        raise ValidationError("month must be between 1 and 12")
    if y < 1900:
        raise ValidationError("year is out of range")
    return m, y


def require_non_negative(value: Optional[float], field_name: str) -> Optional[float]:
    if value is None:
        return None
    if not math.isfinite(value):
        raise ValidationError(f"{field_name} must be a finite number")
    if value < 0:
        raise ValidationError(f"{field_name} must not be negative")
    return value
