from __future__ import annotations

import math
from datetime import datetime
from typing import Any

from ..core.constants import ISO_DATE_FORMAT
from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if not isinstance(value, str) or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def optional_text(value: Any, field_name: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be text")
    return value.strip()


def require_iso_date(value: Any, field_name: str = "Date") -> str:
    """Accept only zero-padded, calendar-valid YYYY-MM-DD strings."""
    if not isinstance(value, str) or len(value) != 10:
        raise ValidationError(f"{field_name} must be in YYYY-MM-DD format")
    try:
        parsed = datetime.strptime(value, ISO_DATE_FORMAT).date()
    except ValueError:
        raise ValidationError(f"{field_name} must be in YYYY-MM-DD format") from None
    if parsed.strftime(ISO_DATE_FORMAT) != value:
        raise ValidationError(f"{field_name} must be in YYYY-MM-DD format")
    return value


def require_grade(value: Any) -> float:
    if isinstance(value, bool):
        raise ValidationError("Grade must be a number")
    try:
        grade = float(value)
    except (TypeError, ValueError):
        raise ValidationError("Grade must be a number") from None
    if not math.isfinite(grade):
        raise ValidationError("Grade must be a finite number")
    return grade
