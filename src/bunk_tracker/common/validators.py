from __future__ import annotations

import re
from datetime import date
from typing import Optional

from ..core.enums import AttendanceStatus, Weekday
from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date

_HHMM = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_non_negative_int(value, field_name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a whole number")
    if isinstance(value, float) and value != number:
        raise ValidationError(f"{field_name} must be a whole number")
    if number < 0:
        raise ValidationError(f"{field_name} cannot be negative")
    return number


def require_percentage(value, field_name: str) -> float:
    try:
        pct = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if pct != pct or pct < 0 or pct > 100:
        raise ValidationError(f"{field_name} must be between 0 and 100")
    return pct


def optional_percentage(value, field_name: str) -> Optional[float]:
    if value is None:
        return None
    return require_percentage(value, field_name)


def require_lecture_counts(attended: int, total: int) -> None:
    if attended > total:
        raise ValidationError("Attended lectures cannot exceed total lectures")


def require_hhmm(value: str, field_name: str) -> str:
    """Times are compared as strings, so only zero-padded 24h HH:MM is accepted."""
    if not isinstance(value, str) or not _HHMM.match(value):
        raise ValidationError(f"{field_name} must be HH:MM (24h)")
    return value


def require_time_range(start: str, end: str) -> None:
    if start >= end:
        raise ValidationError("End time must be after start time")


def require_iso_date(value, field_name: str) -> str:
    if isinstance(value, date):
        return value.isoformat()
    try:
        return parse_iso_date(value).isoformat()
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a YYYY-MM-DD date")


def require_weekday(value) -> Weekday:
    try:
        return Weekday(value)
    except ValueError:
        raise ValidationError(f"Unknown day: {value}")


def require_status(value) -> AttendanceStatus:
    try:
        return AttendanceStatus(value)
    except ValueError:
        raise ValidationError("Status must be 'present' or 'absent'")
