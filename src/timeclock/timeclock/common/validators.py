from __future__ import annotations

from datetime import date, datetime

from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date, parse_iso_datetime


def require_positive_int(value, field_name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a whole number") from None
    if number <= 0:
        raise ValidationError(f"{field_name} must be positive")
    return number


def optional_date(value: str | None, field_name: str) -> date | None:
    if value is None or not str(value).strip():
        return None
    try:
        return parse_iso_date(str(value).strip())
    except ValueError:
        raise ValidationError(f"{field_name} must be YYYY-MM-DD") from None


def optional_datetime(value: str | None, field_name: str) -> datetime | None:
    if value is None or not str(value).strip():
        return None
    try:
        parsed = parse_iso_datetime(str(value))
    except ValueError:
        raise ValidationError(f"{field_name} must be an ISO date and time") from None
    # Shift times are stored as kiosk-local wall clock.
    if parsed.tzinfo is not None:
        raise ValidationError(f"{field_name} must be a local time without a UTC offset")
    return parsed
