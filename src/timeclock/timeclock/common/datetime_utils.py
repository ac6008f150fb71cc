from __future__ import annotations

from datetime import date, datetime, timedelta

from ..core.constants import SHORT_SHIFT_MESSAGE_MINUTES


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_iso_datetime(value: str) -> datetime:
    """Parse 'YYYY-MM-DD HH:MM[:SS]' or 'YYYY-MM-DDTHH:MM[:SS]' into datetime."""
    return datetime.fromisoformat(value.strip())


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def monday_of_week(day: date) -> date:
    return day - timedelta(days=day.weekday())


def week_label(day: date) -> str:
    """Label like 'Week 07 (Mon Feb 09 - Sun Feb 15, 2026)'."""
    start = monday_of_week(day)
    end = start + timedelta(days=6)
    week_no = day.isocalendar()[1]
    return f"Week {week_no:02d} ({start:%a %b %d} - {end:%a %b %d, %Y})"


def hours_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 3600


def split_duration(value: timedelta) -> tuple[int, int]:
    """Return (hours, minutes) of a non-negative timedelta."""
    total_minutes = max(int(value.total_seconds() // 60), 0)
    return total_minutes // 60, total_minutes % 60


def format_duration(value: timedelta) -> str:
    """Human text: whole minutes for very short spans, otherwise '1.5 hours'."""
    minutes = int(value.total_seconds() // 60)
    if minutes < SHORT_SHIFT_MESSAGE_MINUTES:
        return f"{minutes} minute" if minutes == 1 else f"{minutes} minutes"
    return f"{value.total_seconds() / 3600:.1f} hours"


def format_clock(value: datetime) -> str:
    """12-hour clock text, e.g. '3:05 PM'."""
    return value.strftime("%I:%M %p").lstrip("0")
