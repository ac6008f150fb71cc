from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from ..core import constants


@dataclass(frozen=True)
class ShiftPolicy:
    cooldown: timedelta = timedelta(hours=constants.DEFAULT_COOLDOWN_HOURS)
    max_shift: timedelta = timedelta(hours=constants.DEFAULT_MAX_SHIFT_HOURS)
    long_shift_warning: timedelta = timedelta(hours=constants.DEFAULT_LONG_SHIFT_WARNING_HOURS)
    min_shift: timedelta = timedelta(minutes=constants.DEFAULT_MIN_SHIFT_MINUTES)
    break_threshold: timedelta = timedelta(hours=constants.DEFAULT_BREAK_THRESHOLD_HOURS)
    break_duration: timedelta = timedelta(minutes=constants.DEFAULT_BREAK_MINUTES)
    max_corrected_shift: timedelta = timedelta(hours=constants.DEFAULT_MAX_CORRECTED_SHIFT_HOURS)

    @classmethod
    def from_settings(cls, settings) -> "ShiftPolicy":
        def hours(name: str, default: float) -> timedelta:
            return timedelta(hours=float(getattr(settings, name, default)))

        def minutes(name: str, default: float) -> timedelta:
            return timedelta(minutes=float(getattr(settings, name, default)))

        return cls(
            cooldown=hours("COOLDOWN_HOURS", constants.DEFAULT_COOLDOWN_HOURS),
            max_shift=hours("MAX_SHIFT_HOURS", constants.DEFAULT_MAX_SHIFT_HOURS),
            long_shift_warning=hours("LONG_SHIFT_WARNING_HOURS", constants.DEFAULT_LONG_SHIFT_WARNING_HOURS),
            min_shift=minutes("MIN_SHIFT_MINUTES", constants.DEFAULT_MIN_SHIFT_MINUTES),
            break_threshold=hours("BREAK_THRESHOLD_HOURS", constants.DEFAULT_BREAK_THRESHOLD_HOURS),
            break_duration=minutes("BREAK_MINUTES", constants.DEFAULT_BREAK_MINUTES),
            max_corrected_shift=hours("MAX_CORRECTED_SHIFT_HOURS", constants.DEFAULT_MAX_CORRECTED_SHIFT_HOURS),
        )
