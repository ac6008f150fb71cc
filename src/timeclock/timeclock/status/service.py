from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Callable

from ..common.datetime_utils import format_clock, hours_between, now_local
from ..shifts.model import ZERO, EmployeeShiftStatus
from ..shifts.repository import ShiftRepository


class StatusService:
    """Builds the working / available display for one employee. Read only."""

    def __init__(self, shifts: ShiftRepository, *, clock: Callable[[], datetime] = now_local):
        self._shifts = shifts
        self._clock = clock

    def get_status(self, employee_id: int, *, now: datetime | None = None) -> EmployeeShiftStatus:
        now = now or self._clock()
        today = now.date()

        completed_today = [s for s in self._shifts.get_shifts_for_date(employee_id, today) if s.is_completed]
        today_hours = sum((s.total_hours for s in completed_today), ZERO)
        last = self._shifts.get_most_recent_completed(employee_id)
        last_clock_out = last.effective_clock_out if last else None

        active = self._shifts.get_active_shift(employee_id)
        if active and active.effective_clock_in:
            started = active.effective_clock_in
            return EmployeeShiftStatus(
                employee_id=employee_id,
                is_working=True,
                working_hours=round(max(hours_between(started, now), 0.0), 2),
                shift_started=started,
                shift_date=active.shift_date,
                is_cross_midnight=started.date() < today,
                today_completed_hours=Decimal(today_hours),
                last_clock_out=last_clock_out,
                status_text=f"Clocked In since {format_clock(started)}",
            )

        return EmployeeShiftStatus(
            employee_id=employee_id,
            is_working=False,
            today_completed_hours=Decimal(today_hours),
            last_clock_out=last_clock_out,
        )
