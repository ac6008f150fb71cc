from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Optional

from ..core.constants import FULL_DAY_HOURS

ZERO = Decimal("0.00")


@dataclass(frozen=True)
class ShiftRecord:
    """One clock-in event for one employee, open until clocked out.

    ``is_active`` is the only "currently working" signal. The time-of-day
    fields are kept for display of older rows and never drive logic.
    """

    shift_id: Optional[int]
    employee_id: int
    shift_date: date
    clock_in_time: Optional[time] = None
    clock_out_time: Optional[time] = None
    actual_clock_in: Optional[datetime] = None
    actual_clock_out: Optional[datetime] = None
    is_active: bool = False
    total_hours: Decimal = ZERO
    gross_pay: Decimal = ZERO
    notes: str = ""
    clock_in_photo: Optional[str] = None
    clock_out_photo: Optional[str] = None
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None

    @property
    def effective_clock_in(self) -> Optional[datetime]:
        if self.actual_clock_in:
            return self.actual_clock_in
        if self.clock_in_time:
            return datetime.combine(self.shift_date, self.clock_in_time)
        return None

    @property
    def effective_clock_out(self) -> Optional[datetime]:
        if self.actual_clock_out:
            return self.actual_clock_out
        if self.clock_out_time is None:
            return None
        out = datetime.combine(self.shift_date, self.clock_out_time)
        clock_in = self.effective_clock_in
        if clock_in and out < clock_in:
            out += timedelta(days=1)
        return out

    @property
    def is_completed(self) -> bool:
        return not self.is_active and self.total_hours > 0


@dataclass(frozen=True)
class EmployeeShiftStatus:
    """Read-only projection for display layers. Never persisted."""

    employee_id: int
    is_working: bool
    working_hours: float = 0.0
    shift_started: Optional[datetime] = None
    shift_date: Optional[date] = None
    is_cross_midnight: bool = False
    today_completed_hours: Decimal = ZERO
    last_clock_out: Optional[datetime] = None
    status_text: str = "Available"


@dataclass(frozen=True)
class ShiftCorrection:
    """Audit row written with every manager correction."""

    correction_id: Optional[int]
    shift_id: int
    employee_id: int
    old_clock_in: Optional[datetime]
    old_clock_out: Optional[datetime]
    new_clock_in: Optional[datetime]
    new_clock_out: Optional[datetime]
    reason: str
    corrected_at: datetime


@dataclass(frozen=True)
class ShiftReportRow:
    """Shift joined with employee display fields, for reports."""

    shift_id: int
    employee_id: int
    employee_name: str
    job_title: str
    pay_rate: Decimal
    shift_date: date
    clock_in: Optional[datetime]
    clock_out: Optional[datetime]
    total_hours: Decimal
    gross_pay: Decimal
    notes: str = ""
    is_active: bool = False

    @property
    def day_name(self) -> str:
        return self.shift_date.strftime("%A")

    @property
    def is_incomplete(self) -> bool:
        return self.is_active or self.clock_out is None

    @property
    def status(self) -> str:
        if self.is_incomplete:
            return "Incomplete"
        if self.total_hours <= 0:
            return "No Hours"
        if self.total_hours >= FULL_DAY_HOURS:
            return "Full Day"
        return "Partial Day"
