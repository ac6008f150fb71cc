from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Callable, Optional

from ..common.datetime_utils import format_clock, format_duration, now_local, split_duration
from ..core.constants import NOTES_SEPARATOR
from ..core.enums import ErrorKind, PhotoEvent, ShiftState
from ..core.exceptions import StoreError
from ..core.result import Result
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..payroll.calculator.base import PayCalculator
from ..payroll.calculator.standard_calculator import BreakDeductionCalculator
from ..photos.service import NullPhotoCapture, PhotoCapture
from .locks import EmployeeLocks
from .model import ShiftRecord
from .policy import ShiftPolicy
from .repository import ShiftRepository

logger = logging.getLogger(__name__)


def append_note(existing: str, note: str) -> str:
    note = (note or "").strip()
    if not note:
        return existing or ""
    return f"{existing}{NOTES_SEPARATOR}{note}" if existing else note


def _since_text(start: datetime, now: datetime) -> str:
    if start.date() == now.date():
        return format_clock(start)
    return f"{start:%a %b %d} {format_clock(start)}"


class ShiftLifecycleService:
    """Clock-in / clock-out state machine.

    Every operation returns a Result; business rule failures never raise.
    All checks are re-evaluated on each call under a per-employee lock, so a
    double tap on the kiosk sees the first tap's write.
    """

    def __init__(
        self,
        shifts: ShiftRepository,
        employees: EmployeeRepository,
        *,
        calculator: Optional[PayCalculator] = None,
        photos: Optional[PhotoCapture] = None,
        policy: Optional[ShiftPolicy] = None,
        locks: Optional[EmployeeLocks] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._shifts = shifts
        self._employees = employees
        self._calculator = calculator or BreakDeductionCalculator()
        self._photos = photos or NullPhotoCapture()
        self._policy = policy or ShiftPolicy()
        self._clock = clock
        self._locks = locks or EmployeeLocks()

    @property
    def policy(self) -> ShiftPolicy:
        return self._policy

    @property
    def locks(self) -> EmployeeLocks:
        return self._locks

    def is_clocked_in(self, employee_id: int) -> bool:
        return self._shifts.get_active_shift(employee_id) is not None

    def cooldown_remaining(self, employee_id: int, *, now: datetime | None = None) -> timedelta:
        now = now or self._clock()
        last = self._shifts.get_most_recent_completed(employee_id)
        if not last or not last.effective_clock_out:
            return timedelta(0)
        remaining = last.effective_clock_out + self._policy.cooldown - now
        return max(remaining, timedelta(0))

    def get_state(self, employee_id: int, *, now: datetime | None = None) -> ShiftState:
        if self.is_clocked_in(employee_id):
            return ShiftState.WORKING
        if self.cooldown_remaining(employee_id, now=now) > timedelta(0):
            return ShiftState.COOLING_DOWN
        return ShiftState.AVAILABLE

    def clock_in(self, employee_id: int, *, notes: str = "", now: datetime | None = None) -> Result[ShiftRecord]:
        with self._locks.for_employee(employee_id):
            now = now or self._clock()
            try:
                return self._clock_in(employee_id, notes=notes, now=now)
            except StoreError:
                logger.error("Clock-in for employee %s failed in the store", employee_id, exc_info=True)
                return Result.fail(ErrorKind.PERSISTENCE_FAILED, "Could not save the clock-in. Please try again.")

    def clock_out(self, employee_id: int, *, notes: str = "", now: datetime | None = None) -> Result[ShiftRecord]:
        with self._locks.for_employee(employee_id):
            now = now or self._clock()
            try:
                return self._clock_out(employee_id, notes=notes, now=now)
            except StoreError:
                logger.error("Clock-out for employee %s failed in the store", employee_id, exc_info=True)
                return Result.fail(ErrorKind.PERSISTENCE_FAILED, "Could not save the clock-out. Please try again.")

    def _clock_in(self, employee_id: int, *, notes: str, now: datetime) -> Result[ShiftRecord]:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            return self._reject(employee_id, ErrorKind.EMPLOYEE_NOT_FOUND, "Employee not found. Please try another ID.")
        if not employee.is_active:
            return self._reject(employee_id, ErrorKind.EMPLOYEE_INACTIVE, f"{employee.full_name} is not currently active.")

        active = self._shifts.get_active_shift(employee_id)
        if active:
            started = active.effective_clock_in or now
            return self._reject(
                employee_id,
                ErrorKind.ALREADY_CLOCKED_IN,
                f"{employee.full_name} is already clocked in since {_since_text(started, now)}.",
            )

        remaining = self.cooldown_remaining(employee_id, now=now)
        if remaining > timedelta(0):
            available_at = now + remaining
            hours, minutes = split_duration(remaining)
            failure = Result.fail(
                ErrorKind.COOLDOWN_ACTIVE,
                f"{employee.full_name} must wait {hours} hours and {minutes} minutes before clocking in again. "
                f"Available at {format_clock(available_at)}.",
                remaining=remaining,
                available_at=available_at,
            )
            logger.info("Clock-in rejected for employee %s: %s", employee_id, ErrorKind.COOLDOWN_ACTIVE.value)
            return failure

        record = ShiftRecord(
            shift_id=None,
            employee_id=employee_id,
            shift_date=now.date(),
            clock_in_time=now.time().replace(microsecond=0),
            actual_clock_in=now,
            is_active=True,
            notes=append_note("", notes),
            clock_in_photo=self._capture(employee_id, PhotoEvent.CLOCK_IN),
        )
        saved = self._save(record, record.clock_in_photo)
        logger.info("Employee %s clocked in (shift %s)", employee_id, saved.shift_id)
        return Result.success(saved, message=f"{employee.full_name} clocked in at {format_clock(now)}.")

    def _clock_out(self, employee_id: int, *, notes: str, now: datetime) -> Result[ShiftRecord]:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            return self._reject(employee_id, ErrorKind.EMPLOYEE_NOT_FOUND, "Employee not found. Please try another ID.")

        active = self._shifts.get_active_shift(employee_id)
        if not active or not active.effective_clock_in:
            return self._reject(employee_id, ErrorKind.NOT_CLOCKED_IN, f"{employee.full_name} is not clocked in.")

        elapsed = now - active.effective_clock_in
        if elapsed < self._policy.min_shift:
            minimum = int(self._policy.min_shift.total_seconds() // 60)
            unit = "minute" if minimum == 1 else "minutes"
            return self._reject(
                employee_id,
                ErrorKind.TOO_SOON,
                f"Cannot clock out within {minimum} {unit} of clocking in. Contact manager if this is an error.",
            )

        if elapsed > self._policy.max_shift:
            hours, minutes = split_duration(elapsed)
            max_hours = int(self._policy.max_shift.total_seconds() // 3600)
            return self._reject(
                employee_id,
                ErrorKind.MAX_DURATION_EXCEEDED,
                f"{employee.full_name} has exceeded the maximum shift duration of {max_hours} hours. "
                f"Current shift: {hours} hours {minutes} minutes. "
                "Please contact a manager to authorize this extended shift.",
            )

        warning = None
        if elapsed > self._policy.long_shift_warning:
            hours, minutes = split_duration(elapsed)
            warning = f"Extended shift: {hours} hours {minutes} minutes."
            logger.warning("Employee %s is clocking out of an extended shift (%s)", employee_id, elapsed)

        total_hours = self._calculator.compute_hours(
            active.effective_clock_in,
            now,
            self._policy.break_threshold,
            self._policy.break_duration,
        )
        updated = replace(
            active,
            actual_clock_in=active.effective_clock_in,
            actual_clock_out=now,
            clock_out_time=now.time().replace(microsecond=0),
            is_active=False,
            total_hours=total_hours,
            gross_pay=self._gross_pay(employee, total_hours),
            notes=append_note(active.notes, notes),
            clock_out_photo=self._capture(employee_id, PhotoEvent.CLOCK_OUT),
        )
        saved = self._save(updated, updated.clock_out_photo)
        logger.info("Employee %s clocked out (shift %s, %s h)", employee_id, saved.shift_id, total_hours)
        return Result.success(
            saved,
            message=f"{employee.full_name} clocked out at {format_clock(now)}. Worked {format_duration(elapsed)}.",
            warning=warning,
        )

    def _gross_pay(self, employee: Employee, hours: Decimal) -> Decimal:
        return self._calculator.gross_pay(hours, employee.pay_rate)

    def _save(self, record: ShiftRecord, photo: Optional[str]) -> ShiftRecord:
        try:
            return self._shifts.save(record)
        except StoreError:
            # The photo taken for this event has no row to point at.
            if photo:
                self._discard(photo)
            raise

    def _capture(self, employee_id: int, event: PhotoEvent) -> Optional[str]:
        # A missing photo never blocks the clock operation.
        try:
            return self._photos.capture(employee_id, event)
        except Exception:
            logger.warning("Photo capture raised for employee %s (%s)", employee_id, event.value, exc_info=True)
            return None

    def _discard(self, photo: str) -> None:
        try:
            self._photos.discard(photo)
        except Exception:
            logger.warning("Could not discard photo %s", photo, exc_info=True)

    def _reject(self, employee_id: int, kind: ErrorKind, message: str) -> Result[ShiftRecord]:
        logger.info("Operation rejected for employee %s: %s", employee_id, kind.value)
        return Result.fail(kind, message)
