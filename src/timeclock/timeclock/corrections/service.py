from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, Optional

from ..auth.service import ManagerAuthService
from ..common.datetime_utils import now_local
from ..core.enums import ErrorKind
from ..core.exceptions import InvalidDurationError, StoreError
from ..core.result import Result
from ..employees.repository import EmployeeRepository
from ..payroll.calculator.base import PayCalculator
from ..payroll.calculator.standard_calculator import BreakDeductionCalculator
from ..shifts.locks import EmployeeLocks
from ..shifts.model import ShiftCorrection, ShiftRecord
from ..shifts.policy import ShiftPolicy
from ..shifts.repository import ShiftRepository
from ..shifts.service import append_note

logger = logging.getLogger(__name__)


def _fmt(value: Optional[datetime]) -> str:
    return value.strftime("%Y-%m-%d %H:%M") if value else "none"


def audit_note(
    *,
    old_in: Optional[datetime],
    new_in: Optional[datetime],
    old_out: Optional[datetime],
    new_out: Optional[datetime],
    reason: str,
) -> str:
    parts = []
    if new_in != old_in:
        parts.append(f"clock-in {_fmt(old_in)} -> {_fmt(new_in)}")
    if new_out != old_out:
        parts.append(f"clock-out {_fmt(old_out)} -> {_fmt(new_out)}")
    if reason:
        parts.append(f"reason: {reason}")
    return "Correction: " + "; ".join(parts)


class CorrectionService:
    """Manager override of a shift's recorded instants.

    Skips the kiosk rules (cooldown, too-soon, 16h cap) but keeps the
    duration positive and under the correction ceiling. The entry update and
    its audit row are written in one transaction.
    """

    def __init__(
        self,
        shifts: ShiftRepository,
        employees: EmployeeRepository,
        auth: ManagerAuthService,
        *,
        calculator: Optional[PayCalculator] = None,
        policy: Optional[ShiftPolicy] = None,
        locks: Optional[EmployeeLocks] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._shifts = shifts
        self._employees = employees
        self._auth = auth
        self._calculator = calculator or BreakDeductionCalculator()
        self._policy = policy or ShiftPolicy()
        self._locks = locks or EmployeeLocks()
        self._clock = clock

    def correct_shift(
        self,
        employee_id: int,
        shift_id: int,
        *,
        corrected_in: Optional[datetime] = None,
        corrected_out: Optional[datetime] = None,
        reason: str = "",
        now: datetime | None = None,
    ) -> Result[ShiftRecord]:
        if not self._auth.is_valid():
            return Result.fail(ErrorKind.NOT_AUTHORIZED, "Manager authentication required.")
        if corrected_in is None and corrected_out is None:
            return Result.fail(ErrorKind.NOTHING_TO_CORRECT, "Provide a corrected clock-in or clock-out time.")

        with self._locks.for_employee(employee_id):
            now = now or self._clock()
            try:
                return self._correct(
                    employee_id,
                    shift_id,
                    corrected_in=corrected_in,
                    corrected_out=corrected_out,
                    reason=(reason or "").strip(),
                    now=now,
                )
            except StoreError:
                logger.error("Correction of shift %s failed in the store", shift_id, exc_info=True)
                return Result.fail(ErrorKind.PERSISTENCE_FAILED, "Could not save the correction. Please try again.")

    def _correct(
        self,
        employee_id: int,
        shift_id: int,
        *,
        corrected_in: Optional[datetime],
        corrected_out: Optional[datetime],
        reason: str,
        now: datetime,
    ) -> Result[ShiftRecord]:
        record = self._shifts.get_by_id(shift_id)
        if not record or record.employee_id != employee_id:
            return Result.fail(ErrorKind.SHIFT_NOT_FOUND, f"Shift {shift_id} was not found for employee {employee_id}.")

        employee = self._employees.get_by_id(employee_id)
        if not employee:
            return Result.fail(ErrorKind.EMPLOYEE_NOT_FOUND, "Employee not found. Please try another ID.")

        for value in (corrected_in, corrected_out):
            if value is not None and value > now:
                return Result.fail(ErrorKind.FUTURE_TIME, "Corrected times cannot be in the future.")

        old_in = record.effective_clock_in
        old_out = record.effective_clock_out
        new_in = corrected_in or old_in
        new_out = corrected_out or old_out
        if new_in is None:
            return Result.fail(ErrorKind.NOTHING_TO_CORRECT, "The shift has no clock-in time to correct against.")

        updated = replace(
            record,
            shift_date=corrected_in.date() if corrected_in else record.shift_date,
            actual_clock_in=new_in,
            clock_in_time=new_in.time().replace(microsecond=0),
        )

        if new_out is not None:
            if new_out <= new_in:
                return Result.fail(
                    ErrorKind.NEGATIVE_OR_ZERO_DURATION, "Clock-out time must be after clock-in time."
                )
            if new_out - new_in > self._policy.max_corrected_shift:
                max_hours = int(self._policy.max_corrected_shift.total_seconds() // 3600)
                return Result.fail(
                    ErrorKind.MAX_DURATION_EXCEEDED, f"A corrected shift cannot be longer than {max_hours} hours."
                )
            try:
                total_hours = self._calculator.compute_hours(
                    new_in, new_out, self._policy.break_threshold, self._policy.break_duration
                )
            except InvalidDurationError:
                return Result.fail(
                    ErrorKind.NEGATIVE_OR_ZERO_DURATION, "Clock-out time must be after clock-in time."
                )
            updated = replace(
                updated,
                actual_clock_out=new_out,
                clock_out_time=new_out.time().replace(microsecond=0),
                is_active=False,
                total_hours=total_hours,
                gross_pay=self._calculator.gross_pay(total_hours, employee.pay_rate),
            )

        updated = replace(
            updated,
            notes=append_note(
                record.notes,
                audit_note(old_in=old_in, new_in=new_in, old_out=old_out, new_out=new_out, reason=reason),
            ),
        )
        correction = ShiftCorrection(
            correction_id=None,
            shift_id=int(record.shift_id),
            employee_id=employee_id,
            old_clock_in=old_in,
            old_clock_out=old_out,
            new_clock_in=new_in,
            new_clock_out=new_out,
            reason=reason,
            corrected_at=now,
        )
        saved = self._shifts.save_correction(updated, correction)
        logger.info("Shift %s of employee %s corrected (%s h)", saved.shift_id, employee_id, saved.total_hours)
        return Result.success(saved, message=f"Shift corrected: {saved.total_hours} hours for {employee.full_name}.")
