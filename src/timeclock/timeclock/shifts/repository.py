from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import ShiftCorrection, ShiftRecord, ShiftReportRow


class ShiftRepository(Protocol):
    def get_active_shift(self, employee_id: int) -> Optional[ShiftRecord]:
        raise NotImplementedError

    def get_by_id(self, shift_id: int) -> Optional[ShiftRecord]:
        raise NotImplementedError

    def get_shift_for_date(self, employee_id: int, shift_date: date) -> Optional[ShiftRecord]:
        raise NotImplementedError

    def get_shifts_for_date(self, employee_id: int, shift_date: date) -> Sequence[ShiftRecord]:
        raise NotImplementedError

    def get_shifts_in_range(self, employee_id: int, start: date, end: date) -> Sequence[ShiftRecord]:
        raise NotImplementedError

    def get_most_recent_completed(self, employee_id: int) -> Optional[ShiftRecord]:
        raise NotImplementedError

    def save(self, record: ShiftRecord) -> ShiftRecord:
        raise NotImplementedError

    def save_correction(self, record: ShiftRecord, correction: ShiftCorrection) -> ShiftRecord:
        raise NotImplementedError

    def list_corrections(self, shift_id: int) -> Sequence[ShiftCorrection]:
        raise NotImplementedError

    def delete_by_id(self, shift_id: int) -> bool:
        raise NotImplementedError

    def delete_for_date(self, employee_id: int, shift_date: date) -> int:
        raise NotImplementedError

    def delete_range(self, employee_id: int, start: date, end: date) -> int:
        raise NotImplementedError

    def get_report_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_id: Optional[int] = None,
        job_title: Optional[str] = None,
    ) -> Sequence[ShiftReportRow]:
        raise NotImplementedError

    def count_entries(self, *, start_date: date, end_date: date, employee_id: Optional[int] = None) -> int:
        raise NotImplementedError
