from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Optional

import pytest

from src.timeclock.timeclock.core.enums import PhotoEvent
from src.timeclock.timeclock.core.exceptions import StoreError
from src.timeclock.timeclock.employees.model import Employee
from src.timeclock.timeclock.shifts.model import ShiftCorrection, ShiftRecord


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


class InMemoryEmployees:
    def __init__(self, employees: list[Employee]):
        self._by_id = {e.employee_id: e for e in employees}

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self._by_id.get(employee_id)

    def list_active(self):
        return [e for e in self._by_id.values() if e.is_active]

    def list_job_titles(self):
        return sorted({e.job_title for e in self._by_id.values() if e.is_active and e.job_title})


class InMemoryShifts:
    def __init__(self):
        self.records: dict[int, ShiftRecord] = {}
        self.corrections: list[ShiftCorrection] = []
        self.saves = 0
        self.fail_on_save = False
        self._id = 0

    def _for(self, employee_id: int):
        items = [r for r in self.records.values() if r.employee_id == employee_id]
        items.sort(key=lambda r: (r.effective_clock_in or datetime.min, r.shift_id))
        return items

    def get_active_shift(self, employee_id: int) -> Optional[ShiftRecord]:
        active = [r for r in self._for(employee_id) if r.is_active]
        return active[-1] if active else None

    def get_by_id(self, shift_id: int) -> Optional[ShiftRecord]:
        return self.records.get(shift_id)

    def get_shifts_for_date(self, employee_id: int, shift_date: date):
        return [r for r in self._for(employee_id) if r.shift_date == shift_date]

    def get_shift_for_date(self, employee_id: int, shift_date: date) -> Optional[ShiftRecord]:
        items = self.get_shifts_for_date(employee_id, shift_date)
        return items[-1] if items else None

    def get_shifts_in_range(self, employee_id: int, start: date, end: date):
        return [r for r in self._for(employee_id) if start <= r.shift_date <= end]

    def get_most_recent_completed(self, employee_id: int) -> Optional[ShiftRecord]:
        done = [r for r in self._for(employee_id) if not r.is_active and r.actual_clock_out]
        done.sort(key=lambda r: r.actual_clock_out)
        return done[-1] if done else None

    def save(self, record: ShiftRecord) -> ShiftRecord:
        if self.fail_on_save:
            raise StoreError("disk I/O error")
        self.saves += 1
        if record.shift_id is None:
            self._id += 1
            record = replace(record, shift_id=self._id)
        self.records[record.shift_id] = record
        return record

    def save_correction(self, record: ShiftRecord, correction: ShiftCorrection) -> ShiftRecord:
        saved = self.save(record)
        self.corrections.append(correction)
        return saved

    def list_corrections(self, shift_id: int):
        return [c for c in self.corrections if c.shift_id == shift_id]

    def add(self, record: ShiftRecord) -> ShiftRecord:
        """Insert test data without counting it as a save."""
        self._id += 1
        record = replace(record, shift_id=self._id)
        self.records[record.shift_id] = record
        return record


class RecordingPhotos:
    def __init__(self, *, fail: bool = False):
        self.calls: list[tuple[int, PhotoEvent]] = []
        self.discarded: list[str] = []
        self._fail = fail

    def capture(self, employee_id: int, event: PhotoEvent) -> Optional[str]:
        self.calls.append((employee_id, event))
        if self._fail:
            raise RuntimeError("camera unplugged")
        return f"photos/emp{employee_id}_{event.value}.jpg"

    def discard(self, handle: str) -> None:
        self.discarded.append(handle)


def completed_shift(employee_id: int, clock_in: datetime, clock_out: datetime, hours: str, pay: str = "0") -> ShiftRecord:
    return ShiftRecord(
        shift_id=None,
        employee_id=employee_id,
        shift_date=clock_in.date(),
        clock_in_time=clock_in.time(),
        clock_out_time=clock_out.time(),
        actual_clock_in=clock_in,
        actual_clock_out=clock_out,
        is_active=False,
        total_hours=Decimal(hours),
        gross_pay=Decimal(pay),
    )


def open_shift(employee_id: int, clock_in: datetime) -> ShiftRecord:
    return ShiftRecord(
        shift_id=None,
        employee_id=employee_id,
        shift_date=clock_in.date(),
        clock_in_time=clock_in.time(),
        actual_clock_in=clock_in,
        is_active=True,
    )


@pytest.fixture
def fixed_now() -> datetime:
    # Monday
    return datetime(2026, 2, 2, 9, 0, 0)


@pytest.fixture
def clock(fixed_now) -> FakeClock:
    return FakeClock(fixed_now)


@pytest.fixture
def employees() -> InMemoryEmployees:
    return InMemoryEmployees(
        [
            Employee(employee_id=1, first_name="John", last_name="Doe", pay_rate=Decimal("20.00"), job_title="Developer"),
            Employee(employee_id=2, first_name="Jane", last_name="Smith", pay_rate=Decimal("22.50"), job_title="Designer"),
            Employee(
                employee_id=3,
                first_name="Old",
                last_name="Timer",
                pay_rate=Decimal("18.00"),
                job_title="Tester",
                is_active=False,
            ),
        ]
    )


@pytest.fixture
def shifts() -> InMemoryShifts:
    return InMemoryShifts()


@pytest.fixture
def photos() -> RecordingPhotos:
    return RecordingPhotos()


@pytest.fixture
def make_completed():
    return completed_shift


@pytest.fixture
def make_open():
    return open_shift


@pytest.fixture
def failing_photos() -> RecordingPhotos:
    return RecordingPhotos(fail=True)
