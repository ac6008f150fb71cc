from __future__ import annotations

from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from src.timeclock.timeclock.auth.service import ManagerAuthService
from src.timeclock.timeclock.core.enums import ErrorKind
from src.timeclock.timeclock.corrections.service import CorrectionService


@pytest.fixture
def auth(clock):
    service = ManagerAuthService.from_pin("9999", clock=clock)
    service.authenticate("9999")
    return service


@pytest.fixture
def service(shifts, employees, auth, clock):
    return CorrectionService(shifts, employees, auth, clock=clock)


def test_requires_manager_authentication(shifts, employees, clock, make_completed):
    record = shifts.add(make_completed(1, datetime(2026, 2, 1, 8, 0), datetime(2026, 2, 1, 12, 0), "4.00"))
    unauthenticated = ManagerAuthService.from_pin("9999", clock=clock)
    svc = CorrectionService(shifts, employees, unauthenticated, clock=clock)

    result = svc.correct_shift(1, record.shift_id, corrected_out=datetime(2026, 2, 1, 13, 0))

    assert result.kind == ErrorKind.NOT_AUTHORIZED
    assert shifts.saves == 0


def test_authentication_expires_after_one_minute(service, shifts, clock, make_completed):
    record = shifts.add(make_completed(1, datetime(2026, 2, 1, 8, 0), datetime(2026, 2, 1, 12, 0), "4.00"))
    clock.advance(minutes=1, seconds=1)

    result = service.correct_shift(1, record.shift_id, corrected_out=datetime(2026, 2, 1, 13, 0))

    assert result.kind == ErrorKind.NOT_AUTHORIZED


def test_out_before_in_is_rejected_without_persisting(service, shifts, make_completed):
    original = shifts.add(make_completed(1, datetime(2026, 2, 1, 8, 0), datetime(2026, 2, 1, 12, 0), "4.00", "80.00"))

    before = service.correct_shift(1, original.shift_id, corrected_out=datetime(2026, 2, 1, 7, 0))
    equal = service.correct_shift(
        1, original.shift_id, corrected_in=datetime(2026, 2, 1, 9, 0), corrected_out=datetime(2026, 2, 1, 9, 0)
    )

    assert before.kind == ErrorKind.NEGATIVE_OR_ZERO_DURATION
    assert equal.kind == ErrorKind.NEGATIVE_OR_ZERO_DURATION
    assert shifts.get_by_id(original.shift_id) == original
    assert shifts.saves == 0
    assert shifts.corrections == []


def test_corrects_both_times_and_moves_shift_date(service, shifts, make_completed):
    record = shifts.add(make_completed(1, datetime(2026, 2, 1, 8, 0), datetime(2026, 2, 1, 12, 0), "4.00", "80.00"))

    result = service.correct_shift(
        1,
        record.shift_id,
        corrected_in=datetime(2026, 1, 31, 22, 0),
        corrected_out=datetime(2026, 2, 1, 6, 0),
        reason="forgot to clock in",
    )

    assert result.ok
    saved = result.value
    assert saved.shift_date == date(2026, 1, 31)
    assert saved.actual_clock_in == datetime(2026, 1, 31, 22, 0)
    assert saved.actual_clock_out == datetime(2026, 2, 1, 6, 0)
    assert saved.total_hours == Decimal("7.50")
    assert saved.gross_pay == Decimal("150.00")
    assert "Correction: clock-in 2026-02-01 08:00 -> 2026-01-31 22:00" in saved.notes
    assert "reason: forgot to clock in" in saved.notes
    assert shifts.get_by_id(record.shift_id) == saved


def test_correction_writes_audit_row(service, shifts, clock, make_completed):
    record = shifts.add(make_completed(2, datetime(2026, 2, 1, 8, 0), datetime(2026, 2, 1, 12, 0), "4.00"))

    service.correct_shift(2, record.shift_id, corrected_out=datetime(2026, 2, 1, 12, 30))

    [audit] = shifts.list_corrections(record.shift_id)
    assert audit.old_clock_out == datetime(2026, 2, 1, 12, 0)
    assert audit.new_clock_out == datetime(2026, 2, 1, 12, 30)
    assert audit.new_clock_in == datetime(2026, 2, 1, 8, 0)
    assert audit.corrected_at == clock.now


def test_correcting_clock_out_closes_an_open_shift(service, shifts, make_open):
    record = shifts.add(make_open(1, datetime(2026, 2, 1, 7, 0)))

    result = service.correct_shift(1, record.shift_id, corrected_out=datetime(2026, 2, 1, 23, 30))

    assert result.ok
    assert result.value.is_active is False
    # Managers may authorize beyond the kiosk's 16h cap.
    assert result.value.total_hours == Decimal("16.00")
    assert shifts.get_active_shift(1) is None


def test_correcting_only_clock_in_keeps_shift_open(service, shifts, make_open):
    record = shifts.add(make_open(1, datetime(2026, 2, 2, 8, 30)))

    result = service.correct_shift(1, record.shift_id, corrected_in=datetime(2026, 2, 2, 8, 0))

    assert result.ok
    assert result.value.is_active is True
    assert result.value.total_hours == Decimal("0")
    assert result.value.actual_clock_in == datetime(2026, 2, 2, 8, 0)


def test_rejects_future_times(service, shifts, clock, make_open):
    record = shifts.add(make_open(1, datetime(2026, 2, 2, 8, 0)))

    result = service.correct_shift(1, record.shift_id, corrected_out=clock.now + timedelta(minutes=5))

    assert result.kind == ErrorKind.FUTURE_TIME


def test_rejects_shift_of_another_employee(service, shifts, make_completed):
    record = shifts.add(make_completed(2, datetime(2026, 2, 1, 8, 0), datetime(2026, 2, 1, 12, 0), "4.00"))

    assert service.correct_shift(1, record.shift_id, corrected_out=datetime(2026, 2, 1, 13, 0)).kind == (
        ErrorKind.SHIFT_NOT_FOUND
    )
    assert service.correct_shift(1, 999, corrected_out=datetime(2026, 2, 1, 13, 0)).kind == ErrorKind.SHIFT_NOT_FOUND


def test_rejects_corrections_longer_than_a_day(service, shifts, make_completed):
    record = shifts.add(make_completed(1, datetime(2026, 2, 1, 8, 0), datetime(2026, 2, 1, 12, 0), "4.00"))

    result = service.correct_shift(1, record.shift_id, corrected_in=datetime(2026, 1, 31, 6, 0))

    assert result.kind == ErrorKind.MAX_DURATION_EXCEEDED


def test_nothing_to_correct(service, shifts, make_completed):
    record = shifts.add(make_completed(1, datetime(2026, 2, 1, 8, 0), datetime(2026, 2, 1, 12, 0), "4.00"))

    assert service.correct_shift(1, record.shift_id).kind == ErrorKind.NOTHING_TO_CORRECT


def test_store_failure_leaves_record_unchanged(service, shifts, make_completed):
    record = shifts.add(make_completed(1, datetime(2026, 2, 1, 8, 0), datetime(2026, 2, 1, 12, 0), "4.00"))
    shifts.fail_on_save = True

    result = service.correct_shift(1, record.shift_id, corrected_out=datetime(2026, 2, 1, 13, 0))

    assert result.kind == ErrorKind.PERSISTENCE_FAILED
    assert shifts.get_by_id(record.shift_id) == record
    assert shifts.corrections == []
