from datetime import datetime
from decimal import Decimal

from src.timeclock.timeclock.status.service import StatusService


def test_working_status_is_live_and_cross_midnight(shifts, make_open):
    shifts.add(make_open(1, datetime(2026, 2, 1, 23, 30)))
    svc = StatusService(shifts)

    first = svc.get_status(1, now=datetime(2026, 2, 2, 0, 15))
    later = svc.get_status(1, now=datetime(2026, 2, 2, 1, 30))

    assert first.is_working is True
    assert first.is_cross_midnight is True
    assert first.shift_started == datetime(2026, 2, 1, 23, 30)
    assert first.working_hours == 0.75
    assert later.working_hours == 2.0
    assert first.status_text.startswith("Clocked In since")


def test_same_day_shift_is_not_cross_midnight(shifts, make_open):
    shifts.add(make_open(1, datetime(2026, 2, 2, 8, 0)))

    status = StatusService(shifts).get_status(1, now=datetime(2026, 2, 2, 23, 59))

    assert status.is_working
    assert status.is_cross_midnight is False


def test_available_status_sums_today_and_finds_last_clock_out(shifts, make_completed):
    shifts.add(make_completed(1, datetime(2026, 2, 1, 8, 0), datetime(2026, 2, 1, 16, 0), "7.50"))
    shifts.add(make_completed(1, datetime(2026, 2, 2, 6, 0), datetime(2026, 2, 2, 8, 0), "2.00"))
    shifts.add(make_completed(1, datetime(2026, 2, 2, 12, 0), datetime(2026, 2, 2, 13, 30), "1.50"))

    status = StatusService(shifts).get_status(1, now=datetime(2026, 2, 2, 18, 0))

    assert status.is_working is False
    assert status.today_completed_hours == Decimal("3.50")
    assert status.last_clock_out == datetime(2026, 2, 2, 13, 30)
    assert status.status_text == "Available"


def test_status_never_writes(shifts, make_open):
    shifts.add(make_open(1, datetime(2026, 2, 2, 8, 0)))
    before = dict(shifts.records)

    StatusService(shifts).get_status(1, now=datetime(2026, 2, 2, 10, 0))
    StatusService(shifts).get_status(2, now=datetime(2026, 2, 2, 10, 0))

    assert shifts.saves == 0
    assert shifts.records == before


def test_unknown_employee_is_available(shifts, fixed_now):
    status = StatusService(shifts).get_status(7, now=fixed_now)

    assert status.is_working is False
    assert status.today_completed_hours == 0
    assert status.last_clock_out is None
