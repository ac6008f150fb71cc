from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Optional, Sequence

from ..common.datetime_utils import monday_of_week, week_label
from ..core.constants import NO_JOB_TITLE
from ..core.enums import GroupBy
from ..employees.repository import EmployeeRepository
from ..shifts.model import ZERO, ShiftReportRow
from ..shifts.repository import ShiftRepository

TWO_PLACES = Decimal("0.01")


@dataclass(frozen=True)
class ReportSummary:
    group_key: str
    total_hours: Decimal
    total_pay: Decimal
    days_worked: int
    average_hours_per_day: Decimal
    entries: int
    employee_name: str = ""
    job_title: str = ""


def _group_of(row: ShiftReportRow, group_by: GroupBy) -> tuple[Any, str]:
    """Return (sort key, display label) for the row's bucket."""
    if group_by == GroupBy.JOB_TITLE:
        title = row.job_title.strip() or NO_JOB_TITLE
        return title, title
    if group_by == GroupBy.WEEK:
        monday = monday_of_week(row.shift_date)
        return monday, week_label(row.shift_date)
    if group_by == GroupBy.MONTH:
        key = row.shift_date.strftime("%Y-%m")
        return key, key
    if group_by == GroupBy.DATE:
        return row.shift_date, row.shift_date.isoformat()
    return (row.employee_name, row.employee_id), row.employee_name


def summarize(rows: Iterable[ShiftReportRow], group_by: GroupBy) -> list[ReportSummary]:
    """Group completed shifts (total_hours > 0) and total them.

    In-progress shifts never count toward historical summaries.
    """
    buckets: dict[Any, dict] = {}
    for row in rows:
        if row.total_hours <= 0:
            continue
        sort_key, label = _group_of(row, group_by)
        b = buckets.get(sort_key)
        if b is None:
            b = buckets[sort_key] = {
                "label": label,
                "hours": ZERO,
                "pay": ZERO,
                "days": set(),
                "entries": 0,
                "employees": set(),
                "first": row,
            }
        b["hours"] += row.total_hours
        b["pay"] += row.gross_pay
        b["days"].add(row.shift_date)
        b["entries"] += 1
        b["employees"].add(row.employee_id)

    out = []
    for sort_key in sorted(buckets):
        b = buckets[sort_key]
        days = len(b["days"])
        average = (b["hours"] / days).quantize(TWO_PLACES, rounding=ROUND_HALF_UP) if days else ZERO
        employee_name = ""
        job_title = ""
        if group_by == GroupBy.EMPLOYEE:
            employee_name = b["first"].employee_name
            job_title = b["first"].job_title
        elif group_by == GroupBy.JOB_TITLE:
            count = len(b["employees"])
            employee_name = f"{count} employee" if count == 1 else f"{count} employees"
            job_title = b["label"]
        out.append(
            ReportSummary(
                group_key=b["label"],
                total_hours=b["hours"].quantize(TWO_PLACES),
                total_pay=b["pay"].quantize(TWO_PLACES),
                days_worked=days,
                average_hours_per_day=average,
                entries=b["entries"],
                employee_name=employee_name,
                job_title=job_title,
            )
        )
    return out


class ReportService:
    def __init__(self, shifts: ShiftRepository, employees: EmployeeRepository):
        self._shifts = shifts
        self._employees = employees

    def get_shift_rows(
        self,
        *,
        start: date,
        end: date,
        employee_id: Optional[int] = None,
        job_title: Optional[str] = None,
    ) -> Sequence[ShiftReportRow]:
        return self._shifts.get_report_rows(
            start_date=start, end_date=end, employee_id=employee_id, job_title=job_title or None
        )

    def get_summary(
        self,
        *,
        start: date,
        end: date,
        group_by: GroupBy = GroupBy.EMPLOYEE,
        employee_id: Optional[int] = None,
        job_title: Optional[str] = None,
    ) -> list[ReportSummary]:
        rows = self.get_shift_rows(start=start, end=end, employee_id=employee_id, job_title=job_title)
        return summarize(rows, group_by)

    def get_job_titles(self) -> Sequence[str]:
        return self._employees.list_job_titles()

    def count_entries(self, *, start: date, end: date, employee_id: Optional[int] = None) -> int:
        return self._shifts.count_entries(start_date=start, end_date=end, employee_id=employee_id)

    def weekly_team_summary(self, week_start: date) -> list[str]:
        """One 'Name - X.Xh' line per employee with completed hours in the week."""
        monday = monday_of_week(week_start)
        summaries = self.get_summary(start=monday, end=monday + timedelta(days=6), group_by=GroupBy.EMPLOYEE)
        return [f"{s.employee_name} - {s.total_hours:.1f}h" for s in summaries]
