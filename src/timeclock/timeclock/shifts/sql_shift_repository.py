from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Any, Mapping, Optional, Sequence

from sqlalchemy import text
from sqlalchemy.engine import Connection

from ..common.datetime_utils import now_local
from ..core.exceptions import StoreError
from ..database.connection import DatabaseConnection
from ..database.sql_base import (
    db_date,
    db_datetime,
    db_decimal,
    db_time,
    db_transaction,
    fetchall,
    fetchone,
    normalize_time,
    safe_get,
    safe_str,
    to_bool,
    to_date,
    to_datetime,
    to_decimal,
)
from .model import ShiftCorrection, ShiftRecord, ShiftReportRow
from .repository import ShiftRepository


def _to_record(r: Mapping[str, Any]) -> ShiftRecord:
    # Columns added by later schema versions may be missing; fall back to defaults.
    return ShiftRecord(
        shift_id=int(r["entry_id"]),
        employee_id=int(r["employee_id"]),
        shift_date=to_date(r["shift_date"]),
        clock_in_time=normalize_time(r.get("time_in")),
        clock_out_time=normalize_time(r.get("time_out")),
        actual_clock_in=to_datetime(safe_get(r, "actual_clock_in")),
        actual_clock_out=to_datetime(safe_get(r, "actual_clock_out")),
        is_active=to_bool(safe_get(r, "is_active"), default=False),
        total_hours=to_decimal(r.get("total_hours")),
        gross_pay=to_decimal(r.get("gross_pay")),
        notes=safe_str(r, "notes"),
        clock_in_photo=safe_get(r, "clock_in_photo_path"),
        clock_out_photo=safe_get(r, "clock_out_photo_path"),
        created_at=to_datetime(r.get("created_at")),
        modified_at=to_datetime(r.get("modified_at")),
    )


def _to_correction(r: Mapping[str, Any]) -> ShiftCorrection:
    return ShiftCorrection(
        correction_id=int(r["correction_id"]),
        shift_id=int(r["entry_id"]),
        employee_id=int(r["employee_id"]),
        old_clock_in=to_datetime(r.get("old_clock_in")),
        old_clock_out=to_datetime(r.get("old_clock_out")),
        new_clock_in=to_datetime(r.get("new_clock_in")),
        new_clock_out=to_datetime(r.get("new_clock_out")),
        reason=safe_str(r, "reason"),
        corrected_at=to_datetime(r["corrected_at"]),
    )


def _params(record: ShiftRecord) -> dict:
    return {
        "employee_id": int(record.employee_id),
        "shift_date": db_date(record.shift_date),
        "time_in": db_time(record.clock_in_time),
        "time_out": db_time(record.clock_out_time),
        "actual_in": db_datetime(record.actual_clock_in),
        "actual_out": db_datetime(record.actual_clock_out),
        "is_active": 1 if record.is_active else 0,
        "total_hours": db_decimal(record.total_hours),
        "gross_pay": db_decimal(record.gross_pay),
        "notes": record.notes or "",
        "in_photo": record.clock_in_photo,
        "out_photo": record.clock_out_photo,
        "created_at": db_datetime(record.created_at),
        "modified_at": db_datetime(record.modified_at),
    }


class SQLShiftRepository(ShiftRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_active_shift(self, employee_id: int) -> Optional[ShiftRecord]:
        # No shift_date filter: an open shift started yesterday is still the active one.
        with db_transaction(self._conn_factory) as conn:
            r = fetchone(
                conn.execute(
                    text(
                        """
                        SELECT * FROM time_entries
                        WHERE employee_id=:employee_id AND is_active=1
                        ORDER BY actual_clock_in DESC, entry_id DESC
                        LIMIT 1
                        """
                    ),
                    {"employee_id": int(employee_id)},
                )
            )
            return _to_record(r) if r else None

    def get_by_id(self, shift_id: int) -> Optional[ShiftRecord]:
        with db_transaction(self._conn_factory) as conn:
            r = fetchone(conn.execute(text("SELECT * FROM time_entries WHERE entry_id=:id"), {"id": int(shift_id)}))
            return _to_record(r) if r else None

    def get_shift_for_date(self, employee_id: int, shift_date: date) -> Optional[ShiftRecord]:
        shifts = self.get_shifts_for_date(employee_id, shift_date)
        return shifts[-1] if shifts else None

    def get_shifts_for_date(self, employee_id: int, shift_date: date) -> Sequence[ShiftRecord]:
        with db_transaction(self._conn_factory) as conn:
            rows = fetchall(
                conn.execute(
                    text(
                        """
                        SELECT * FROM time_entries
                        WHERE employee_id=:employee_id AND shift_date=:shift_date
                        ORDER BY actual_clock_in, entry_id
                        """
                    ),
                    {"employee_id": int(employee_id), "shift_date": db_date(shift_date)},
                )
            )
            return [_to_record(r) for r in rows]

    def get_shifts_in_range(self, employee_id: int, start: date, end: date) -> Sequence[ShiftRecord]:
        with db_transaction(self._conn_factory) as conn:
            rows = fetchall(
                conn.execute(
                    text(
                        """
                        SELECT * FROM time_entries
                        WHERE employee_id=:employee_id AND shift_date BETWEEN :start AND :end
                        ORDER BY shift_date, actual_clock_in, entry_id
                        """
                    ),
                    {"employee_id": int(employee_id), "start": db_date(start), "end": db_date(end)},
                )
            )
            return [_to_record(r) for r in rows]

    def get_most_recent_completed(self, employee_id: int) -> Optional[ShiftRecord]:
        with db_transaction(self._conn_factory) as conn:
            r = fetchone(
                conn.execute(
                    text(
                        """
                        SELECT * FROM time_entries
                        WHERE employee_id=:employee_id AND is_active=0 AND actual_clock_out IS NOT NULL
                        ORDER BY actual_clock_out DESC, entry_id DESC
                        LIMIT 1
                        """
                    ),
                    {"employee_id": int(employee_id)},
                )
            )
            return _to_record(r) if r else None

    def save(self, record: ShiftRecord) -> ShiftRecord:
        with db_transaction(self._conn_factory) as conn:
            return self._write(conn, record)

    def save_correction(self, record: ShiftRecord, correction: ShiftCorrection) -> ShiftRecord:
        with db_transaction(self._conn_factory) as conn:
            saved = self._write(conn, record)
            conn.execute(
                text(
                    """
                    INSERT INTO shift_corrections
                        (entry_id, employee_id, old_clock_in, old_clock_out,
                         new_clock_in, new_clock_out, reason, corrected_at)
                    VALUES
                        (:entry_id, :employee_id, :old_in, :old_out, :new_in, :new_out, :reason, :corrected_at)
                    """
                ),
                {
                    "entry_id": int(saved.shift_id),
                    "employee_id": int(correction.employee_id),
                    "old_in": db_datetime(correction.old_clock_in),
                    "old_out": db_datetime(correction.old_clock_out),
                    "new_in": db_datetime(correction.new_clock_in),
                    "new_out": db_datetime(correction.new_clock_out),
                    "reason": correction.reason,
                    "corrected_at": db_datetime(correction.corrected_at),
                },
            )
            return saved

    def list_corrections(self, shift_id: int) -> Sequence[ShiftCorrection]:
        with db_transaction(self._conn_factory) as conn:
            rows = fetchall(
                conn.execute(
                    text("SELECT * FROM shift_corrections WHERE entry_id=:id ORDER BY corrected_at, correction_id"),
                    {"id": int(shift_id)},
                )
            )
            return [_to_correction(r) for r in rows]

    def delete_by_id(self, shift_id: int) -> bool:
        with db_transaction(self._conn_factory) as conn:
            result = conn.execute(text("DELETE FROM time_entries WHERE entry_id=:id"), {"id": int(shift_id)})
            return result.rowcount > 0

    def delete_for_date(self, employee_id: int, shift_date: date) -> int:
        with db_transaction(self._conn_factory) as conn:
            result = conn.execute(
                text("DELETE FROM time_entries WHERE employee_id=:employee_id AND shift_date=:shift_date"),
                {"employee_id": int(employee_id), "shift_date": db_date(shift_date)},
            )
            return int(result.rowcount)

    def delete_range(self, employee_id: int, start: date, end: date) -> int:
        with db_transaction(self._conn_factory) as conn:
            result = conn.execute(
                text(
                    """
                    DELETE FROM time_entries
                    WHERE employee_id=:employee_id AND shift_date BETWEEN :start AND :end
                    """
                ),
                {"employee_id": int(employee_id), "start": db_date(start), "end": db_date(end)},
            )
            return int(result.rowcount)

    def get_report_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_id: Optional[int] = None,
        job_title: Optional[str] = None,
    ) -> Sequence[ShiftReportRow]:
        sql = """
            SELECT t.*, e.first_name, e.last_name, e.job_title, e.pay_rate
            FROM time_entries t
            JOIN employees e ON e.employee_id = t.employee_id
            WHERE e.active = 1 AND t.shift_date BETWEEN :start AND :end
        """
        params: dict = {"start": db_date(start_date), "end": db_date(end_date)}
        if employee_id is not None:
            sql += " AND t.employee_id = :employee_id"
            params["employee_id"] = int(employee_id)
        if job_title:
            sql += " AND e.job_title = :job_title"
            params["job_title"] = job_title
        sql += " ORDER BY t.shift_date, e.last_name, e.first_name, t.actual_clock_in"

        with db_transaction(self._conn_factory) as conn:
            rows = fetchall(conn.execute(text(sql), params))

        out = []
        for r in rows:
            record = _to_record(r)
            out.append(
                ShiftReportRow(
                    shift_id=record.shift_id,
                    employee_id=record.employee_id,
                    employee_name=f"{safe_str(r, 'first_name')} {safe_str(r, 'last_name')}".strip(),
                    job_title=safe_str(r, "job_title"),
                    pay_rate=to_decimal(r.get("pay_rate")),
                    shift_date=record.shift_date,
                    clock_in=record.effective_clock_in,
                    clock_out=record.effective_clock_out,
                    total_hours=record.total_hours,
                    gross_pay=record.gross_pay,
                    notes=record.notes,
                    is_active=record.is_active,
                )
            )
        return out

    def count_entries(self, *, start_date: date, end_date: date, employee_id: Optional[int] = None) -> int:
        sql = "SELECT COUNT(*) FROM time_entries WHERE shift_date BETWEEN :start AND :end"
        params: dict = {"start": db_date(start_date), "end": db_date(end_date)}
        if employee_id is not None:
            sql += " AND employee_id = :employee_id"
            params["employee_id"] = int(employee_id)
        with db_transaction(self._conn_factory) as conn:
            return int(conn.execute(text(sql), params).scalar() or 0)

    def _write(self, conn: Connection, record: ShiftRecord) -> ShiftRecord:
        now = now_local()
        if record.shift_id is None:
            record = replace(record, created_at=record.created_at or now, modified_at=now)
            result = conn.execute(
                text(
                    """
                    INSERT INTO time_entries
                        (employee_id, shift_date, time_in, time_out, actual_clock_in, actual_clock_out,
                         is_active, total_hours, gross_pay, notes, clock_in_photo_path, clock_out_photo_path,
                         created_at, modified_at)
                    VALUES
                        (:employee_id, :shift_date, :time_in, :time_out, :actual_in, :actual_out,
                         :is_active, :total_hours, :gross_pay, :notes, :in_photo, :out_photo,
                         :created_at, :modified_at)
                    """
                ),
                _params(record),
            )
            return replace(record, shift_id=int(result.lastrowid))

        record = replace(record, modified_at=now)
        params = _params(record)
        params["entry_id"] = int(record.shift_id)
        result = conn.execute(
            text(
                """
                UPDATE time_entries
                SET shift_date=:shift_date, time_in=:time_in, time_out=:time_out,
                    actual_clock_in=:actual_in, actual_clock_out=:actual_out, is_active=:is_active,
                    total_hours=:total_hours, gross_pay=:gross_pay, notes=:notes,
                    clock_in_photo_path=:in_photo, clock_out_photo_path=:out_photo,
                    modified_at=:modified_at
                WHERE entry_id=:entry_id
                """
            ),
            params,
        )
        if result.rowcount == 0:
            raise StoreError(f"Shift {record.shift_id} does not exist")
        return record
