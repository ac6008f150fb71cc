from __future__ import annotations

from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence

from sqlalchemy import text

from ..common.datetime_utils import now_local
from ..database.connection import DatabaseConnection
from ..database.sql_base import (
    db_date,
    db_datetime,
    db_transaction,
    fetchall,
    fetchone,
    safe_get,
    safe_str,
    to_bool,
    to_date,
    to_datetime,
    to_decimal,
)
from .model import Employee
from .repository import EmployeeRepository


def _to_employee(r: Mapping[str, Any]) -> Employee:
    return Employee(
        employee_id=int(r["employee_id"]),
        first_name=safe_str(r, "first_name"),
        last_name=safe_str(r, "last_name"),
        pay_rate=to_decimal(r.get("pay_rate")),
        job_title=safe_str(r, "job_title"),
        is_active=to_bool(r.get("active"), default=True),
        date_hired=to_date(r.get("date_hired")),
        phone_number=safe_get(r, "phone_number"),
        created_at=to_datetime(r.get("created_at")),
    )


class SQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_transaction(self._conn_factory) as conn:
            r = fetchone(
                conn.execute(text("SELECT * FROM employees WHERE employee_id=:id"), {"id": int(employee_id)})
            )
            return _to_employee(r) if r else None

    def list_active(self) -> Sequence[Employee]:
        with db_transaction(self._conn_factory) as conn:
            rows = fetchall(
                conn.execute(text("SELECT * FROM employees WHERE active=1 ORDER BY last_name, first_name"))
            )
            return [_to_employee(r) for r in rows]

    def create(
        self,
        *,
        first_name: str,
        last_name: str,
        pay_rate: Decimal,
        job_title: str = "",
        phone_number: Optional[str] = None,
    ) -> int:
        now = now_local()
        with db_transaction(self._conn_factory) as conn:
            result = conn.execute(
                text(
                    """
                    INSERT INTO employees
                        (first_name, last_name, pay_rate, job_title, active, date_hired, phone_number, created_at)
                    VALUES
                        (:first, :last, :rate, :title, 1, :hired, :phone, :created)
                    """
                ),
                {
                    "first": first_name,
                    "last": last_name,
                    "rate": str(Decimal(pay_rate)),
                    "title": job_title,
                    "hired": db_date(now.date()),
                    "phone": phone_number,
                    "created": db_datetime(now),
                },
            )
            return int(result.lastrowid)

    def set_active(self, employee_id: int, is_active: bool) -> bool:
        with db_transaction(self._conn_factory) as conn:
            result = conn.execute(
                text("UPDATE employees SET active=:active WHERE employee_id=:id"),
                {"active": 1 if is_active else 0, "id": int(employee_id)},
            )
            return result.rowcount > 0

    def list_job_titles(self) -> Sequence[str]:
        with db_transaction(self._conn_factory) as conn:
            rows = conn.execute(
                text(
                    """
                    SELECT DISTINCT job_title FROM employees
                    WHERE active=1 AND job_title IS NOT NULL AND job_title <> ''
                    ORDER BY job_title
                    """
                )
            ).scalars().all()
            return [str(t) for t in rows]
