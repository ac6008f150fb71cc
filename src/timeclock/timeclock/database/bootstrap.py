from __future__ import annotations

import logging
from decimal import Decimal
from typing import Sequence

from sqlalchemy import inspect, text

from ..common.datetime_utils import now_local
from .connection import DatabaseConnection
from .sql_base import db_date, db_datetime, db_transaction, has_table

logger = logging.getLogger(__name__)

SAMPLE_EMPLOYEES: Sequence[tuple[str, str, Decimal, str, str]] = (
    ("John", "Doe", Decimal("25.00"), "Developer", "(555) 123-4567"),
    ("Jane", "Smith", Decimal("22.50"), "Designer", "(555) 234-5678"),
    ("Mike", "Johnson", Decimal("30.00"), "Manager", "(555) 345-6789"),
    ("Sarah", "Wilson", Decimal("24.00"), "Analyst", "(555) 456-7890"),
    ("David", "Brown", Decimal("20.00"), "Tester", "(555) 567-8901"),
    ("Emily", "Davis", Decimal("26.50"), "Developer", "(555) 678-9012"),
    ("Robert", "Garcia", Decimal("28.00"), "Senior Developer", "(555) 789-0123"),
    ("Lisa", "Martinez", Decimal("23.75"), "UI/UX Designer", "(555) 890-1234"),
    ("Christopher", "Rodriguez", Decimal("31.00"), "Team Lead", "(555) 901-2345"),
    ("Amanda", "Thompson", Decimal("21.50"), "Junior Developer", "(555) 012-3456"),
    ("Kevin", "White", Decimal("25.75"), "Business Analyst", "(555) 123-0987"),
    ("Nicole", "Lee", Decimal("27.25"), "Project Manager", "(555) 234-1098"),
    ("Daniel", "Taylor", Decimal("22.00"), "QA Engineer", "(555) 345-2109"),
)


def ensure_sample_employees(conn_factory: DatabaseConnection) -> int:
    """Seed the sample roster when the employees table is empty.

    Returns the number of rows inserted.
    """
    now = now_local()
    with db_transaction(conn_factory) as conn:
        count = conn.execute(text("SELECT COUNT(*) FROM employees")).scalar()
        if int(count or 0) > 0:
            return 0
        for first, last, rate, title, phone in SAMPLE_EMPLOYEES:
            conn.execute(
                text(
                    """
                    INSERT INTO employees
                        (first_name, last_name, pay_rate, job_title, active, date_hired, phone_number, created_at)
                    VALUES
                        (:first, :last, :rate, :title, 1, :hired, :phone, :created)
                    """
                ),
                {
                    "first": first,
                    "last": last,
                    "rate": str(rate),
                    "title": title,
                    "hired": db_date(now.date()),
                    "phone": phone,
                    "created": db_datetime(now),
                },
            )
    logger.info("Seeded %s sample employees", len(SAMPLE_EMPLOYEES))
    return len(SAMPLE_EMPLOYEES)


def list_tables(conn_factory: DatabaseConnection) -> list[str]:
    with conn_factory.connect() as conn:
        return sorted(inspect(conn).get_table_names())


def check_integrity(conn_factory: DatabaseConnection) -> bool:
    """SQLite only: PRAGMA integrity_check. Other backends report True."""
    if conn_factory.dialect_name != "sqlite":
        return True
    with conn_factory.connect() as conn:
        return conn.exec_driver_sql("PRAGMA integrity_check").scalar() == "ok"


def database_info(conn_factory: DatabaseConnection) -> dict:
    with db_transaction(conn_factory) as conn:
        info = {"url": conn_factory.engine.url.render_as_string(hide_password=True), "tables": {}}
        for table in ("employees", "time_entries", "shift_corrections"):
            if has_table(conn, table):
                info["tables"][table] = int(conn.execute(text(f"SELECT COUNT(*) FROM {table}")).scalar() or 0)
        if has_table(conn, "schema_version"):
            info["schema_version"] = int(conn.execute(text("SELECT MAX(version) FROM schema_version")).scalar() or 0)
        else:
            info["schema_version"] = 0
    return info
