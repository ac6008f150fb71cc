"""Versioned, additive schema upgrades.

The stored version lives in ``schema_version``. Each step runs in its own
transaction together with the row that records it, so a failing step leaves
the store at the previous version.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from sqlalchemy import inspect, text
from sqlalchemy.engine import Connection

from ..common.datetime_utils import now_local
from ..core.exceptions import SchemaMigrationError, StoreError
from .connection import DatabaseConnection
from .sql_base import column_names, db_datetime, db_transaction, has_table, normalize_time, to_date

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SchemaStep:
    version: int
    description: str
    apply: Callable[[Connection], None]


def _pk(conn: Connection, name: str) -> str:
    if conn.dialect.name == "sqlite":
        return f"{name} INTEGER PRIMARY KEY AUTOINCREMENT"
    return f"{name} INT AUTO_INCREMENT PRIMARY KEY"


def _add_column(conn: Connection, table: str, column: str, ddl: str) -> None:
    if column.lower() in column_names(conn, table):
        return
    conn.execute(text(f"ALTER TABLE {table} ADD COLUMN {column} {ddl}"))


def _create_base_tables(conn: Connection) -> None:
    conn.execute(
        text(
            f"""
            CREATE TABLE IF NOT EXISTS employees (
                {_pk(conn, "employee_id")},
                first_name VARCHAR(100) NOT NULL,
                last_name VARCHAR(100) NOT NULL,
                pay_rate DECIMAL(10,2) NOT NULL DEFAULT 0,
                job_title VARCHAR(100),
                active INTEGER NOT NULL DEFAULT 1,
                date_hired DATE,
                created_at DATETIME
            )
            """
        )
    )
    conn.execute(
        text(
            f"""
            CREATE TABLE IF NOT EXISTS time_entries (
                {_pk(conn, "entry_id")},
                employee_id INTEGER NOT NULL,
                shift_date DATE NOT NULL,
                time_in TIME,
                time_out TIME,
                total_hours DECIMAL(6,2) NOT NULL DEFAULT 0,
                gross_pay DECIMAL(10,2) NOT NULL DEFAULT 0,
                notes TEXT,
                created_at DATETIME,
                modified_at DATETIME,
                FOREIGN KEY (employee_id) REFERENCES employees(employee_id)
            )
            """
        )
    )


def _add_employee_details(conn: Connection) -> None:
    _add_column(conn, "employees", "phone_number", "VARCHAR(20)")
    _add_column(conn, "employees", "date_of_birth", "DATE")


def _add_photo_columns(conn: Connection) -> None:
    _add_column(conn, "time_entries", "clock_in_photo_path", "VARCHAR(500)")
    _add_column(conn, "time_entries", "clock_out_photo_path", "VARCHAR(500)")


def _add_actual_instants(conn: Connection) -> None:
    _add_column(conn, "time_entries", "actual_clock_in", "DATETIME")
    _add_column(conn, "time_entries", "actual_clock_out", "DATETIME")
    _add_column(conn, "time_entries", "is_active", "INTEGER NOT NULL DEFAULT 0")

    # Rebuild the instants of legacy rows from date + time-of-day. A time-out
    # earlier than the time-in belongs to the next day. is_active stays 0.
    rows = conn.execute(
        text(
            """
            SELECT entry_id, shift_date, time_in, time_out
            FROM time_entries
            WHERE actual_clock_in IS NULL AND time_in IS NOT NULL
            """
        )
    ).mappings().all()
    for r in rows:
        shift_date = to_date(r["shift_date"])
        time_in = normalize_time(r["time_in"])
        time_out = normalize_time(r["time_out"])
        clock_in = datetime.combine(shift_date, time_in)
        clock_out = None
        if time_out is not None:
            clock_out = datetime.combine(shift_date, time_out)
            if clock_out < clock_in:
                clock_out += timedelta(days=1)
        conn.execute(
            text(
                """
                UPDATE time_entries
                SET actual_clock_in=:clock_in, actual_clock_out=:clock_out
                WHERE entry_id=:entry_id
                """
            ),
            {
                "clock_in": db_datetime(clock_in),
                "clock_out": db_datetime(clock_out),
                "entry_id": int(r["entry_id"]),
            },
        )


def _add_corrections_audit(conn: Connection) -> None:
    conn.execute(
        text(
            f"""
            CREATE TABLE IF NOT EXISTS shift_corrections (
                {_pk(conn, "correction_id")},
                entry_id INTEGER NOT NULL,
                employee_id INTEGER NOT NULL,
                old_clock_in DATETIME,
                old_clock_out DATETIME,
                new_clock_in DATETIME,
                new_clock_out DATETIME,
                reason TEXT,
                corrected_at DATETIME NOT NULL
            )
            """
        )
    )
    indexes = {ix["name"] for ix in inspect(conn).get_indexes("time_entries")}
    if "ix_time_entries_employee_active" not in indexes:
        conn.execute(
            text("CREATE INDEX ix_time_entries_employee_active ON time_entries (employee_id, is_active)")
        )


STEPS: List[SchemaStep] = [
    SchemaStep(1, "employees and time entries", _create_base_tables),
    SchemaStep(2, "employee personal details", _add_employee_details),
    SchemaStep(3, "clock-in/clock-out photo paths", _add_photo_columns),
    SchemaStep(4, "actual clock instants and active flag", _add_actual_instants),
    SchemaStep(5, "manager correction audit", _add_corrections_audit),
]

LATEST_VERSION = STEPS[-1].version


class SchemaManager:
    def __init__(self, conn_factory: DatabaseConnection, *, steps: Optional[List[SchemaStep]] = None):
        self._conn_factory = conn_factory
        self._steps = sorted(steps or STEPS, key=lambda s: s.version)

    @property
    def latest_version(self) -> int:
        return self._steps[-1].version

    def current_version(self) -> int:
        with db_transaction(self._conn_factory) as conn:
            if not has_table(conn, "schema_version"):
                return 0
            value = conn.execute(text("SELECT MAX(version) FROM schema_version")).scalar()
            return int(value or 0)

    def ensure_schema(self, target_version: Optional[int] = None) -> int:
        """Upgrade the store to ``target_version`` (latest by default).

        Idempotent. Returns the version the store is at afterwards.
        Raises SchemaMigrationError if any step fails.
        """
        target = self.latest_version if target_version is None else int(target_version)
        try:
            with db_transaction(self._conn_factory) as conn:
                conn.execute(
                    text(
                        """
                        CREATE TABLE IF NOT EXISTS schema_version (
                            version INTEGER NOT NULL PRIMARY KEY,
                            description VARCHAR(200),
                            applied_at DATETIME NOT NULL
                        )
                        """
                    )
                )
            current = self.current_version()
        except StoreError as exc:
            raise SchemaMigrationError(f"Cannot read schema version: {exc}") from exc

        for step in self._steps:
            if step.version <= current or step.version > target:
                continue
            try:
                with db_transaction(self._conn_factory) as conn:
                    step.apply(conn)
                    conn.execute(
                        text(
                            """
                            INSERT INTO schema_version (version, description, applied_at)
                            VALUES (:version, :description, :applied_at)
                            """
                        ),
                        {
                            "version": step.version,
                            "description": step.description,
                            "applied_at": db_datetime(now_local()),
                        },
                    )
            except (StoreError, ValueError, TypeError) as exc:
                logger.error("Schema upgrade to v%s (%s) failed", step.version, step.description, exc_info=True)
                raise SchemaMigrationError(
                    f"Schema upgrade to version {step.version} failed: {exc}", version=step.version
                ) from exc
            logger.info("Applied schema v%s: %s", step.version, step.description)
            current = step.version

        return current
