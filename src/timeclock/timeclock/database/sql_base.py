from __future__ import annotations

from contextlib import contextmanager
from datetime import date, datetime, time, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterator, List, Mapping, Optional

from sqlalchemy import inspect
from sqlalchemy.engine import Connection, Result
from sqlalchemy.exc import SQLAlchemyError

from ..core.exceptions import StoreError
from .connection import DatabaseConnection

TWO_PLACES = Decimal("0.01")


@contextmanager
def db_transaction(conn_factory: DatabaseConnection) -> Iterator[Connection]:
    """Run a block in one transaction: commit on success, roll back on error.

    Driver and SQL errors are re-raised as StoreError.
    """
    try:
        with conn_factory.engine.begin() as conn:
            yield conn
    except SQLAlchemyError as exc:
        raise StoreError(str(exc)) from exc


def fetchone(result: Result) -> Optional[Dict[str, Any]]:
    row = result.mappings().first()
    return dict(row) if row else None


def fetchall(result: Result) -> List[Dict[str, Any]]:
    return [dict(r) for r in result.mappings().all()]


def column_names(conn: Connection, table: str) -> set[str]:
    return {c["name"].lower() for c in inspect(conn).get_columns(table)}


def has_table(conn: Connection, table: str) -> bool:
    return inspect(conn).has_table(table)


def safe_get(row: Mapping[str, Any], column: str, default: Any = None) -> Any:
    """Read a column that an older schema may not have yet."""
    value = row.get(column)
    return default if value is None else value


def safe_str(row: Mapping[str, Any], column: str, default: str = "") -> str:
    value = row.get(column)
    return default if value is None else str(value)


def normalize_time(value: Any) -> Optional[time]:
    """Normalize TIME values across drivers.

    Drivers can return TIME as:
    - datetime.time
    - datetime.timedelta (mysql-connector)
    - string (sqlite), e.g. '08:30:00' or '08:30:00.1234567'
    """

    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        return value.time()

    if isinstance(value, time):
        return value

    if isinstance(value, timedelta):
        total_seconds = int(value.total_seconds()) % 86400
        hours = total_seconds // 3600
        minutes = (total_seconds % 3600) // 60
        seconds = total_seconds % 60
        return time(hour=hours, minute=minutes, second=seconds)

    if isinstance(value, str):
        parts = value.strip().split(":")
        if len(parts) < 2:
            raise ValueError(f"Invalid time string: {value!r}")
        hours = int(parts[0])
        minutes = int(parts[1])
        seconds = 0
        if len(parts) >= 3 and parts[2]:
            seconds = int(parts[2].split(".")[0])
        return time(hour=hours, minute=minutes, second=seconds)

    raise TypeError(f"Unsupported TIME value type: {type(value)!r}")


def to_date(value: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip()[:10])


def to_datetime(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    return datetime.fromisoformat(str(value).strip())


def to_decimal(value: Any, default: str = "0") -> Decimal:
    if value is None or value == "":
        return Decimal(default).quantize(TWO_PLACES)
    try:
        return Decimal(str(value)).quantize(TWO_PLACES)
    except InvalidOperation:
        raise ValueError(f"Invalid decimal value: {value!r}") from None


def to_bool(value: Any, default: bool = False) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes"}
    return bool(value)


def db_date(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None


def db_time(value: Optional[time]) -> Optional[str]:
    return value.strftime("%H:%M:%S") if value else None


def db_datetime(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat(sep=" ") if value else None


def db_decimal(value: Optional[Decimal]) -> Optional[str]:
    return str(value) if value is not None else None
