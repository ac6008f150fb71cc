from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool


@dataclass
class DBConfig:
    url: str
    echo: bool = False


def _is_memory_sqlite(url: str) -> bool:
    return url in {"sqlite://", "sqlite:///:memory:"}


def _make_sqlite_transactional(engine: Engine) -> None:
    # pysqlite defers BEGIN and auto-commits DDL; emit BEGIN ourselves so a
    # schema step and its version row roll back together.
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


class DatabaseConnection:
    """Singleton-like engine holder, one instance per database URL.

    Note: Connections are short-lived and checked out per operation.
    """

    _instances: Dict[str, "DatabaseConnection"] = {}

    def __init__(self, config: DBConfig):
        self._config = config
        kwargs = {"echo": config.echo, "future": True}
        if _is_memory_sqlite(config.url):
            kwargs["poolclass"] = StaticPool
            kwargs["connect_args"] = {"check_same_thread": False}
        self._engine = create_engine(config.url, **kwargs)
        if self._engine.dialect.name == "sqlite":
            _make_sqlite_transactional(self._engine)

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if config.url not in cls._instances:
            cls._instances[config.url] = DatabaseConnection(config)
        return cls._instances[config.url]

    @property
    def url(self) -> str:
        return self._config.url

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def dialect_name(self) -> str:
        return self._engine.dialect.name

    def connect(self):
        return self._engine.connect()

    def dispose(self) -> None:
        self._engine.dispose()
