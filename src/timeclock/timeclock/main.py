from __future__ import annotations

import importlib
import logging
from types import ModuleType

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import build_container
from .database.bootstrap import ensure_sample_employees, list_tables
from .database.connection import DBConfig, DatabaseConnection
from .database.migrations import SchemaManager
from .kiosk.controller import register as register_kiosk

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def load_settings() -> ModuleType:
    load_dotenv(override=False)
    return importlib.import_module(get_settings_module())


def create_app(settings: ModuleType | None = None) -> Flask:
    settings = settings or load_settings()
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    conn = DatabaseConnection.get_instance(
        DBConfig(url=str(settings.DATABASE_URL), echo=bool(getattr(settings, "SQL_ECHO", False)))
    )

    # An unmigrated store is not usable: SchemaMigrationError propagates.
    version = SchemaManager(conn).ensure_schema()
    logger.info("Schema ready at v%s (tables=%s)", version, len(list_tables(conn)))

    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        ensure_sample_employees(conn)

    container = build_container(settings, conn=conn)
    app.extensions["timeclock"] = container

    register_kiosk(app, container)

    return app
