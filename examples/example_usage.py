"""Example: drive the service layer directly (no Flask).

Controllers are a thin layer; the clock rules live in the services.
"""

import importlib

from config import get_settings_module

from src.timeclock.timeclock.container import build_container
from src.timeclock.timeclock.database.bootstrap import ensure_sample_employees
from src.timeclock.timeclock.database.migrations import SchemaManager


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(settings)
    SchemaManager(container.conn).ensure_schema()
    ensure_sample_employees(container.conn)

    result = container.lifecycle_service.clock_in(1)
    print(result.message if result.ok else f"{result.kind.value}: {result.message}")
    print(container.status_service.get_status(1))


if __name__ == "__main__":
    main()
