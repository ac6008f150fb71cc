from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.timeclock.timeclock.database.bootstrap import database_info, ensure_sample_employees
from src.timeclock.timeclock.database.connection import DBConfig, DatabaseConnection
from src.timeclock.timeclock.database.migrations import SchemaManager
from src.timeclock.timeclock.main import configure_logging, load_settings


def main() -> None:
    settings = load_settings()
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    conn = DatabaseConnection.get_instance(DBConfig(url=str(settings.DATABASE_URL)))

    SchemaManager(conn).ensure_schema()
    inserted = ensure_sample_employees(conn)
    info = database_info(conn)
    print(f"OK: seeded {inserted} employee(s) -> {info['url']} {info['tables']}")


if __name__ == "__main__":
    main()
