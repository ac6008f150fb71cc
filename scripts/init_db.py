from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.timeclock.timeclock.database.bootstrap import check_integrity, list_tables
from src.timeclock.timeclock.database.connection import DBConfig, DatabaseConnection
from src.timeclock.timeclock.database.migrations import SchemaManager
from src.timeclock.timeclock.main import configure_logging, load_settings


def main() -> None:
    settings = load_settings()
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    conn = DatabaseConnection.get_instance(DBConfig(url=str(settings.DATABASE_URL)))

    version = SchemaManager(conn).ensure_schema()
    tables = list_tables(conn)
    print(f"OK: schema v{version} -> {conn.engine.url.render_as_string(hide_password=True)} (tables={len(tables)})")
    if not check_integrity(conn):
        raise SystemExit("Integrity check failed. Restore from a backup before using this database.")


if __name__ == "__main__":
    main()
