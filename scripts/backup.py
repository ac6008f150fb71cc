"""Backup the time-clock database.

SQLite files are copied with the online backup API. MySQL URLs go through
`mysqldump` (must be installed on the machine).
"""

from __future__ import annotations

import sqlite3
import subprocess
import sys
from contextlib import closing
from datetime import datetime
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from sqlalchemy.engine import make_url

from src.timeclock.timeclock.main import load_settings


def backup_sqlite(database: str, out_file: Path) -> None:
    with closing(sqlite3.connect(database)) as source, closing(sqlite3.connect(out_file)) as target:
        source.backup(target)


def backup_mysql(url, out_file: Path) -> None:
    cmd = [
        "mysqldump",
        f"-h{url.host or 'localhost'}",
        f"-P{url.port or 3306}",
        f"-u{url.username}",
        f"-p{url.password or ''}",
        url.database,
    ]
    try:
        with out_file.open("wb") as f:
            subprocess.run(cmd, stdout=f, stderr=subprocess.PIPE, check=True)
    except FileNotFoundError:
        raise SystemExit("`mysqldump` not found. Install the MySQL client tools.")


def main() -> None:
    settings = load_settings()
    url = make_url(str(settings.DATABASE_URL))

    out_dir = REPO_ROOT / "backups"
    out_dir.mkdir(parents=True, exist_ok=True)
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")

    if url.get_backend_name() == "sqlite":
        if not url.database or url.database == ":memory:":
            raise SystemExit("In-memory databases cannot be backed up.")
        out_file = out_dir / f"timeclock_{ts}.db"
        backup_sqlite(url.database, out_file)
    elif url.get_backend_name() == "mysql":
        out_file = out_dir / f"timeclock_{ts}.sql"
        backup_mysql(url, out_file)
    else:
        raise SystemExit(f"Unsupported database backend: {url.get_backend_name()}")

    print(f"OK: Backup created: {out_file}")


if __name__ == "__main__":
    main()
