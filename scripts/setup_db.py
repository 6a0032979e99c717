#!/usr/bin/env python3
"""
Create an SQLite database file for sqlitekit.

connect_db() refuses to create missing files by default (SQLITE3_FILE_MUST_EXIST),
so this is the usual way to bring a new database into existence.

Usage:
    python scripts/setup_db.py                          # $SQLITE3_FILE or data/sqlitekit.db
    python scripts/setup_db.py --db path/to.db          # custom path
    python scripts/setup_db.py --schema schema.sql      # also apply a SQL script
"""

import argparse
import logging
import os
import sys
from pathlib import Path

# Allow running from project root
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlitekit.config.settings import DATABASE_FILE_ENV, LOG_LEVEL
from sqlitekit.database.connection import connect_db, disconnect_db

DEFAULT_DB = "data/sqlitekit.db"


def init_database(db_path: str, schema_path: str | None = None) -> list[str]:
    """Create the database (WAL mode) and optionally run a SQL script against it.

    Returns the names of the tables present afterwards.
    """
    db = connect_db(db_path, {"file_must_exist": False, "journal_mode": "WAL"})
    try:
        if schema_path:
            db.executescript(Path(schema_path).read_text())

        tables = db.execute(
            "SELECT name FROM sqlite_master WHERE type='table' ORDER BY name"
        ).fetchall()
        return [row["name"] for row in tables]
    finally:
        disconnect_db(db)


def main() -> None:
    parser = argparse.ArgumentParser(description="Initialize an SQLite database")
    parser.add_argument(
        "--db",
        default=os.getenv(DATABASE_FILE_ENV) or DEFAULT_DB,
        help="Path to the SQLite database file",
    )
    parser.add_argument(
        "--schema",
        help="SQL script to apply after creating the database",
    )
    args = parser.parse_args()

    logging.basicConfig(level=LOG_LEVEL)

    tables = init_database(args.db, args.schema)
    print(f"Database initialized: {args.db}")
    print(f"Tables: {', '.join(tables) if tables else '(none)'}")


if __name__ == "__main__":
    main()
