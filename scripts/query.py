#!/usr/bin/env python3
"""
Run one SQL statement against an SQLite database.

SELECT rows are printed as JSON, one object per line. Anything else prints
the number of changed rows and the last inserted rowid.

Usage:
    python scripts/query.py "SELECT * FROM projects"
    python scripts/query.py "SELECT * FROM projects WHERE id = ?" 3 --one
    python scripts/query.py "INSERT INTO projects (name) VALUES (?)" Sparrow --db data/app.db
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Allow running from project root
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlitekit.config.settings import LOG_LEVEL
from sqlitekit.database.connection import database_session
from sqlitekit.database.statements import RunResult, execute_statement, prepare_statement


def run_query(db_path: str | None, sql: str, params: list, singleton: bool = False):
    """Prepare and execute a statement, returning its raw result.

    Rows are converted to plain dicts so they outlive the connection.
    """
    with database_session(db_path) as db:
        result = execute_statement(prepare_statement(db, sql, singleton), params)
        if isinstance(result, RunResult):
            return result
        if isinstance(result, list):
            return [dict(row) for row in result]
        return dict(result) if result is not None else None


def main() -> None:
    parser = argparse.ArgumentParser(description="Run an SQL statement")
    parser.add_argument("sql", help="SQL statement to run")
    parser.add_argument("params", nargs="*", help="Positional bind parameters")
    parser.add_argument("--db", help="Database file (default: $SQLITE3_FILE, else in-memory)")
    parser.add_argument("--one", action="store_true", help="Return a single row")
    args = parser.parse_args()

    logging.basicConfig(level=LOG_LEVEL)

    result = run_query(args.db, args.sql, args.params, singleton=args.one)
    if isinstance(result, RunResult):
        print(f"changes={result.changes} last_insert_rowid={result.last_insert_rowid}")
    elif isinstance(result, list):
        for row in result:
            print(json.dumps(row, default=str))
    elif result is not None:
        print(json.dumps(result, default=str))


if __name__ == "__main__":
    main()
