"""
sqlitekit connection management.

connect_db() opens a file or in-memory SQLite database, applies the default
journal mode and registers the handle to be closed at interpreter exit.
disconnect_db() closes a handle quietly; calling it is normally not necessary.
"""

import atexit
import logging
import os
import sqlite3
from collections.abc import Mapping
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from sqlitekit.config import settings

log = logging.getLogger(__name__)

JOURNAL_MODES = {"DELETE", "TRUNCATE", "PERSIST", "MEMORY", "WAL", "OFF"}


def default_options() -> dict:
    """Connection options applied when the caller does not override them."""
    return {
        "file_must_exist": settings.FILE_MUST_EXIST,
        "readonly": False,
        "timeout": settings.BUSY_TIMEOUT,
        "journal_mode": settings.JOURNAL_MODE,
        "verbose": None,
    }


def resolve_database_path(filename: str | None = None) -> str:
    """Argument, else $SQLITE3_FILE, else the in-memory sentinel."""
    return filename or os.environ.get(settings.DATABASE_FILE_ENV) or settings.MEMORY_DATABASE


def _is_transient(path: str) -> bool:
    # "" is a private on-disk temp database, deleted on close
    return path in (settings.MEMORY_DATABASE, "")


def _open(path: str, options: dict) -> sqlite3.Connection:
    timeout = options["timeout"]
    if _is_transient(path):
        return sqlite3.connect(path, timeout=timeout, isolation_level=None)

    if options["readonly"] or options["file_must_exist"]:
        mode = "ro" if options["readonly"] else "rw"
        uri = f"{Path(path).resolve().as_uri()}?mode={mode}"
        return sqlite3.connect(uri, timeout=timeout, isolation_level=None, uri=True)

    Path(path).parent.mkdir(parents=True, exist_ok=True)
    return sqlite3.connect(path, timeout=timeout, isolation_level=None)


def connect_db(filename: str | Mapping | None = None, options: Mapping | None = None) -> sqlite3.Connection:
    """Connect to an SQLite database.

    Args:
        filename: Database file path, or ":memory:". Falls back to $SQLITE3_FILE,
            then to an in-memory database. A mapping here is taken as options.
        options: Overrides for file_must_exist, readonly, timeout, journal_mode
            and verbose (a callable receiving every SQL statement run).

    Returns:
        An autocommit connection with Row factory set for dict-like access.
    """
    if isinstance(filename, Mapping):
        options, filename = filename, None

    opts = default_options()
    unknown = set(options or {}) - set(opts)
    if unknown:
        raise ValueError(f"Unknown connection option(s): {', '.join(sorted(unknown))}")
    opts.update(options or {})

    journal_mode = opts["journal_mode"]
    if journal_mode and (not isinstance(journal_mode, str) or journal_mode.upper() not in JOURNAL_MODES):
        raise ValueError(f"Invalid journal mode: {journal_mode!r}")
    # Switching journal mode writes to the file; a readonly handle keeps what it has
    if opts["readonly"]:
        journal_mode = None

    path = resolve_database_path(filename)
    db = _open(path, opts)
    try:
        db.row_factory = sqlite3.Row
        if callable(opts["verbose"]):
            db.set_trace_callback(opts["verbose"])
        if journal_mode:
            db.execute(f"PRAGMA journal_mode = {journal_mode.upper()}")
    except BaseException:
        db.close()
        raise

    atexit.register(db.close)
    log.info("Connected to SQLite database %s (journal_mode=%s)", path, journal_mode or "default")
    return db


def disconnect_db(db: sqlite3.Connection | None) -> None:
    """Disconnect silently from an SQLite database.

    Existing connections are closed on process exit anyway; this just does it
    sooner. Never raises.
    """
    try:
        atexit.unregister(db.close)
        db.close()
    except Exception:
        log.debug("Ignoring error while closing %r", db, exc_info=True)


@contextmanager
def database_session(filename: str | Mapping | None = None, options: Mapping | None = None) -> Iterator[sqlite3.Connection]:
    """Yield a connection from connect_db() and disconnect it afterwards."""
    db = connect_db(filename, options)
    try:
        yield db
    finally:
        disconnect_db(db)
