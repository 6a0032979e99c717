"""
Generic statement preparation and execution.

A statement's execution method is inferred from its SQL text:
    run — anything not starting with SELECT (mutations, pragmas, DDL)
    get — a SELECT returning a single row
    all — a SELECT returning every row
"""

import dataclasses
import logging
import re
import sqlite3
from collections.abc import Mapping
from typing import Any, NamedTuple

log = logging.getLogger(__name__)

SELECT_KEYWORD = re.compile(r"^\s*select\s+", re.IGNORECASE)

RUN = "run"
GET = "get"
ALL = "all"


@dataclasses.dataclass(frozen=True)
class WrappedStatement:
    """A statement bound to its connection, plus its execution method."""

    db: sqlite3.Connection
    sql: str
    method: str


class RunResult(NamedTuple):
    changes: int
    last_insert_rowid: int | None


def infer_method(sql: str, singleton: bool = False) -> str:
    if not SELECT_KEYWORD.search(sql):
        return RUN
    return GET if singleton else ALL


def prepare_statement(db: sqlite3.Connection, sql: str, singleton: bool = False) -> WrappedStatement:
    """Wrap a statement with its execution method.

    Args:
        db: Connection as returned by connect_db().
        sql: A single SQL statement.
        singleton: If true, a SELECT returns a single row instead of a list.

    The SQL itself is not compiled here. sqlite3 compiles (and caches) it on
    first execution, so syntax errors and unknown tables surface from
    execute_statement(), not from this call.
    """
    if not isinstance(sql, str):
        raise TypeError(f"SQL must be a string, not {type(sql).__name__}")

    # Raises ProgrammingError on a closed handle
    db.cursor().close()

    method = infer_method(sql, singleton)
    log.debug("Prepared %s statement: %s", method, sql.strip())
    return WrappedStatement(db, sql, method)


def _expand(value: Any) -> list:
    if isinstance(value, Mapping):
        return _flatten(value.values())
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return _flatten(getattr(value, f.name) for f in dataclasses.fields(value))
    if isinstance(value, (list, tuple, sqlite3.Row)):
        return _flatten(value)
    return [value]


def _flatten(values) -> list:
    out = []
    for value in values:
        out.extend(_expand(value))
    return out


def flatten_params(params) -> list:
    """Flatten execution parameters into a flat list of bind values.

    Mappings contribute their values in insertion order, dataclass instances
    their field values, rows their column values, and lists/tuples are
    flattened at any depth.
    """
    return _flatten(params)


def execute_statement(wstmt: WrappedStatement, *params) -> RunResult | sqlite3.Row | list[sqlite3.Row] | None:
    """Execute a wrapped statement as returned by prepare_statement().

    Returns:
        run — RunResult(changes, last_insert_rowid)
        get — the first row, or None
        all — a list of rows
    """
    values = flatten_params(params)

    if wstmt.method == RUN:
        cursor = wstmt.db.execute(wstmt.sql, values)
        # rowcount is -1 for DDL and other statements that change no rows
        return RunResult(max(cursor.rowcount, 0), cursor.lastrowid)
    if wstmt.method == GET:
        return wstmt.db.execute(wstmt.sql, values).fetchone()
    if wstmt.method == ALL:
        return wstmt.db.execute(wstmt.sql, values).fetchall()
    raise ValueError(f"Invalid method: {wstmt.method}")
