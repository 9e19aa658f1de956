"""SQLite driver built on the standard library ``sqlite3`` module."""
from __future__ import annotations

import sqlite3
from collections.abc import Mapping
from typing import Any

from chainql.driver.base import Driver, Params, Statement


class SQLiteStatement(Statement):
    """Wraps a ``sqlite3.Cursor``; rows come back as plain dicts."""

    def __init__(self, cursor: sqlite3.Cursor) -> None:
        self._cursor = cursor
        self._columns = [col[0] for col in cursor.description or ()]

    def fetch_row(self) -> dict[str, Any] | None:
        if not self._columns:
            return None
        row = self._cursor.fetchone()
        if row is None:
            return None
        return dict(zip(self._columns, row))

    @property
    def rowcount(self) -> int:
        return self._cursor.rowcount


class SQLiteDriver(Driver):
    """Driver for a ``sqlite3.Connection``.

    Args:
        connection: An open connection.  Transactions are left as the
            caller configured them; use :meth:`connect` for an autocommit
            connection.
    """

    def __init__(self, connection: sqlite3.Connection) -> None:
        self.connection = connection
        self._last_cursor: sqlite3.Cursor | None = None

    @classmethod
    def connect(cls, database: str = ":memory:") -> SQLiteDriver:
        """Open ``database`` in autocommit mode."""
        return cls(sqlite3.connect(database, isolation_level=None))

    @property
    def dialect_name(self) -> str:
        return "sqlite"

    def execute(self, sql: str, params: Params = ()) -> SQLiteStatement:
        bound: Any = dict(params) if isinstance(params, Mapping) else tuple(params)
        cursor = self.connection.execute(sql, bound)
        self._last_cursor = cursor
        return SQLiteStatement(cursor)

    def last_insert_id(self) -> Any:
        if self._last_cursor is None:
            return None
        return self._last_cursor.lastrowid
