"""SQLite dialect."""
from __future__ import annotations

from chainql.compile.base import SQLDialect


class SQLiteDialect(SQLDialect):
    """SQLite 2 and 3.

    SQLite accepts MySQL-style backtick quoting as well as double quotes;
    backticks are used so generated SQL reads the same as on MySQL.
    """

    driver_names = ("sqlite", "sqlite2", "sqlite3")

    @property
    def name(self) -> str:
        return "sqlite"

    @property
    def quote_character(self) -> str:
        return "`"
