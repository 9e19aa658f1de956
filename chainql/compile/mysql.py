"""MySQL dialect."""

from __future__ import annotations

from chainql.compile.base import SQLDialect


class MySQLDialect(SQLDialect):
    """MySQL and MariaDB.

    Identifiers are quoted with backticks (`` ` ``); the row limit is a
    trailing ``LIMIT n``.
    """

    driver_names = ("mysql", "mariadb")

    @property
    def name(self) -> str:
        return "mysql"

    @property
    def quote_character(self) -> str:
        return "`"
