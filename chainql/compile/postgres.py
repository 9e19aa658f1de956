"""PostgreSQL dialect."""

from __future__ import annotations

from chainql.compile.base import SQLDialect


class PostgresDialect(SQLDialect):
    """PostgreSQL.

    INSERT statements end with ``RETURNING <id columns>`` and the generated
    row is read back from the statement, because ``lastval()``-style lookups
    cannot report more than one column of a compound key.
    """

    driver_names = ("pgsql", "postgres", "postgresql")

    @property
    def name(self) -> str:
        return "postgres"

    @property
    def quote_character(self) -> str:
        return '"'

    @property
    def returns_inserted_ids(self) -> bool:
        return True
