"""Firebird dialect."""

from __future__ import annotations

from chainql.compile.base import SQLDialect


class FirebirdDialect(SQLDialect):
    """Firebird.

    Firebird spells the row window ``ROWS n TO m`` rather than
    ``LIMIT n OFFSET m``.
    """

    driver_names = ("firebird",)

    @property
    def name(self) -> str:
        return "firebird"

    @property
    def quote_character(self) -> str:
        return '"'

    @property
    def limit_keyword(self) -> str:
        return "ROWS"

    @property
    def offset_keyword(self) -> str:
        return "TO"
