"""Fallback dialect for drivers without a registered dialect."""
from __future__ import annotations

from chainql.compile.base import SQLDialect


class GenericDialect(SQLDialect):
    """Backtick quoting and a trailing ``LIMIT``.

    Args:
        driver_name: The unrecognised driver name, kept for diagnostics.
    """

    def __init__(self, driver_name: str = "generic") -> None:
        self._driver_name = driver_name

    @property
    def name(self) -> str:
        return self._driver_name

    @property
    def quote_character(self) -> str:
        return "`"

    def __repr__(self) -> str:
        return f"GenericDialect({self._driver_name!r})"
