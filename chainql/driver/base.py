"""Driver abstractions: the narrow contract chainql needs from a database.

chainql never opens sockets or parses result sets itself.  A
:class:`Driver` prepares and executes one statement at a time and hands
back a :class:`Statement` to read rows from.  Exceptions raised by the
underlying database library propagate unchanged.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any

#: Positional (``?``) or named (``:name``) statement parameters.
Params = Sequence[Any] | Mapping[str, Any]


class Statement(ABC):
    """The result of one executed statement."""

    @abstractmethod
    def fetch_row(self) -> dict[str, Any] | None:
        """Return the next row as a column → value dict, or ``None`` at the end."""

    def fetch_all(self) -> list[dict[str, Any]]:
        rows: list[dict[str, Any]] = []
        while (row := self.fetch_row()) is not None:
            rows.append(row)
        return rows

    @property
    @abstractmethod
    def rowcount(self) -> int:
        """Rows affected by a write, ``-1`` when the driver cannot tell."""


class Driver(ABC):
    """Abstract base for database drivers."""

    @property
    @abstractmethod
    def dialect_name(self) -> str:
        """Return the driver name used for dialect autodetection.

        Uses the conventional short names: ``'sqlite'``, ``'mysql'``,
        ``'pgsql'``, ``'sqlsrv'``, ``'firebird'``, …
        """

    @abstractmethod
    def execute(self, sql: str, params: Params = ()) -> Statement:
        """Prepare and execute ``sql`` with ``params`` bound.

        Sequences bind positionally to ``?`` placeholders; mappings bind by
        name.
        """

    @abstractmethod
    def last_insert_id(self) -> Any:
        """Return the id generated by the most recent INSERT."""

    def quote(self, value: Any) -> str:
        """Render ``value`` as an SQL literal, for display only."""
        return quote_literal(value)


def quote_literal(value: Any) -> str:
    """Default literal rendering used for query-log output.

    Strings (and anything else that is not null or boolean) are rendered
    as single-quoted strings with embedded quotes doubled.
    """
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "'1'" if value else "'0'"
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    text = str(value).replace("'", "''")
    return f"'{text}'"
