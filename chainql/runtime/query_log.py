"""Per-connection log of executed queries.

Entries are human-readable: every ``?`` placeholder is replaced by the
driver's literal rendering of its value.  They are never executed.
"""
from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any

from chainql.utils.text import replace_outside_quotes


def bind_for_display(
    query: str,
    parameters: Sequence[Any] | Mapping[str, Any],
    quote: Callable[[Any], str],
) -> str:
    """Return ``query`` with positional placeholders filled in.

    Named parameters cannot be aligned with ``?`` positions and are
    ignored; with no positional parameters the query is returned as-is.
    Placeholders inside quoted literals are left alone.
    """
    if isinstance(parameters, Mapping):
        return query
    values = [quote(value) for value in parameters]
    if not values:
        return query

    remaining = iter(values)

    def next_value() -> str:
        return next(remaining, "?")

    return replace_outside_quotes(query, "?", next_value)


class QueryLog:
    """Append-only query history per connection, plus the most recent query
    across all connections."""

    def __init__(self) -> None:
        self._entries: dict[str, list[str]] = {}
        self.last_query: str | None = None

    def record(self, connection_name: str, bound_query: str) -> None:
        self._entries.setdefault(connection_name, []).append(bound_query)
        self.last_query = bound_query

    def entries(self, connection_name: str) -> list[str]:
        return list(self._entries.get(connection_name, []))

    def last(self, connection_name: str | None = None) -> str | None:
        """Most recent query on ``connection_name``, or across all when ``None``.

        Returns an empty string for a connection that never logged anything.
        """
        if connection_name is None:
            return self.last_query
        entries = self._entries.get(connection_name)
        if not entries:
            return ""
        return entries[-1]

    def clear(self) -> None:
        self._entries.clear()
        self.last_query = None
