"""Test fixtures: a recording driver that stands in for a real database."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from chainql.driver.base import Driver, Params, Statement


class MockStatement(Statement):
    """Serves a canned list of rows."""

    def __init__(self, rows: Iterable[Mapping[str, Any]] = ()) -> None:
        self._rows = [dict(row) for row in rows]
        self._rowcount = len(self._rows)

    def fetch_row(self) -> dict[str, Any] | None:
        if not self._rows:
            return None
        return self._rows.pop(0)

    @property
    def rowcount(self) -> int:
        return self._rowcount


class MockDriver(Driver):
    """Records every executed statement instead of running it.

    Each ``execute`` call consumes the next queued result (a list of row
    dicts); with nothing queued the statement returns no rows.

    Args:
        dialect_name: Driver name reported for dialect autodetection.
        insert_id: Value returned by ``last_insert_id``.
    """

    def __init__(self, dialect_name: str = "sqlite", insert_id: Any = 0) -> None:
        self._dialect_name = dialect_name
        self.insert_id = insert_id
        self.executed: list[tuple[str, Params]] = []
        self._results: list[list[dict[str, Any]]] = []

    @property
    def dialect_name(self) -> str:
        return self._dialect_name

    def queue(self, *rows: Mapping[str, Any]) -> MockDriver:
        """Queue one result set for the next ``execute`` call."""
        self._results.append([dict(row) for row in rows])
        return self

    def execute(self, sql: str, params: Params = ()) -> MockStatement:
        self.executed.append((sql, params))
        rows = self._results.pop(0) if self._results else []
        return MockStatement(rows)

    def last_insert_id(self) -> Any:
        return self.insert_id

    @property
    def last_sql(self) -> str:
        return self.executed[-1][0]

    @property
    def last_params(self) -> Params:
        return self.executed[-1][1]
