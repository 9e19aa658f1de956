"""Driver backed by a SQLAlchemy engine or connection.

Requires the optional ``sqlalchemy`` dependency::

    pip install "chainql[sqlalchemy]"

Usage::

    from sqlalchemy import create_engine
    import chainql
    from chainql.driver.alchemy import SQLAlchemyDriver

    engine = create_engine("postgresql+psycopg2://user:pw@host/db")
    chainql.set_driver(SQLAlchemyDriver(engine))

chainql always compiles ``?`` placeholders.  Underlying DB-API drivers that
use another paramstyle (``%s`` for psycopg2 and PyMySQL, ``:1`` for
numeric, ``:name`` for named) get their placeholders rewritten before
execution; quoted literals are left alone.
"""
from __future__ import annotations

import itertools
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from chainql.driver.base import Driver, Params, Statement
from chainql.utils.text import replace_outside_quotes

if TYPE_CHECKING:
    from sqlalchemy import Connection, CursorResult, Engine


class SQLAlchemyStatement(Statement):
    """Wraps a SQLAlchemy ``CursorResult``."""

    def __init__(self, result: CursorResult[Any]) -> None:
        self._result = result
        self._mappings = result.mappings() if result.returns_rows else None

    def fetch_row(self) -> dict[str, Any] | None:
        if self._mappings is None:
            return None
        row = self._mappings.fetchone()
        return dict(row) if row is not None else None

    @property
    def rowcount(self) -> int:
        return self._result.rowcount

    @property
    def lastrowid(self) -> Any:
        return self._result.lastrowid


class SQLAlchemyDriver(Driver):
    """Driver for a SQLAlchemy ``Engine`` or ``Connection``.

    Args:
        bind: An ``Engine`` (a dedicated autocommit connection is opened
            from it) or an already-open ``Connection`` (used as-is, so the
            caller controls transactions).

    Raises:
        ImportError: If ``sqlalchemy`` is not installed.
    """

    def __init__(self, bind: Engine | Connection) -> None:
        try:
            from sqlalchemy import Engine as _Engine
        except ImportError as exc:
            raise ImportError(
                "SQLAlchemy is required for SQLAlchemyDriver. "
                'Install it with: pip install "chainql[sqlalchemy]"'
            ) from exc

        if isinstance(bind, _Engine):
            self.connection = bind.connect().execution_options(isolation_level="AUTOCOMMIT")
        else:
            self.connection = bind
        self._last_statement: SQLAlchemyStatement | None = None

    @classmethod
    def from_url(cls, url: str, **engine_options: Any) -> SQLAlchemyDriver:
        """Create an engine for ``url`` and wrap it."""
        try:
            from sqlalchemy import create_engine
        except ImportError as exc:
            raise ImportError(
                f"SQLAlchemy is required to open connection string {url!r}. "
                'Install it with: pip install "chainql[sqlalchemy]"'
            ) from exc
        return cls(create_engine(url, **engine_options))

    @property
    def dialect_name(self) -> str:
        return self.connection.dialect.name

    @property
    def paramstyle(self) -> str:
        return self.connection.dialect.paramstyle

    def execute(self, sql: str, params: Params = ()) -> SQLAlchemyStatement:
        if isinstance(params, Mapping):
            result = self.connection.exec_driver_sql(sql, dict(params))
        else:
            positional = list(params)
            if positional:
                sql, bound = self._translate(sql, positional)
                result = self.connection.exec_driver_sql(sql, bound)
            else:
                result = self.connection.exec_driver_sql(sql)
        statement = SQLAlchemyStatement(result)
        self._last_statement = statement
        return statement

    def last_insert_id(self) -> Any:
        if self._last_statement is None:
            return None
        return self._last_statement.lastrowid

    def _translate(self, sql: str, params: list[Any]) -> tuple[str, Any]:
        """Rewrite ``?`` placeholders into the DB-API's paramstyle."""
        style = self.paramstyle
        if style in ("format", "pyformat"):
            # The DB-API interpolates the whole string, literals included.
            sql = sql.replace("%", "%%")
            return replace_outside_quotes(sql, "?", "%s"), tuple(params)
        if style == "numeric":
            counter = itertools.count(1)
            return replace_outside_quotes(sql, "?", lambda: f":{next(counter)}"), tuple(params)
        if style == "named":
            counter = itertools.count(1)
            sql = replace_outside_quotes(sql, "?", lambda: f":p{next(counter)}")
            return sql, {f"p{index}": value for index, value in enumerate(params, start=1)}
        return sql, tuple(params)
