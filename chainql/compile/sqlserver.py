"""SQL Server family dialects."""

from __future__ import annotations

from chainql.compile.base import SQLDialect
from chainql.schema.config import LimitStyle


class SQLServerDialect(SQLDialect):
    """Microsoft SQL Server via the sqlsrv, dblib or mssql drivers.

    The row limit is written as ``SELECT TOP n ...``; no trailing LIMIT
    clause is emitted.
    """

    driver_names = ("sqlsrv", "dblib", "mssql")

    @property
    def name(self) -> str:
        return "sqlserver"

    @property
    def quote_character(self) -> str:
        return '"'

    @property
    def limit_style(self) -> LimitStyle:
        return LimitStyle.TOP_N


class SybaseDialect(SQLDialect):
    """Sybase ASE: double-quoted identifiers with a trailing LIMIT."""

    driver_names = ("sybase",)

    @property
    def name(self) -> str:
        return "sybase"

    @property
    def quote_character(self) -> str:
        return '"'
