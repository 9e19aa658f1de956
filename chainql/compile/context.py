"""Compilation context value object.

Packages the ``(dialect, quoter, limit_style)`` data clump shared by the
statement compiler and every clause-level builder into one object.  It is
resolved from the connection's configuration at compile time, so an
explicitly configured quote character or limit style wins over the
dialect's default.
"""
from __future__ import annotations

from dataclasses import dataclass

from chainql.compile.base import SQLDialect
from chainql.compile.quoting import IdentifierQuoter
from chainql.schema.config import LimitStyle


@dataclass(frozen=True)
class CompilationContext:
    """Immutable context for a single compilation run.

    Attributes:
        dialect: Dialect strategy for the connection's driver.
        quoter: Identifier quoter using the configured quote character.
        limit_style: Configured (or autodetected) limit clause style.
    """

    dialect: SQLDialect
    quoter: IdentifierQuoter
    limit_style: LimitStyle

    def quote(self, identifier: str | list[str]) -> str:
        return self.quoter.quote(identifier)
