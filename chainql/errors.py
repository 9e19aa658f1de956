"""Custom exception hierarchy for chainql.

All library errors inherit from ChainQLError so callers can catch the base
class for any chainql-specific failure.  Exceptions raised by the database
driver are never wrapped; they reach the caller unchanged.
"""
from __future__ import annotations

from collections.abc import Sequence


class ChainQLError(Exception):
    """Base exception for all chainql errors."""


class ConfigurationError(ChainQLError):
    """Raised when a connection option is unknown or has an invalid value.

    Args:
        message: Human-readable description.
        key: The configuration key being set, if any.
        connection_name: The connection whose configuration was touched.
    """

    def __init__(
        self,
        message: str,
        key: str | None = None,
        connection_name: str | None = None,
    ) -> None:
        super().__init__(message)
        self.key = key
        self.connection_name = connection_name


class UsageError(ChainQLError):
    """Raised when the public API is used in a way that cannot succeed."""


class NullIdError(UsageError):
    """Raised when an UPDATE or DELETE needs a primary key that is null.

    Args:
        table: Table of the offending record.
        columns: The id column(s) whose value was missing.
    """

    def __init__(self, table: str, columns: Sequence[str]) -> None:
        columns = list(columns)
        if len(columns) > 1:
            message = (
                f"Primary key ID contains null value(s) for table '{table}' "
                f"(columns: {', '.join(columns)})."
            )
        else:
            message = f"Primary key ID missing from row or is null for table '{table}'."
        super().__init__(message)
        self.table = table
        self.columns = columns


class CompilationError(ChainQLError):
    """Raised when builder state cannot be compiled into SQL.

    Args:
        message: Human-readable description.
        clause: The clause being compiled when the error occurred.
    """

    def __init__(self, message: str, clause: str | None = None) -> None:
        super().__init__(message)
        self.clause = clause
