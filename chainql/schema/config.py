"""Pydantic models for per-connection configuration.

Every connection name owns exactly one :class:`ConnectionConfig`.  It is
created from defaults the first time the name is touched and mutated
option-by-option through :meth:`chainql.runtime.registry.Registry.configure`::

    import chainql

    chainql.configure("sqlite:app.db")
    chainql.configure("logging", True)
    chainql.configure(
        {"caching": True, "caching_auto_clear": True},
        connection_name="reporting",
    )

Assignment is validated, so a misspelt option or a cache callback that is
not callable is rejected at ``configure`` time rather than when the first
query runs.
"""
from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field

#: Name used when the caller does not pick a connection.
DEFAULT_CONNECTION = "default"

#: Identifier type for primary keys: one column or an ordered compound key.
IdColumn = Union[str, list[str]]


class LimitStyle(str, Enum):
    """Where the row limit goes in a SELECT statement."""

    #: ``SELECT ... LIMIT n``
    LIMIT = "limit"
    #: ``SELECT TOP n ...``
    TOP_N = "top"


class ConnectionConfig(BaseModel):
    """Options for one named connection.

    Attributes:
        connection_string: Used to open a driver when none was registered
            with ``set_driver``.  ``sqlite:<path>`` opens the stdlib SQLite
            driver; any other value is treated as a SQLAlchemy URL.
        identifier_quote_character: Character used to quote table and
            column names.  ``None`` means autodetect from the driver.
        limit_clause_style: ``LIMIT`` or ``TOP_N``.  ``None`` means
            autodetect from the driver.
        id_column: Default primary key column, or an ordered list of
            columns for a compound key.
        id_column_overrides: Per-table primary key overrides.
        logging: Record every executed query in the query log.
        logger: Optional callable receiving ``(bound_query, elapsed)``.
        caching: Serve identical SELECTs from the query cache.
        caching_auto_clear: Clear the connection's cache after each save.
        create_cache_key: Replaces cache-key generation.
            Called as ``(query, parameters, table_name, connection_name)``.
        check_query_cache: Replaces cache lookup.  Called as
            ``(cache_key, table_name, connection_name)``; returns the cached
            rows or ``None`` on a miss.
        cache_query_result: Replaces cache storage.  Called as
            ``(cache_key, rows, table_name, connection_name)``.
        clear_cache: Called as ``(table_name, connection_name)`` after the
            built-in store is cleared.
        return_result_sets: Make ``find_many`` return a
            :class:`~chainql.result_set.ResultSet` instead of a list.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    connection_string: str = "sqlite::memory:"
    identifier_quote_character: str | None = None
    limit_clause_style: LimitStyle | None = None
    id_column: IdColumn = "id"
    id_column_overrides: dict[str, IdColumn] = Field(default_factory=dict)
    logging: bool = False
    logger: Callable[..., Any] | None = None
    caching: bool = False
    caching_auto_clear: bool = False
    create_cache_key: Callable[..., Any] | None = None
    check_query_cache: Callable[..., Any] | None = None
    cache_query_result: Callable[..., Any] | None = None
    clear_cache: Callable[..., Any] | None = None
    return_result_sets: bool = False

    @classmethod
    def option_names(cls) -> frozenset[str]:
        """Return the set of option keys accepted by ``configure``."""
        return frozenset(cls.model_fields)

    def has_cache_callbacks(self) -> bool:
        """Whether any of the pluggable cache callbacks is configured."""
        return any(
            callback is not None
            for callback in (
                self.create_cache_key,
                self.check_query_cache,
                self.cache_query_result,
                self.clear_cache,
            )
        )
