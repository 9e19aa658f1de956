"""chainql – a fluent SQL query builder and row-hydration layer.

Chain. Compile. Hydrate.

Public API
----------
``for_table``
    Start a query (or a new row) on a table.  Builder methods chain and a
    terminal method (``find_one``, ``find_many``, ``count``, ``save``, …)
    compiles and executes::

        chainql.configure("sqlite:app.db")
        widget = chainql.for_table("widget").where("name", "Sprocket").find_one()
        widget["price"] = 12
        widget.save()

``configure`` / ``get_config`` / ``reset_config``
    Per-connection options; see :class:`~chainql.schema.ConnectionConfig`.

``set_driver`` / ``get_driver`` / ``reset_drivers``
    Register a database driver for a connection name.  Without one, the
    connection is opened from its ``connection_string`` on first use.

``raw_execute``, ``get_last_statement``, ``get_last_query``,
``get_query_log``, ``get_connection_names``, ``clear_cache``
    Execution, query-log and cache helpers.

Every module-level function delegates to one process-wide
:class:`~chainql.runtime.Registry`.  Build your own ``Registry`` to keep
connection state out of module globals.

Extensibility
-------------
New dialects are registered by driver name::

    from chainql.compile.registry import DialectFactory

    @DialectFactory.register("cockroachdb")
    class CockroachDialect(SQLDialect):
        ...
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from chainql.compile.base import CompiledSQL, SQLDialect
from chainql.compile.registry import DialectFactory
from chainql.driver import Driver, SQLiteDriver, Statement
from chainql.errors import (
    ChainQLError,
    CompilationError,
    ConfigurationError,
    NullIdError,
    UsageError,
)
from chainql.record import Record
from chainql.result_set import ResultSet
from chainql.runtime.cache import CacheStore, InMemoryCacheStore
from chainql.runtime.registry import _UNSET, Registry, default_registry
from chainql.schema.config import DEFAULT_CONNECTION, ConnectionConfig, LimitStyle

__all__ = [
    # Module-level API
    "configure",
    "get_config",
    "reset_config",
    "set_driver",
    "get_driver",
    "reset_drivers",
    "for_table",
    "raw_execute",
    "get_last_statement",
    "get_last_query",
    "get_query_log",
    "get_connection_names",
    "clear_cache",
    # Records
    "Record",
    "ResultSet",
    # Runtime
    "Registry",
    "default_registry",
    "CacheStore",
    "InMemoryCacheStore",
    # Configuration
    "DEFAULT_CONNECTION",
    "ConnectionConfig",
    "LimitStyle",
    # Compilation
    "CompiledSQL",
    "SQLDialect",
    "DialectFactory",
    # Drivers
    "Driver",
    "Statement",
    "SQLiteDriver",
    # Errors
    "ChainQLError",
    "ConfigurationError",
    "UsageError",
    "NullIdError",
    "CompilationError",
]


def configure(
    key: str | Mapping[str, Any],
    value: Any = _UNSET,
    connection_name: str = DEFAULT_CONNECTION,
) -> None:
    """Set connection options.

    ``configure("sqlite:app.db")`` sets the connection string,
    ``configure("logging", True)`` one option, and
    ``configure({"logging": True, "caching": True})`` several at once.

    Raises:
        ConfigurationError: If an option is unknown or its value invalid.
    """
    default_registry().configure(key, value, connection_name)


def get_config(key: str | None = None, connection_name: str = DEFAULT_CONNECTION) -> Any:
    return default_registry().get_config(key, connection_name)


def reset_config() -> None:
    default_registry().reset_config()


def set_driver(driver: Driver | None, connection_name: str = DEFAULT_CONNECTION) -> None:
    """Use ``driver`` for ``connection_name``, autodetecting its dialect settings."""
    default_registry().set_driver(driver, connection_name)


def get_driver(connection_name: str = DEFAULT_CONNECTION) -> Driver:
    return default_registry().get_driver(connection_name)


def reset_drivers() -> None:
    default_registry().reset_drivers()


def for_table(table_name: str, connection_name: str = DEFAULT_CONNECTION) -> Record:
    """Start a query on ``table_name``."""
    return default_registry().for_table(table_name, connection_name)


def raw_execute(
    query: str,
    parameters: Sequence[Any] | Mapping[str, Any] = (),
    connection_name: str = DEFAULT_CONNECTION,
) -> Statement:
    """Execute SQL directly; the returned statement can be read for rows."""
    return default_registry().raw_execute(query, parameters, connection_name)


def get_last_statement() -> Statement | None:
    return default_registry().get_last_statement()


def get_last_query(connection_name: str | None = None) -> str | None:
    """Most recent logged query, on one connection or across all of them."""
    return default_registry().get_last_query(connection_name)


def get_query_log(connection_name: str = DEFAULT_CONNECTION) -> list[str]:
    return default_registry().get_query_log(connection_name)


def get_connection_names() -> list[str]:
    return default_registry().connection_names()


def clear_cache(table_name: str | None = None, connection_name: str = DEFAULT_CONNECTION) -> None:
    default_registry().clear_cache(table_name, connection_name)
