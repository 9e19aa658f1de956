"""Connection registry: the context object that owns named-connection state.

A :class:`Registry` maps each connection name to its configuration, its
driver, its cache store and its slice of the query log.  The module-level
functions in :mod:`chainql` delegate to one process-wide default instance;
tests and multi-tenant applications can build their own::

    registry = Registry()
    registry.set_driver(SQLiteDriver.connect(), "reporting")
    registry.configure("logging", True, "reporting")
    rows = registry.for_table("widget", "reporting").where("id", 5).find_array()

State lifecycle: a connection's configuration is created from defaults the
first time its name is used and lives until :meth:`Registry.reset_config`;
drivers live until :meth:`Registry.reset_drivers`.  Nothing is locked: one
registry must not be driven from several threads at once.
"""
from __future__ import annotations

import logging
import time
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from chainql.compile.base import SQLDialect
from chainql.compile.context import CompilationContext
from chainql.compile.quoting import IdentifierQuoter
from chainql.compile.registry import DialectFactory
from chainql.driver import Driver, Statement, driver_from_connection_string
from chainql.errors import ConfigurationError
from chainql.runtime.cache import CacheStore, CallbackCacheStore, InMemoryCacheStore, Rows
from chainql.runtime.query_log import QueryLog, bind_for_display
from chainql.schema.config import DEFAULT_CONNECTION, ConnectionConfig

if TYPE_CHECKING:
    from chainql.record import Record

logger = logging.getLogger("chainql.runtime.registry")

_UNSET: Any = object()


class Registry:
    """Named connections with their configuration, drivers, cache and log."""

    def __init__(self) -> None:
        self._configs: dict[str, ConnectionConfig] = {}
        self._drivers: dict[str, Driver] = {}
        self._dialects: dict[str, SQLDialect] = {}
        self._cache_stores: dict[str, CacheStore] = {}
        self._memory_cache = InMemoryCacheStore()
        self.query_log = QueryLog()
        self._last_statement: Statement | None = None

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def config(self, connection_name: str = DEFAULT_CONNECTION) -> ConnectionConfig:
        """Return the configuration for ``connection_name``, creating defaults."""
        config = self._configs.get(connection_name)
        if config is None:
            config = ConnectionConfig()
            self._configs[connection_name] = config
        return config

    def configure(
        self,
        key: str | Mapping[str, Any],
        value: Any = _UNSET,
        connection_name: str = DEFAULT_CONNECTION,
    ) -> None:
        """Set one option, several options, or the connection string.

        Args:
            key: Option name, or a mapping of option names to values.
            value: Option value.  When omitted and ``key`` is a string,
                ``key`` is taken as the connection string.
            connection_name: Connection to configure.

        Raises:
            ConfigurationError: If an option is unknown or its value is
                invalid (for example a cache callback that is not callable).
        """
        config = self.config(connection_name)

        if isinstance(key, Mapping):
            for option, option_value in key.items():
                self.configure(option, option_value, connection_name)
            return

        if value is _UNSET:
            key, value = "connection_string", key

        if key not in ConnectionConfig.option_names():
            raise ConfigurationError(
                f"Unknown configuration option '{key}'.",
                key=key,
                connection_name=connection_name,
            )
        try:
            setattr(config, key, value)
        except ValidationError as exc:
            raise ConfigurationError(
                f"Invalid value for configuration option '{key}': {exc}",
                key=key,
                connection_name=connection_name,
            ) from exc

    def get_config(self, key: str | None = None, connection_name: str = DEFAULT_CONNECTION) -> Any:
        """Return one option value, or every option as a dict when ``key`` is ``None``."""
        config = self.config(connection_name)
        if key is None:
            return config.model_dump()
        if key not in ConnectionConfig.option_names():
            raise ConfigurationError(
                f"Unknown configuration option '{key}'.",
                key=key,
                connection_name=connection_name,
            )
        return getattr(config, key)

    def reset_config(self) -> None:
        """Drop every connection's configuration."""
        self._configs.clear()

    # ------------------------------------------------------------------
    # Drivers and dialects
    # ------------------------------------------------------------------

    def set_driver(self, driver: Driver | None, connection_name: str = DEFAULT_CONNECTION) -> None:
        """Register ``driver`` for ``connection_name``.

        Unless configured explicitly, the identifier quote character and
        limit clause style are detected from the driver's dialect.
        Passing ``None`` forgets the connection's driver.
        """
        config = self.config(connection_name)
        self._dialects.pop(connection_name, None)
        if driver is None:
            self._drivers.pop(connection_name, None)
            return

        self._drivers[connection_name] = driver
        dialect = self.dialect(connection_name)
        if config.identifier_quote_character is None:
            config.identifier_quote_character = dialect.quote_character
        if config.limit_clause_style is None:
            config.limit_clause_style = dialect.limit_style
        logger.info(
            "Registered %s driver for connection %r (quote=%r, limit style=%s)",
            driver.dialect_name,
            connection_name,
            config.identifier_quote_character,
            config.limit_clause_style.value,
        )

    def get_driver(self, connection_name: str = DEFAULT_CONNECTION) -> Driver:
        """Return the connection's driver, opening one from its connection string if needed."""
        driver = self._drivers.get(connection_name)
        if driver is None:
            connection_string = self.config(connection_name).connection_string
            logger.info("Opening connection %r from %r", connection_name, connection_string)
            driver = driver_from_connection_string(connection_string)
            self.set_driver(driver, connection_name)
        return driver

    def reset_drivers(self) -> None:
        """Forget every registered driver."""
        self._drivers.clear()
        self._dialects.clear()

    def connection_names(self) -> list[str]:
        return list(self._drivers)

    def dialect(self, connection_name: str = DEFAULT_CONNECTION) -> SQLDialect:
        dialect = self._dialects.get(connection_name)
        if dialect is None:
            dialect = DialectFactory.create(self.get_driver(connection_name).dialect_name)
            self._dialects[connection_name] = dialect
        return dialect

    def quoter(self, connection_name: str = DEFAULT_CONNECTION) -> IdentifierQuoter:
        """Identifier quoter for the connection's configured quote character."""
        config = self.config(connection_name)
        if config.identifier_quote_character is None:
            self.get_driver(connection_name)
        return IdentifierQuoter(config.identifier_quote_character or self.dialect(connection_name).quote_character)

    def compilation_context(self, connection_name: str = DEFAULT_CONNECTION) -> CompilationContext:
        dialect = self.dialect(connection_name)
        config = self.config(connection_name)
        return CompilationContext(
            dialect=dialect,
            quoter=self.quoter(connection_name),
            limit_style=config.limit_clause_style or dialect.limit_style,
        )

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def execute(
        self,
        query: str,
        parameters: Sequence[Any] | Mapping[str, Any] = (),
        connection_name: str = DEFAULT_CONNECTION,
    ) -> Statement:
        """Execute one statement and record it in the query log.

        Driver exceptions propagate unchanged and nothing is logged for a
        failed statement.
        """
        driver = self.get_driver(connection_name)
        started = time.perf_counter()
        statement = driver.execute(query, parameters)
        elapsed = time.perf_counter() - started
        self._last_statement = statement
        self._log_query(query, parameters, connection_name, elapsed)
        return statement

    def raw_execute(
        self,
        query: str,
        parameters: Sequence[Any] | Mapping[str, Any] = (),
        connection_name: str = DEFAULT_CONNECTION,
    ) -> Statement:
        """Execute SQL that the builder cannot express (DDL, upserts, …)."""
        return self.execute(query, parameters, connection_name)

    def fetch_rows(
        self,
        query: str,
        parameters: Sequence[Any] | Mapping[str, Any],
        table_name: str | None,
        connection_name: str = DEFAULT_CONNECTION,
    ) -> Rows:
        """Run a read query, serving it from the cache when caching is enabled.

        The cache stores its own copy of the rows and hands out a fresh copy
        on every hit, so callers may mutate what they get back.
        """
        caching = self.config(connection_name).caching
        store = self.cache_store(connection_name)
        cache_key = None
        if caching:
            cache_key = store.make_key(query, parameters, table_name, connection_name)
            cached = store.get(cache_key, table_name, connection_name)
            if cached is not None:
                logger.debug("Cache hit on connection %r for %s", connection_name, cache_key)
                return [dict(row) for row in cached]

        rows = self.execute(query, parameters, connection_name).fetch_all()

        if caching:
            store.set(cache_key, [dict(row) for row in rows], table_name, connection_name)
            logger.debug("Cached %d row(s) on connection %r", len(rows), connection_name)
        return rows

    def get_last_statement(self) -> Statement | None:
        """The statement most recently executed on any connection."""
        return self._last_statement

    # ------------------------------------------------------------------
    # Cache
    # ------------------------------------------------------------------

    def set_cache_store(self, store: CacheStore | None, connection_name: str = DEFAULT_CONNECTION) -> None:
        """Use ``store`` for ``connection_name`` (``None`` restores the default)."""
        if store is None:
            self._cache_stores.pop(connection_name, None)
        else:
            self._cache_stores[connection_name] = store

    def cache_store(self, connection_name: str = DEFAULT_CONNECTION) -> CacheStore:
        store = self._cache_stores.get(connection_name)
        if store is not None:
            return store
        config = self.config(connection_name)
        if config.has_cache_callbacks():
            return CallbackCacheStore(config, self._memory_cache)
        return self._memory_cache

    def clear_cache(self, table_name: str | None = None, connection_name: str = DEFAULT_CONNECTION) -> None:
        """Drop the connection's cached results."""
        self.cache_store(connection_name).clear(table_name, connection_name)
        logger.debug("Cleared query cache for connection %r", connection_name)

    # ------------------------------------------------------------------
    # Query log
    # ------------------------------------------------------------------

    def _log_query(
        self,
        query: str,
        parameters: Sequence[Any] | Mapping[str, Any],
        connection_name: str,
        elapsed: float,
    ) -> bool:
        config = self.config(connection_name)
        if not config.logging:
            logger.debug("Executed on %r in %.6fs: %s", connection_name, elapsed, query)
            return False

        bound_query = bind_for_display(query, parameters, self.get_driver(connection_name).quote)
        self.query_log.record(connection_name, bound_query)
        logger.debug("Executed on %r in %.6fs: %s", connection_name, elapsed, bound_query)
        if config.logger is not None:
            config.logger(bound_query, elapsed)
        return True

    def get_last_query(self, connection_name: str | None = None) -> str | None:
        return self.query_log.last(connection_name)

    def get_query_log(self, connection_name: str = DEFAULT_CONNECTION) -> list[str]:
        return self.query_log.entries(connection_name)

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    def for_table(self, table_name: str, connection_name: str = DEFAULT_CONNECTION) -> Record:
        """Start a query (or a new row) on ``table_name``."""
        from chainql.record import Record

        self.get_driver(connection_name)
        return Record(table_name, connection_name=connection_name, registry=self)

    def reset(self) -> None:
        """Return to a freshly-constructed state."""
        self.reset_config()
        self.reset_drivers()
        self._cache_stores.clear()
        self._memory_cache.clear_all()
        self.query_log.clear()
        self._last_statement = None


_default_registry = Registry()


def default_registry() -> Registry:
    """The process-wide registry used by the :mod:`chainql` module functions."""
    return _default_registry
