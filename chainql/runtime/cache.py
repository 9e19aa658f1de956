"""Query result cache.

Read results are cached per connection under a key derived from the
compiled SQL and its parameters.  The default store keeps everything in
memory for the life of the process::

    connection name → cache key → list of row dicts

Callers that want a shared or bounded cache can either configure the four
callbacks on the connection (``create_cache_key``, ``check_query_cache``,
``cache_query_result``, ``clear_cache``), which
:class:`CallbackCacheStore` adapts, or register their own
:class:`CacheStore` with :meth:`Registry.set_cache_store`.
"""
from __future__ import annotations

import hashlib
import json
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any

from chainql.schema.config import ConnectionConfig

Rows = list[dict[str, Any]]


def _encode_parameters(parameters: Sequence[Any] | Mapping[str, Any]) -> str:
    # repr keeps None, False, "" and 0 apart; the JSON array keeps
    # separators inside values from merging neighbouring parameters.
    if isinstance(parameters, Mapping):
        return json.dumps({str(name): repr(value) for name, value in parameters.items()}, sort_keys=True)
    return json.dumps([repr(value) for value in parameters])


def default_cache_key(query: str, parameters: Sequence[Any] | Mapping[str, Any]) -> str:
    """SHA1 of ``"<query>:<encoded parameters>"``.

    Parameters are encoded as a JSON array of their ``repr`` (a JSON object
    keyed by name for named parameters), so two parameter lists only share
    a key when they hold the same values.
    """
    key = f"{query}:{_encode_parameters(parameters)}"
    return hashlib.sha1(key.encode("utf-8")).hexdigest()


class CacheStore(ABC):
    """Storage for cached read results, scoped by connection name."""

    def make_key(
        self,
        query: str,
        parameters: Sequence[Any] | Mapping[str, Any],
        table_name: str | None,
        connection_name: str,
    ) -> Any:
        return default_cache_key(query, parameters)

    @abstractmethod
    def get(self, key: Any, table_name: str | None, connection_name: str) -> Rows | None:
        """Return the cached rows for ``key``, or ``None`` on a miss."""

    @abstractmethod
    def set(self, key: Any, rows: Rows, table_name: str | None, connection_name: str) -> None:
        """Store ``rows`` under ``key``."""

    @abstractmethod
    def clear(self, table_name: str | None, connection_name: str) -> None:
        """Drop every entry cached for ``connection_name``."""


class InMemoryCacheStore(CacheStore):
    """Process-lifetime dict cache; no eviction."""

    def __init__(self) -> None:
        self._entries: dict[str, dict[Any, Rows]] = {}

    def get(self, key: Any, table_name: str | None, connection_name: str) -> Rows | None:
        return self._entries.get(connection_name, {}).get(key)

    def set(self, key: Any, rows: Rows, table_name: str | None, connection_name: str) -> None:
        self._entries.setdefault(connection_name, {})[key] = rows

    def clear(self, table_name: str | None, connection_name: str) -> None:
        self._entries.pop(connection_name, None)

    def clear_all(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return sum(len(entries) for entries in self._entries.values())


class CallbackCacheStore(CacheStore):
    """Adapts the cache callbacks configured on a connection.

    Each operation uses its callback when one is configured and the
    ``fallback`` store otherwise.  ``clear`` always clears the fallback
    first and then calls the ``clear_cache`` callback.

    Args:
        config: The connection's configuration.
        fallback: Store used for operations without a callback.
    """

    def __init__(self, config: ConnectionConfig, fallback: CacheStore) -> None:
        self._config = config
        self._fallback = fallback

    def make_key(
        self,
        query: str,
        parameters: Sequence[Any] | Mapping[str, Any],
        table_name: str | None,
        connection_name: str,
    ) -> Any:
        if self._config.create_cache_key is not None:
            return self._config.create_cache_key(query, parameters, table_name, connection_name)
        return self._fallback.make_key(query, parameters, table_name, connection_name)

    def get(self, key: Any, table_name: str | None, connection_name: str) -> Rows | None:
        if self._config.check_query_cache is not None:
            return self._config.check_query_cache(key, table_name, connection_name)
        return self._fallback.get(key, table_name, connection_name)

    def set(self, key: Any, rows: Rows, table_name: str | None, connection_name: str) -> None:
        if self._config.cache_query_result is not None:
            self._config.cache_query_result(key, rows, table_name, connection_name)
            return
        self._fallback.set(key, rows, table_name, connection_name)

    def clear(self, table_name: str | None, connection_name: str) -> None:
        self._fallback.clear(table_name, connection_name)
        if self._config.clear_cache is not None:
            self._config.clear_cache(table_name, connection_name)
