"""Execution runtime: connection registry, query cache and query log."""
from chainql.runtime.cache import (
    CacheStore,
    CallbackCacheStore,
    InMemoryCacheStore,
    default_cache_key,
)
from chainql.runtime.query_log import QueryLog, bind_for_display
from chainql.runtime.registry import Registry, default_registry

__all__ = [
    "CacheStore",
    "CallbackCacheStore",
    "InMemoryCacheStore",
    "default_cache_key",
    "QueryLog",
    "bind_for_display",
    "Registry",
    "default_registry",
]
