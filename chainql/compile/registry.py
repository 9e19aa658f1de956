"""Dialect registry (Open/Closed Principle).

Quote-character and limit-style autodetection is a lookup in this table
rather than a ``switch`` over driver names, so supporting another driver
means registering one class::

    from chainql.compile.base import SQLDialect
    from chainql.compile.registry import DialectFactory

    @DialectFactory.register("oracle", "oci")
    class OracleDialect(SQLDialect):
        ...

Driver names that were never registered resolve to
:class:`~chainql.compile.generic.GenericDialect`.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import ClassVar

from chainql.compile.base import SQLDialect
from chainql.compile.firebird import FirebirdDialect
from chainql.compile.generic import GenericDialect
from chainql.compile.mysql import MySQLDialect
from chainql.compile.postgres import PostgresDialect
from chainql.compile.sqlite import SQLiteDialect
from chainql.compile.sqlserver import SQLServerDialect, SybaseDialect


class DialectFactory:
    """Registry mapping driver names to :class:`SQLDialect` classes.

    Example::

        dialect = DialectFactory.create("pgsql")
        dialect.quote_character  # '"'
    """

    _dialects: ClassVar[dict[str, type[SQLDialect]]] = {}

    @classmethod
    def register(cls, *names: str) -> Callable[[type[SQLDialect]], type[SQLDialect]]:
        """Decorator that registers a dialect class under one or more names.

        Args:
            names: Driver names to register.  When empty, the class's
                ``driver_names`` attribute is used.

        Returns:
            A decorator that registers and returns the dialect class.
        """

        def decorator(dialect_cls: type[SQLDialect]) -> type[SQLDialect]:
            cls.register_class(dialect_cls, *names)
            return dialect_cls

        return decorator

    @classmethod
    def register_class(cls, dialect_cls: type[SQLDialect], *names: str) -> None:
        """Register a dialect class without using the decorator form."""
        for name in names or dialect_cls.driver_names:
            cls._dialects[name.lower()] = dialect_cls

    @classmethod
    def create(cls, driver_name: str) -> SQLDialect:
        """Instantiate the dialect for ``driver_name``.

        Args:
            driver_name: Name reported by the driver (case-insensitive).

        Returns:
            A fresh :class:`SQLDialect`; :class:`GenericDialect` when the
            name is not registered.
        """
        dialect_cls = cls._dialects.get(driver_name.lower())
        if dialect_cls is None:
            return GenericDialect(driver_name)
        return dialect_cls()

    @classmethod
    def registered_names(cls) -> list[str]:
        """Return the sorted list of registered driver names."""
        return sorted(cls._dialects)


for _builtin in (
    MySQLDialect,
    SQLiteDialect,
    PostgresDialect,
    SQLServerDialect,
    SybaseDialect,
    FirebirdDialect,
):
    DialectFactory.register_class(_builtin)
