"""Database drivers: the contract chainql calls into, plus adapters."""
from __future__ import annotations

from chainql.driver.base import Driver, Params, Statement, quote_literal
from chainql.driver.sqlite import SQLiteDriver

__all__ = [
    "Driver",
    "Params",
    "Statement",
    "SQLiteDriver",
    "driver_from_connection_string",
    "quote_literal",
]


def driver_from_connection_string(connection_string: str) -> Driver:
    """Open a driver for ``connection_string``.

    ``sqlite:<path>`` (including ``sqlite::memory:``) opens the stdlib
    SQLite driver.  Anything else, including ``sqlite:///file.db``, is
    handed to SQLAlchemy as a database URL.
    """
    if connection_string.startswith("sqlite:") and not connection_string.startswith("sqlite://"):
        return SQLiteDriver.connect(connection_string[len("sqlite:"):] or ":memory:")

    from chainql.driver.alchemy import SQLAlchemyDriver

    return SQLAlchemyDriver.from_url(connection_string)
