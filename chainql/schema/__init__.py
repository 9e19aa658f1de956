"""chainql configuration models."""
from chainql.schema.config import (
    DEFAULT_CONNECTION,
    ConnectionConfig,
    IdColumn,
    LimitStyle,
)

__all__ = [
    "DEFAULT_CONNECTION",
    "ConnectionConfig",
    "IdColumn",
    "LimitStyle",
]
