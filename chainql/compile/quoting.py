"""Identifier quoting.

Quotes table and column names for the active connection::

    quoter = IdentifierQuoter("`")
    quoter.quote("widget.name")       # `widget`.`name`
    quoter.quote(["id", "name"])      # `id`, `name`
    quoter.quote("*")                 # *
    quoter.quote("odd`name")          # `odd``name`
"""
from __future__ import annotations

from collections.abc import Sequence


class IdentifierQuoter:
    """Quotes identifiers with a single quote character.

    Args:
        quote_character: Character wrapped around each identifier part.
            Occurrences inside a part are doubled.
    """

    def __init__(self, quote_character: str) -> None:
        self.quote_character = quote_character

    def quote(self, identifier: str | Sequence[str]) -> str:
        """Quote one identifier, or a list of them joined with ``", "``.

        Dotted identifiers (``table.column``) have each part quoted
        separately.
        """
        if isinstance(identifier, str):
            return self.quote_one(identifier)
        return ", ".join(self.quote_one(part) for part in identifier)

    def quote_one(self, identifier: str) -> str:
        return ".".join(self.quote_part(part) for part in identifier.split("."))

    def quote_part(self, part: str) -> str:
        if part == "*":
            return part
        q = self.quote_character
        return f"{q}{part.replace(q, q + q)}{q}"
