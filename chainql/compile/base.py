"""Compiler abstractions: CompiledSQL and the SQLDialect ABC.

The Template Method pattern (GoF) is used:
- ``StatementCompiler`` owns the clause-assembly algorithm.
- ``SQLDialect`` subclasses override the dialect-specific steps (identifier
  quote character, LIMIT vs TOP placement, LIMIT/OFFSET keywords and the
  ``RETURNING`` clause on INSERT).
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar

from chainql.schema.config import LimitStyle


@dataclass
class CompiledSQL:
    """The output of a successful compilation.

    Attributes:
        sql: The compiled SQL string with positional ``?`` placeholders (or
            whatever placeholders a raw query was written with).
        params: Values bound to the placeholders, in placeholder order.  A
            raw query may carry a mapping of named parameters instead.
    """

    sql: str
    params: list[Any] | dict[str, Any] = field(default_factory=list)

    def positional_params(self) -> list[Any]:
        """Return the parameters that bind to ``?`` placeholders."""
        if isinstance(self.params, dict):
            return []
        return list(self.params)


class SQLDialect(ABC):
    """Abstract base for dialect strategies.

    Subclasses set class attributes only; behaviour shared by every dialect
    lives here.  Register a subclass with
    :meth:`chainql.compile.registry.DialectFactory.register`.
    """

    #: Driver names (as reported by ``Driver.dialect_name``) handled here.
    driver_names: ClassVar[tuple[str, ...]] = ()

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the canonical dialect name."""

    @property
    @abstractmethod
    def quote_character(self) -> str:
        """Return the default identifier quote character."""

    @property
    def limit_style(self) -> LimitStyle:
        """Return where the row limit is written."""
        return LimitStyle.LIMIT

    @property
    def limit_keyword(self) -> str:
        return "LIMIT"

    @property
    def offset_keyword(self) -> str:
        return "OFFSET"

    @property
    def returns_inserted_ids(self) -> bool:
        """Whether INSERT statements end with ``RETURNING <id columns>``.

        Dialects that return the generated row hand back every id column at
        once, which is how compound generated keys get populated.
        """
        return False

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
