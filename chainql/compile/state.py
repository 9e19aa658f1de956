"""Mutable query-builder state owned by one Record.

Chained builder calls append to a :class:`QueryState`; compilation reads it
without mutating it, so the same state compiles to the same SQL and
parameters every time.
"""
from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ConditionType(str, Enum):
    """The two condition lists a query keeps."""

    WHERE = "where"
    HAVING = "having"

    @property
    def keyword(self) -> str:
        return self.value.upper()


@dataclass
class Condition:
    """One SQL fragment and the values bound to its placeholders."""

    fragment: str
    values: list[Any] = field(default_factory=list)


@dataclass
class JoinSource:
    """A pre-rendered JOIN fragment.

    ``values`` is only non-empty for raw joins with bound parameters; they
    bind ahead of every WHERE value because JOIN precedes WHERE.
    """

    sql: str
    values: list[Any] = field(default_factory=list)


@dataclass
class RawQuery:
    """A literal statement that bypasses every other piece of builder state."""

    sql: str
    params: list[Any] | dict[str, Any] = field(default_factory=list)


def as_value_list(values: Any) -> list[Any]:
    """Coerce ``values`` to a list; scalars become a one-element list."""
    if isinstance(values, (list, tuple)):
        return list(values)
    return [values]


def as_raw_params(params: Sequence[Any] | Mapping[str, Any] | None) -> list[Any] | dict[str, Any]:
    if params is None:
        return []
    if isinstance(params, Mapping):
        return dict(params)
    return list(params)


@dataclass
class QueryState:
    """Accumulated clauses for one SELECT (or DELETE-many) statement.

    Attributes:
        table_name: Table the record is bound to.
        table_alias: Optional alias rendered after the table name.
        result_columns: Rendered result columns; ``["*"]`` until the first
            explicit selection replaces it.
        using_default_result_columns: ``True`` while ``result_columns`` is
            still the implicit ``*``.
        distinct: Emit ``SELECT DISTINCT``.
        join_sources: Rendered JOIN fragments in call order.
        where_conditions: WHERE fragments in call order.
        having_conditions: HAVING fragments in call order.
        group_by: Rendered GROUP BY entries.
        order_by: Rendered ORDER BY entries.
        limit: Row limit, or ``None``.
        offset: Row offset, or ``None``.
        raw_query: When set, compiled verbatim instead of everything above.
    """

    table_name: str
    table_alias: str | None = None
    result_columns: list[str] = field(default_factory=lambda: ["*"])
    using_default_result_columns: bool = True
    distinct: bool = False
    join_sources: list[JoinSource] = field(default_factory=list)
    where_conditions: list[Condition] = field(default_factory=list)
    having_conditions: list[Condition] = field(default_factory=list)
    group_by: list[str] = field(default_factory=list)
    order_by: list[str] = field(default_factory=list)
    limit: int | None = None
    offset: int | None = None
    raw_query: RawQuery | None = None

    def conditions(self, kind: ConditionType) -> list[Condition]:
        if kind is ConditionType.WHERE:
            return self.where_conditions
        return self.having_conditions

    @property
    def source_name(self) -> str:
        """Name that qualifies this table's columns: the alias if set."""
        return self.table_alias if self.table_alias is not None else self.table_name

    def add_result_column(self, expr: str) -> None:
        if self.using_default_result_columns:
            self.result_columns = [expr]
            self.using_default_result_columns = False
        else:
            self.result_columns.append(expr)

    def reset_result_columns(self) -> None:
        self.result_columns = ["*"]
        self.using_default_result_columns = True
