"""Clause-level SQL builders.

Each class handles exactly one SQL clause and returns either the clause
text or an empty string.  Builders read :class:`QueryState` without
mutating it; the only side effect is appending bound values to the shared
:class:`RuntimeContext`, which is why the statement compiler calls each
builder exactly once per compile pass and in clause order.

Classes
-------
SelectClauseBuilder     — ``SELECT [TOP n] [DISTINCT] <cols> FROM <table> [<alias>]``
JoinClauseBuilder       — ``<op> JOIN <table> ON <constraint> ...``
ConditionClauseBuilder  — ``WHERE …`` / ``HAVING …``
GroupByClauseBuilder    — ``GROUP BY …``
OrderByClauseBuilder    — ``ORDER BY …``
LimitClauseBuilder      — ``LIMIT n`` / ``ROWS n``
OffsetClauseBuilder     — ``OFFSET n`` / ``TO n``
"""
from __future__ import annotations

from chainql.compile.conditions import RuntimeContext, compile_conditions
from chainql.compile.context import CompilationContext
from chainql.compile.state import ConditionType, QueryState
from chainql.schema.config import LimitStyle


class SelectClauseBuilder:
    """Builds the ``SELECT … FROM …`` head of the statement."""

    def __init__(self, ctx: CompilationContext) -> None:
        self._ctx = ctx

    def build(self, state: QueryState, runtime: RuntimeContext) -> str:
        fragment = "SELECT "
        if state.limit is not None and self._ctx.limit_style is LimitStyle.TOP_N:
            fragment += f"TOP {state.limit} "

        result_columns = ", ".join(state.result_columns)
        if state.distinct:
            result_columns = f"DISTINCT {result_columns}"

        fragment += f"{result_columns} FROM {self._ctx.quote(state.table_name)}"
        if state.table_alias is not None:
            fragment += f" {self._ctx.quote(state.table_alias)}"
        return fragment


class JoinClauseBuilder:
    """Joins the pre-rendered JOIN sources and binds raw-join parameters."""

    def build(self, state: QueryState, runtime: RuntimeContext) -> str:
        if not state.join_sources:
            return ""
        for source in state.join_sources:
            runtime.extend(source.values)
        return " ".join(source.sql for source in state.join_sources)


class ConditionClauseBuilder:
    """Builds the WHERE or HAVING clause.

    Args:
        kind: Which condition list to compile.
    """

    def __init__(self, kind: ConditionType) -> None:
        self._kind = kind

    def build(self, state: QueryState, runtime: RuntimeContext) -> str:
        return compile_conditions(self._kind, state.conditions(self._kind), runtime)


class GroupByClauseBuilder:
    def build(self, state: QueryState, runtime: RuntimeContext) -> str:
        if not state.group_by:
            return ""
        return f"GROUP BY {', '.join(state.group_by)}"


class OrderByClauseBuilder:
    def build(self, state: QueryState, runtime: RuntimeContext) -> str:
        if not state.order_by:
            return ""
        return f"ORDER BY {', '.join(state.order_by)}"


class LimitClauseBuilder:
    """Builds the trailing row limit.

    Nothing is emitted for ``TOP_N`` connections; the limit is already part
    of the SELECT head there.
    """

    def __init__(self, ctx: CompilationContext) -> None:
        self._ctx = ctx

    def build(self, state: QueryState, runtime: RuntimeContext) -> str:
        if state.limit is None or self._ctx.limit_style is not LimitStyle.LIMIT:
            return ""
        return f"{self._ctx.dialect.limit_keyword} {state.limit}"


class OffsetClauseBuilder:
    def __init__(self, ctx: CompilationContext) -> None:
        self._ctx = ctx

    def build(self, state: QueryState, runtime: RuntimeContext) -> str:
        if state.offset is None:
            return ""
        return f"{self._ctx.dialect.offset_keyword} {state.offset}"
