"""Statement compilation: builder state → parameterized SQL.

``StatementCompiler`` is the top-level orchestrator.  For the read path it
runs the clause builders in a fixed order and joins the non-empty results
with single spaces; for the write path it renders INSERT, UPDATE and
DELETE statements from a :class:`~chainql.tracking.ChangeTracker`.

Clause order (SELECT)
---------------------
SELECT-start → JOIN → WHERE → GROUP BY → HAVING → ORDER BY → LIMIT → OFFSET

Every compile creates a fresh :class:`RuntimeContext`, so bound values
always line up with the ``?`` placeholders left to right, and compiling
unchanged state twice gives identical output.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from chainql.compile.base import CompiledSQL
from chainql.compile.clause_builders import (
    ConditionClauseBuilder,
    GroupByClauseBuilder,
    JoinClauseBuilder,
    LimitClauseBuilder,
    OffsetClauseBuilder,
    OrderByClauseBuilder,
    SelectClauseBuilder,
)
from chainql.compile.conditions import RuntimeContext, create_placeholders
from chainql.compile.context import CompilationContext
from chainql.compile.state import ConditionType, QueryState
from chainql.tracking import ChangeTracker


def join_if_not_empty(pieces: Sequence[str], glue: str = " ") -> str:
    """Join the pieces that are non-empty after trimming."""
    return glue.join(piece.strip() for piece in pieces if piece and piece.strip())


class StatementCompiler:
    """Compiles query state and row changes to parameterized SQL.

    Args:
        ctx: Dialect, quoter and limit style for the target connection.
    """

    def __init__(self, ctx: CompilationContext) -> None:
        self._ctx = ctx
        self._select_pipeline = (
            SelectClauseBuilder(ctx),
            JoinClauseBuilder(),
            ConditionClauseBuilder(ConditionType.WHERE),
            GroupByClauseBuilder(),
            ConditionClauseBuilder(ConditionType.HAVING),
            OrderByClauseBuilder(),
            LimitClauseBuilder(ctx),
            OffsetClauseBuilder(ctx),
        )

    # ------------------------------------------------------------------
    # Read path
    # ------------------------------------------------------------------

    def compile_select(self, state: QueryState) -> CompiledSQL:
        """Compile ``state`` to a SELECT statement.

        A raw query, when present, is returned verbatim with its own
        parameters and nothing else in ``state`` is consulted.
        """
        if state.raw_query is not None:
            raw = state.raw_query
            params = dict(raw.params) if isinstance(raw.params, dict) else list(raw.params)
            return CompiledSQL(sql=raw.sql, params=params)

        runtime = RuntimeContext()
        pieces = [builder.build(state, runtime) for builder in self._select_pipeline]
        return CompiledSQL(sql=join_if_not_empty(pieces), params=runtime.params)

    # ------------------------------------------------------------------
    # Write path
    # ------------------------------------------------------------------

    def compile_insert(
        self,
        table_name: str,
        changes: ChangeTracker,
        id_columns: Sequence[str],
    ) -> CompiledSQL:
        """``INSERT INTO <table> (<dirty fields>) VALUES (<placeholders>)``.

        Expression fields are written into the VALUES list as-is and left
        out of the parameters.
        """
        quote = self._ctx.quote
        field_list = ", ".join(quote(name) for name in changes.dirty_fields)
        placeholders, values = create_placeholders(changes.dirty_fields, changes.expr_fields)
        query = [
            "INSERT INTO",
            quote(table_name),
            f"({field_list})",
            "VALUES",
            f"({placeholders})",
        ]
        if self._ctx.dialect.returns_inserted_ids:
            query.append(f"RETURNING {quote(list(id_columns))}")
        return CompiledSQL(sql=" ".join(query), params=values)

    def compile_update(
        self,
        table_name: str,
        changes: ChangeTracker,
        id_columns: Sequence[str],
        id_values: Sequence[Any],
    ) -> CompiledSQL:
        """``UPDATE <table> SET … WHERE <id> = ? [AND <id2> = ?]``.

        The id values bind after the SET values.
        """
        quote = self._ctx.quote
        assignments: list[str] = []
        for name, value in changes.dirty_fields.items():
            rendered = str(value) if name in changes.expr_fields else "?"
            assignments.append(f"{quote(name)} = {rendered}")
        query = [
            f"UPDATE {quote(table_name)} SET",
            ", ".join(assignments),
            self._id_conditions(id_columns),
        ]
        return CompiledSQL(
            sql=" ".join(query),
            params=changes.bound_values() + list(id_values),
        )

    def compile_delete(
        self,
        table_name: str,
        id_columns: Sequence[str],
        id_values: Sequence[Any],
    ) -> CompiledSQL:
        """``DELETE FROM <table> WHERE <id> = ? [AND …]``."""
        query = [
            "DELETE FROM",
            self._ctx.quote(table_name),
            self._id_conditions(id_columns),
        ]
        return CompiledSQL(sql=" ".join(query), params=list(id_values))

    def compile_delete_many(self, state: QueryState) -> CompiledSQL:
        """``DELETE FROM <table> [WHERE …]`` from the accumulated WHERE list."""
        runtime = RuntimeContext()
        where = ConditionClauseBuilder(ConditionType.WHERE).build(state, runtime)
        sql = join_if_not_empty(["DELETE FROM", self._ctx.quote(state.table_name), where])
        return CompiledSQL(sql=sql, params=runtime.params)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _id_conditions(self, id_columns: Sequence[str]) -> str:
        terms = [f"{self._ctx.quote(column)} = ?" for column in id_columns]
        return f"WHERE {' AND '.join(terms)}"
