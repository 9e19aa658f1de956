"""The Record facade: fluent query builder and hydrated row in one object.

A Record is bound to a table and a connection.  Builder methods mutate its
query state and return the record, so calls chain; terminal methods compile
and execute the query::

    widget = (
        chainql.for_table("widget")
        .select("name")
        .where("id", 5)
        .find_one()
    )
    widget["name"] = "Sprocket"
    widget.save()

Every row returned by a terminal method is itself a Record, hydrated from
the row, neither dirty nor new, and ready to be edited and saved.  A new
row starts with :meth:`Record.create`.
"""
from __future__ import annotations

import math
from collections.abc import Iterable, Iterator, Mapping, Sequence
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from chainql.compile.base import CompiledSQL
from chainql.compile.builder import StatementCompiler
from chainql.compile.conditions import ConditionAccumulator
from chainql.compile.state import ConditionType, JoinSource, QueryState, RawQuery, as_raw_params
from chainql.errors import CompilationError, NullIdError
from chainql.runtime.registry import Registry, default_registry
from chainql.schema.config import DEFAULT_CONNECTION, IdColumn
from chainql.tracking import ChangeTracker

if TYPE_CHECKING:
    from chainql.result_set import ResultSet

WHERE = ConditionType.WHERE
HAVING = ConditionType.HAVING

#: ``(first_column, operator, second_column)`` or a raw ON expression.
JoinConstraint = str | Sequence[str]


def coerce_aggregate(value: Any) -> Any:
    """Normalise an aggregate result.

    ``None`` becomes ``0``; numeric values (including numeric strings) come
    back as ``int`` when integral and ``float`` otherwise; anything else is
    returned unchanged.
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            pass
    if not isinstance(value, (str, float, Decimal)):
        return value
    try:
        number = float(value)
    except ValueError:
        return value
    if not math.isfinite(number):
        return value
    if number.is_integer():
        return int(number)
    return number


class Record:
    """Fluent query builder bound to a table, and a single row of it.

    Normally obtained from :func:`chainql.for_table` rather than built
    directly.

    Args:
        table_name: Table the record reads from and writes to.
        data: Initial row data (not marked dirty).
        connection_name: Named connection to execute against.
        registry: Registry owning the connection; the process-wide default
            when omitted.
    """

    def __init__(
        self,
        table_name: str,
        data: Mapping[str, Any] | None = None,
        connection_name: str = DEFAULT_CONNECTION,
        registry: Registry | None = None,
    ) -> None:
        self._registry = registry if registry is not None else default_registry()
        self._connection_name = connection_name
        self._registry.config(connection_name)
        self._query = QueryState(table_name)
        self._changes = ChangeTracker(data)
        self._conditions = ConditionAccumulator(self._query, self._quote)
        self._instance_id_column: IdColumn | None = None

    @property
    def table_name(self) -> str:
        return self._query.table_name

    @property
    def connection_name(self) -> str:
        return self._connection_name

    def __repr__(self) -> str:
        return f"<Record {self.table_name!r} {self._changes.data!r}>"

    # ------------------------------------------------------------------
    # Creation and hydration
    # ------------------------------------------------------------------

    def create(self, data: Mapping[str, Any] | None = None) -> Record:
        """Mark this record as a new row to be INSERTed on :meth:`save`.

        When ``data`` is given the record is populated with it and every
        field is flagged dirty.
        """
        self._changes.is_new = True
        if data is not None:
            return self.hydrate(data).force_all_dirty()
        return self

    def hydrate(self, data: Mapping[str, Any] | None = None) -> Record:
        """Replace the row data wholesale, without touching dirty state."""
        self._changes.hydrate(data or {})
        return self

    def force_all_dirty(self) -> Record:
        self._changes.force_all_dirty()
        return self

    def use_id_column(self, id_column: IdColumn | None) -> Record:
        """Override the primary key column(s) for this record only.

        Takes precedence over ``id_column`` and ``id_column_overrides``.
        """
        if id_column is not None and not isinstance(id_column, str):
            id_column = list(id_column)
        self._instance_id_column = id_column
        return self

    def _create_instance_from_row(self, row: Mapping[str, Any]) -> Record:
        instance = self._registry.for_table(self.table_name, self._connection_name)
        instance.use_id_column(self._instance_id_column)
        return instance.hydrate(row)

    # ------------------------------------------------------------------
    # Terminal read operations
    # ------------------------------------------------------------------

    def find_one(self, id: Any = None) -> Record | None:
        """Execute the query expecting one row.

        Args:
            id: Optional primary key value (a mapping for compound keys);
                adds a primary key condition before executing.

        Returns:
            The first row as a Record, or ``None`` if there were no rows.
        """
        if id is not None:
            self.where_id_is(id)
        self.limit(1)
        rows = self._run()
        if not rows:
            return None
        return self._create_instance_from_row(rows[0])

    def find_many(self) -> list[Record] | ResultSet:
        """Execute the query and return every row as a Record.

        Returns a :class:`~chainql.result_set.ResultSet` instead of a list
        when the connection has ``return_result_sets`` enabled.
        """
        if self._registry.config(self._connection_name).return_result_sets:
            return self.find_result_set()
        return self._find_many()

    def _find_many(self) -> list[Record]:
        return [self._create_instance_from_row(row) for row in self._run()]

    def find_result_set(self) -> ResultSet:
        from chainql.result_set import ResultSet

        return ResultSet(self._find_many())

    def find_array(self) -> list[dict[str, Any]]:
        """Execute the query and return the raw rows as dicts."""
        return self._run()

    def count(self, column: str = "*") -> Any:
        return self._call_aggregate("count", column)

    def max(self, column: str) -> Any:
        return self._call_aggregate("max", column)

    def min(self, column: str) -> Any:
        return self._call_aggregate("min", column)

    def avg(self, column: str) -> Any:
        return self._call_aggregate("avg", column)

    def sum(self, column: str) -> Any:
        return self._call_aggregate("sum", column)

    def _call_aggregate(self, sql_function: str, column: str) -> Any:
        """Run ``<FUNC>(<column>) AS <func>`` as a single-row query.

        The result columns in effect before the call are restored
        afterwards.
        """
        alias = sql_function.lower()
        if column != "*":
            column = self._quote(column)

        saved_columns = list(self._query.result_columns)
        saved_default = self._query.using_default_result_columns
        self._query.result_columns = []
        self._query.using_default_result_columns = False
        self.select_expr(f"{sql_function.upper()}({column})", alias)
        try:
            result = self.find_one()
        finally:
            self._query.result_columns = saved_columns
            self._query.using_default_result_columns = saved_default

        if result is None:
            return 0
        return coerce_aggregate(result.get(alias))

    def compile_select(self) -> CompiledSQL:
        """Compile the current query without executing it."""
        return self._compiler().compile_select(self._query)

    def _run(self) -> list[dict[str, Any]]:
        compiled = self.compile_select()
        rows = self._registry.fetch_rows(
            compiled.sql,
            compiled.params,
            self.table_name,
            self._connection_name,
        )
        self._query.reset_result_columns()
        return rows

    def _compiler(self) -> StatementCompiler:
        return StatementCompiler(self._registry.compilation_context(self._connection_name))

    # ------------------------------------------------------------------
    # Raw queries, selection and joins
    # ------------------------------------------------------------------

    def raw_query(
        self,
        query: str,
        parameters: Sequence[Any] | Mapping[str, Any] | None = None,
    ) -> Record:
        """Use a literal SQL statement; every other builder call is ignored.

        Placeholders may be positional (``?``) with a list of parameters,
        or named (``:name``) with a mapping.
        """
        self._query.raw_query = RawQuery(query, as_raw_params(parameters))
        return self

    def table_alias(self, alias: str) -> Record:
        self._query.table_alias = alias
        return self

    def _add_result_column(self, expr: str, alias: str | None = None) -> Record:
        if alias is not None:
            expr = f"{expr} AS {self._quote(alias)}"
        self._query.add_result_column(expr)
        return self

    def select(self, column: str, alias: str | None = None) -> Record:
        """Add a quoted column to the result columns (replacing the default ``*``)."""
        return self._add_result_column(self._quote(column), alias)

    def select_expr(self, expr: str, alias: str | None = None) -> Record:
        """Add an unquoted expression to the result columns."""
        return self._add_result_column(expr, alias)

    def select_many(self, *columns: str | Sequence[str] | Mapping[str, str]) -> Record:
        """Add several columns at once.

        Accepts column names, lists of names and ``{alias: column}``
        mappings in any mix::

            record.select_many({"widget_name": "name"}, "price", ["colour", "size"])
        """
        for alias, column in _normalize_select_many(columns):
            self.select(column, alias)
        return self

    def select_many_expr(self, *columns: str | Sequence[str] | Mapping[str, str]) -> Record:
        for alias, column in _normalize_select_many(columns):
            self.select_expr(column, alias)
        return self

    def distinct(self) -> Record:
        self._query.distinct = True
        return self

    def _add_join_source(
        self,
        join_operator: str,
        table: str,
        constraint: JoinConstraint,
        table_alias: str | None = None,
    ) -> Record:
        join_operator = f"{join_operator} JOIN".strip()
        table = self._quote(table)
        if table_alias is not None:
            table = f"{table} {self._quote(table_alias)}"
        on = self._build_join_constraint(constraint)
        self._query.join_sources.append(JoinSource(f"{join_operator} {table} ON {on}"))
        return self

    def _build_join_constraint(self, constraint: JoinConstraint) -> str:
        if isinstance(constraint, str):
            return constraint
        if len(constraint) != 3:
            raise CompilationError(
                "Join constraint must be a string or a "
                f"(first_column, operator, second_column) triple, got {constraint!r}.",
                clause="JOIN",
            )
        first_column, operator, second_column = constraint
        return f"{self._quote(first_column)} {operator} {self._quote(second_column)}"

    def join(self, table: str, constraint: JoinConstraint, table_alias: str | None = None) -> Record:
        """Add a ``JOIN``.

        ``constraint`` is either ``(first_column, operator, second_column)``,
        whose columns are quoted, or a string used verbatim::

            record.join("user", ("user.id", "=", "widget.user_id"))
        """
        return self._add_join_source("", table, constraint, table_alias)

    def inner_join(self, table: str, constraint: JoinConstraint, table_alias: str | None = None) -> Record:
        return self._add_join_source("INNER", table, constraint, table_alias)

    def left_outer_join(self, table: str, constraint: JoinConstraint, table_alias: str | None = None) -> Record:
        return self._add_join_source("LEFT OUTER", table, constraint, table_alias)

    def right_outer_join(self, table: str, constraint: JoinConstraint, table_alias: str | None = None) -> Record:
        return self._add_join_source("RIGHT OUTER", table, constraint, table_alias)

    def full_outer_join(self, table: str, constraint: JoinConstraint, table_alias: str | None = None) -> Record:
        return self._add_join_source("FULL OUTER", table, constraint, table_alias)

    def raw_join(
        self,
        table: str,
        constraint: JoinConstraint,
        table_alias: str | None,
        parameters: Sequence[Any] = (),
    ) -> Record:
        """Add a join whose ``table`` part is written verbatim.

        Use it for sub-selects: ``table`` should include the join keyword,
        e.g. ``"JOIN (SELECT * FROM box WHERE colour = ?)"``.  ``parameters``
        bind ahead of any WHERE parameters.
        """
        if table_alias is not None:
            table = f"{table} {self._quote(table_alias)}"
        on = self._build_join_constraint(constraint)
        self._query.join_sources.append(JoinSource(f"{table} ON {on}", list(parameters)))
        return self

    # ------------------------------------------------------------------
    # WHERE
    # ------------------------------------------------------------------

    def where(self, column: str | Mapping[str, Any], value: Any = None) -> Record:
        """Add ``column = ?``; repeated calls are ANDed.

        A mapping adds one condition per entry and ``value`` is ignored.
        """
        return self.where_equal(column, value)

    def where_equal(self, column: str | Mapping[str, Any], value: Any = None) -> Record:
        self._conditions.add_simple_condition(WHERE, column, "=", value)
        return self

    def where_not_equal(self, column: str | Mapping[str, Any], value: Any = None) -> Record:
        self._conditions.add_simple_condition(WHERE, column, "!=", value)
        return self

    def where_id_is(self, id: Any) -> Record:
        """Add a primary key condition.

        For compound keys ``id`` is a mapping; only the key's columns are
        used and missing ones compare against ``NULL``.
        """
        id_column = self._get_id_column_name()
        if isinstance(id_column, list):
            return self.where(self._get_compound_id_column_values(id))
        return self.where(id_column, id)

    def where_id_in(self, ids: Iterable[Any]) -> Record:
        """Match any of several primary keys."""
        id_column = self._get_id_column_name()
        if isinstance(id_column, list):
            return self.where_any_is([self._get_compound_id_column_values(item) for item in ids])
        return self.where_in(id_column, list(ids))

    def where_any_is(
        self,
        values: Iterable[Mapping[str, Any]],
        operator: str | Mapping[str, str] = "=",
    ) -> Record:
        """Match rows satisfying any of several column groups.

        Each mapping is ANDed internally and the mappings are ORed::

            record.where_any_is(
                [{"name": "Joe", "age": 10}, {"name": "Fred", "age": 20}],
                {"age": ">"},
            )
            # (( `name` = ? AND `age` > ? ) OR ( `name` = ? AND `age` > ? ))

        A mapping ``operator`` gives per-column operators; columns it does
        not mention use ``=``.
        """
        self._conditions.add_any_of(WHERE, values, operator)
        return self

    def where_like(self, column: str | Mapping[str, Any], value: Any = None) -> Record:
        self._conditions.add_simple_condition(WHERE, column, "LIKE", value)
        return self

    def where_not_like(self, column: str | Mapping[str, Any], value: Any = None) -> Record:
        self._conditions.add_simple_condition(WHERE, column, "NOT LIKE", value)
        return self

    def where_gt(self, column: str | Mapping[str, Any], value: Any = None) -> Record:
        self._conditions.add_simple_condition(WHERE, column, ">", value)
        return self

    def where_lt(self, column: str | Mapping[str, Any], value: Any = None) -> Record:
        self._conditions.add_simple_condition(WHERE, column, "<", value)
        return self

    def where_gte(self, column: str | Mapping[str, Any], value: Any = None) -> Record:
        self._conditions.add_simple_condition(WHERE, column, ">=", value)
        return self

    def where_lte(self, column: str | Mapping[str, Any], value: Any = None) -> Record:
        self._conditions.add_simple_condition(WHERE, column, "<=", value)
        return self

    def where_in(self, column: str | Mapping[str, Any], values: Any = None) -> Record:
        self._conditions.add_placeholder_condition(WHERE, column, "IN", values, self._changes.expr_fields)
        return self

    def where_not_in(self, column: str | Mapping[str, Any], values: Any = None) -> Record:
        self._conditions.add_placeholder_condition(WHERE, column, "NOT IN", values, self._changes.expr_fields)
        return self

    def where_null(self, column: str | Sequence[str]) -> Record:
        self._conditions.add_no_value_condition(WHERE, column, "IS NULL")
        return self

    def where_not_null(self, column: str | Sequence[str]) -> Record:
        self._conditions.add_no_value_condition(WHERE, column, "IS NOT NULL")
        return self

    def where_raw(self, clause: str, parameters: Any = ()) -> Record:
        """Add a literal WHERE fragment with ``?`` placeholders."""
        self._conditions.add_condition(WHERE, clause, parameters)
        return self

    # ------------------------------------------------------------------
    # HAVING
    # ------------------------------------------------------------------

    def having(self, column: str | Mapping[str, Any], value: Any = None) -> Record:
        return self.having_equal(column, value)

    def having_equal(self, column: str | Mapping[str, Any], value: Any = None) -> Record:
        self._conditions.add_simple_condition(HAVING, column, "=", value)
        return self

    def having_not_equal(self, column: str | Mapping[str, Any], value: Any = None) -> Record:
        self._conditions.add_simple_condition(HAVING, column, "!=", value)
        return self

    def having_id_is(self, id: Any) -> Record:
        id_column = self._get_id_column_name()
        if isinstance(id_column, list):
            return self.having(self._get_compound_id_column_values(id))
        return self.having(id_column, id)

    def having_like(self, column: str | Mapping[str, Any], value: Any = None) -> Record:
        self._conditions.add_simple_condition(HAVING, column, "LIKE", value)
        return self

    def having_not_like(self, column: str | Mapping[str, Any], value: Any = None) -> Record:
        self._conditions.add_simple_condition(HAVING, column, "NOT LIKE", value)
        return self

    def having_gt(self, column: str | Mapping[str, Any], value: Any = None) -> Record:
        self._conditions.add_simple_condition(HAVING, column, ">", value)
        return self

    def having_lt(self, column: str | Mapping[str, Any], value: Any = None) -> Record:
        self._conditions.add_simple_condition(HAVING, column, "<", value)
        return self

    def having_gte(self, column: str | Mapping[str, Any], value: Any = None) -> Record:
        self._conditions.add_simple_condition(HAVING, column, ">=", value)
        return self

    def having_lte(self, column: str | Mapping[str, Any], value: Any = None) -> Record:
        self._conditions.add_simple_condition(HAVING, column, "<=", value)
        return self

    def having_in(self, column: str | Mapping[str, Any], values: Any = None) -> Record:
        self._conditions.add_placeholder_condition(HAVING, column, "IN", values, self._changes.expr_fields)
        return self

    def having_not_in(self, column: str | Mapping[str, Any], values: Any = None) -> Record:
        self._conditions.add_placeholder_condition(HAVING, column, "NOT IN", values, self._changes.expr_fields)
        return self

    def having_null(self, column: str | Sequence[str]) -> Record:
        self._conditions.add_no_value_condition(HAVING, column, "IS NULL")
        return self

    def having_not_null(self, column: str | Sequence[str]) -> Record:
        self._conditions.add_no_value_condition(HAVING, column, "IS NOT NULL")
        return self

    def having_raw(self, clause: str, parameters: Any = ()) -> Record:
        self._conditions.add_condition(HAVING, clause, parameters)
        return self

    # ------------------------------------------------------------------
    # GROUP BY, ORDER BY, LIMIT, OFFSET
    # ------------------------------------------------------------------

    def group_by(self, column: str) -> Record:
        self._query.group_by.append(self._quote(column))
        return self

    def group_by_expr(self, expr: str) -> Record:
        self._query.group_by.append(expr)
        return self

    def order_by_desc(self, column: str) -> Record:
        self._query.order_by.append(f"{self._quote(column)} DESC")
        return self

    def order_by_asc(self, column: str) -> Record:
        self._query.order_by.append(f"{self._quote(column)} ASC")
        return self

    def order_by_expr(self, clause: str) -> Record:
        self._query.order_by.append(clause)
        return self

    def limit(self, limit: int) -> Record:
        self._query.limit = limit
        return self

    def offset(self, offset: int) -> Record:
        self._query.offset = offset
        return self

    # ------------------------------------------------------------------
    # Row data
    # ------------------------------------------------------------------

    def get(self, key: str | Sequence[str]) -> Any:
        """Return a field value (``None`` when absent).

        A list of names returns a ``{name: value}`` dict.
        """
        if isinstance(key, str):
            return self._changes.data.get(key)
        return {column: self._changes.data.get(column) for column in key}

    def set(self, key: str | Mapping[str, Any], value: Any = None) -> Record:
        """Set one field, or several from a mapping, and flag them dirty."""
        return self._set_field(key, value, expr=False)

    def set_expr(self, key: str | Mapping[str, Any], value: Any = None) -> Record:
        """Set a field to raw SQL (e.g. ``NOW()``) written into the statement unbound."""
        return self._set_field(key, value, expr=True)

    def _set_field(self, key: str | Mapping[str, Any], value: Any, expr: bool) -> Record:
        pairs = key.items() if isinstance(key, Mapping) else [(key, value)]
        for field, field_value in pairs:
            self._changes.set(field, field_value, expr=expr)
        return self

    def as_dict(self, *keys: str) -> dict[str, Any]:
        """Return the row data, optionally restricted to ``keys``."""
        if not keys:
            return dict(self._changes.data)
        return {key: value for key, value in self._changes.data.items() if key in keys}

    def is_dirty(self, key: str) -> bool:
        return self._changes.is_dirty(key)

    def is_new(self) -> bool:
        return self._changes.is_new

    def __getitem__(self, key: str) -> Any:
        return self.get(key)

    def __setitem__(self, key: str, value: Any) -> None:
        self.set(key, value)

    def __delitem__(self, key: str) -> None:
        self._changes.unset(key)

    def __contains__(self, key: object) -> bool:
        return key in self._changes.data

    def __iter__(self) -> Iterator[str]:
        return iter(self._changes.data)

    def __len__(self) -> int:
        return len(self._changes.data)

    def __bool__(self) -> bool:
        # A record with no fields yet is still a record.
        return True

    # ------------------------------------------------------------------
    # Primary keys
    # ------------------------------------------------------------------

    def _get_id_column_name(self) -> IdColumn:
        if self._instance_id_column is not None:
            return self._instance_id_column
        config = self._registry.config(self._connection_name)
        if self.table_name in config.id_column_overrides:
            return config.id_column_overrides[self.table_name]
        return config.id_column

    def _id_columns(self) -> list[str]:
        id_column = self._get_id_column_name()
        return list(id_column) if isinstance(id_column, list) else [id_column]

    def _get_compound_id_column_values(self, value: Mapping[str, Any]) -> dict[str, Any]:
        return {column: value.get(column) for column in self._id_columns()}

    def id(self, disallow_null: bool = False) -> Any:
        """Return the primary key value (a dict for compound keys).

        Raises:
            NullIdError: If ``disallow_null`` is set and the key, or any
                part of a compound key, is ``None``.
        """
        id_value = self.get(self._get_id_column_name())
        if disallow_null:
            if isinstance(id_value, dict):
                missing = [column for column, part in id_value.items() if part is None]
                if missing:
                    raise NullIdError(self.table_name, missing)
            elif id_value is None:
                raise NullIdError(self.table_name, self._id_columns())
        return id_value

    def count_null_id_columns(self) -> int:
        id_value = self.id()
        if isinstance(id_value, dict):
            return sum(1 for part in id_value.values() if part is None)
        return 1 if id_value is None else 0

    def _id_values(self) -> list[Any]:
        id_value = self.id(disallow_null=True)
        if isinstance(id_value, dict):
            return list(id_value.values())
        return [id_value]

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def save(self) -> bool:
        """INSERT a new record or UPDATE the dirty fields of an existing one.

        An existing record with nothing dirty is a no-op.  After an INSERT
        any still-null id column is filled from the database: the returned
        row on dialects with ``RETURNING``, otherwise the first id column
        receives the driver's last insert id.

        Raises:
            NullIdError: Updating a record whose primary key is null.
        """
        changes = self._changes
        compiler = self._compiler()
        id_columns = self._id_columns()

        if not changes.is_new:
            if not changes.has_changes():
                return True
            compiled = compiler.compile_update(self.table_name, changes, id_columns, self._id_values())
        else:
            compiled = compiler.compile_insert(self.table_name, changes, id_columns)

        statement = self._registry.execute(compiled.sql, compiled.params, self._connection_name)
        self._auto_clear_cache()

        if changes.is_new:
            changes.is_new = False
            if self.count_null_id_columns() != 0:
                if self._registry.dialect(self._connection_name).returns_inserted_ids:
                    row = statement.fetch_row()
                    if row is not None:
                        changes.data.update(row)
                else:
                    driver = self._registry.get_driver(self._connection_name)
                    changes.data[id_columns[0]] = driver.last_insert_id()

        changes.mark_clean()
        return True

    def delete(self) -> bool:
        """DELETE this row by primary key.

        Raises:
            NullIdError: If the primary key is null.
        """
        compiled = self._compiler().compile_delete(self.table_name, self._id_columns(), self._id_values())
        self._registry.execute(compiled.sql, compiled.params, self._connection_name)
        self._auto_clear_cache()
        return True

    def delete_many(self) -> bool:
        """DELETE every row matching the accumulated WHERE conditions."""
        compiled = self._compiler().compile_delete_many(self._query)
        self._registry.execute(compiled.sql, compiled.params, self._connection_name)
        self._auto_clear_cache()
        return True

    def _auto_clear_cache(self) -> None:
        if self._registry.config(self._connection_name).caching_auto_clear:
            self._registry.clear_cache(self.table_name, self._connection_name)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _quote(self, identifier: str | Sequence[str]) -> str:
        return self._registry.quoter(self._connection_name).quote(identifier)


def _normalize_select_many(
    columns: Iterable[str | Sequence[str] | Mapping[str, str]],
) -> list[tuple[str | None, str]]:
    """Flatten select-many arguments into ``(alias, column)`` pairs."""
    normalized: list[tuple[str | None, str]] = []
    for column in columns:
        if isinstance(column, str):
            normalized.append((None, column))
        elif isinstance(column, Mapping):
            normalized.extend((alias, name) for alias, name in column.items())
        else:
            normalized.extend((None, name) for name in column)
    return normalized
