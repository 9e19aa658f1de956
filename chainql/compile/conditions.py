"""WHERE / HAVING condition accumulator.

Conditions are stored as ``(fragment, values)`` pairs in call order and
compiled into one ``AND``-joined clause.  Values are appended to the shared
:class:`RuntimeContext` in exactly the order their fragments appear, which
keeps positional ``?`` placeholders aligned with the bound values.

``ConditionAccumulator`` covers the four shapes of condition the record
API produces:

* simple:       ``"<col> <op> ?"`` with one value
* placeholder:  ``"<col> IN (?, ?, ?)"`` with one value per placeholder
* no-value:     ``"<col> IS NULL"``
* any-of:       ``"(( <a> = ? AND <b> = ? ) OR ( <a> = ? ))"``
"""
from __future__ import annotations

from collections.abc import Callable, Collection, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from chainql.compile.state import Condition, ConditionType, QueryState, as_value_list

#: Quotes an identifier (or list of identifiers) for the active connection.
QuoteFn = Callable[[Any], str]


@dataclass
class RuntimeContext:
    """Accumulates positional parameters during a single compilation run.

    A fresh instance is created for every compile so that compiling the
    same state twice yields the same parameter list.
    """

    params: list[Any] = field(default_factory=list)

    def extend(self, values: Iterable[Any]) -> None:
        self.params.extend(values)


def compile_conditions(kind: ConditionType, conditions: Sequence[Condition], runtime: RuntimeContext) -> str:
    """Render ``conditions`` as a WHERE or HAVING clause.

    Returns an empty string when there are no conditions.  Otherwise
    appends every condition's values to ``runtime`` (in list order) and
    returns ``"<KEYWORD> <f1> AND <f2> ..."``.  Call at most once per
    compile pass.
    """
    if not conditions:
        return ""
    fragments: list[str] = []
    for condition in conditions:
        fragments.append(condition.fragment)
        runtime.extend(condition.values)
    return f"{kind.keyword} {' AND '.join(fragments)}"


def create_placeholders(
    fields: Mapping[Any, Any] | Sequence[Any],
    expr_fields: Collection[Any] = (),
) -> tuple[str, list[Any]]:
    """Build a ``"?, ?, ?"`` placeholder list.

    Entries whose key (the field name for a mapping, the position for a
    sequence) is in ``expr_fields`` are written into the SQL verbatim
    instead of being bound.

    Returns:
        The placeholder text and the values that still need binding.
    """
    items = fields.items() if isinstance(fields, Mapping) else enumerate(fields)
    placeholders: list[str] = []
    bound: list[Any] = []
    for key, value in items:
        if key in expr_fields:
            placeholders.append(str(value))
        else:
            placeholders.append("?")
            bound.append(value)
    return ", ".join(placeholders), bound


class ConditionAccumulator:
    """Appends conditions to a :class:`QueryState`.

    Args:
        state: The builder state whose condition lists are extended.
        quote: Identifier quoting function for the active connection.
    """

    def __init__(self, state: QueryState, quote: QuoteFn) -> None:
        self._state = state
        self._quote = quote

    def add_condition(self, kind: ConditionType, fragment: str, values: Any = ()) -> None:
        """Append a raw fragment; ``values`` may be a scalar or a list."""
        self._state.conditions(kind).append(Condition(fragment, as_value_list(values)))

    def add_simple_condition(
        self,
        kind: ConditionType,
        column: str | Mapping[str, Any],
        operator: str,
        value: Any = None,
    ) -> None:
        """Append ``"<column> <operator> ?"`` for one column or a mapping.

        Once the query has a JOIN, unqualified column names are prefixed
        with the table alias (or table name) so they stay unambiguous.
        """
        pairs = column.items() if isinstance(column, Mapping) else [(column, value)]
        for name, val in pairs:
            if self._state.join_sources and "." not in name:
                name = f"{self._state.source_name}.{name}"
            self.add_condition(kind, f"{self._quote(name)} {operator} ?", val)

    def add_placeholder_condition(
        self,
        kind: ConditionType,
        column: str | Mapping[str, Any],
        operator: str,
        values: Any = None,
        expr_fields: Collection[Any] = (),
    ) -> None:
        """Append ``"<column> <operator> (?, ?, ...)"`` (``IN``, ``NOT IN``)."""
        data = column if isinstance(column, Mapping) else {column: values}
        for name, vals in data.items():
            if isinstance(vals, (str, bytes)) or not isinstance(vals, Iterable):
                vals = as_value_list(vals)
            elif not isinstance(vals, (Mapping, list, tuple)):
                vals = list(vals)
            placeholders, bound = create_placeholders(vals, expr_fields)
            self.add_condition(kind, f"{self._quote(name)} {operator} ({placeholders})", bound)

    def add_no_value_condition(
        self,
        kind: ConditionType,
        column: str | Sequence[str],
        operator: str,
    ) -> None:
        """Append ``"<column> <operator>"`` (``IS NULL``, ``IS NOT NULL``)."""
        columns = [column] if isinstance(column, str) else list(column)
        for name in columns:
            self.add_condition(kind, f"{self._quote(name)} {operator}")

    def add_any_of(
        self,
        kind: ConditionType,
        groups: Iterable[Mapping[str, Any]],
        operator: str | Mapping[str, str] = "=",
    ) -> None:
        """Append one OR-of-ANDs fragment.

        Each mapping in ``groups`` becomes an AND group; the groups are ORed.
        A string ``operator`` applies to every column; a mapping supplies
        per-column operators and columns it does not mention use ``=``.
        """
        parts: list[str] = ["(("]
        values: list[Any] = []
        for index, group in enumerate(groups):
            if index:
                parts.append(") OR (")
            for position, (name, value) in enumerate(group.items()):
                if isinstance(operator, str):
                    op = operator
                else:
                    op = operator.get(name, "=")
                if position:
                    parts.append("AND")
                parts.append(self._quote(name))
                parts.append(f"{op} ?")
                values.append(value)
        parts.append("))")
        self.add_condition(kind, " ".join(parts), values)
