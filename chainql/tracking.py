"""Dirty-field change tracking for hydrated rows.

A :class:`ChangeTracker` holds a row's data plus the bookkeeping that
drives INSERT and UPDATE generation:

* ``dirty_fields``: fields changed since the last save, mapped to their
  pending value, in the order they were first changed;
* ``expr_fields``: the dirty fields whose value is raw SQL text that is
  written into the statement instead of being bound;
* ``is_new``: whether the row still has to be INSERTed.

``expr_fields`` is always a subset of ``dirty_fields``; both are cleared
together by :meth:`ChangeTracker.mark_clean`.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any


class ChangeTracker:
    """Row data with dirty/expression/new-state bookkeeping.

    Args:
        data: Initial column values.  A tracker built from a fetched row
            starts clean and not new.
    """

    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        self.data: dict[str, Any] = dict(data or {})
        self.dirty_fields: dict[str, Any] = {}
        self.expr_fields: set[str] = set()
        self.is_new = False

    def hydrate(self, data: Mapping[str, Any]) -> None:
        self.data = dict(data)

    def force_all_dirty(self) -> None:
        """Flag every current field as dirty so ``save`` writes all of them."""
        self.dirty_fields = dict(self.data)
        self.expr_fields &= set(self.dirty_fields)

    def set(self, field: str, value: Any, expr: bool = False) -> None:
        """Write ``value`` and flag ``field`` dirty.

        A plain set clears a previous expression flag on the same field.
        """
        self.data[field] = value
        self.dirty_fields[field] = value
        if expr:
            self.expr_fields.add(field)
        else:
            self.expr_fields.discard(field)

    def unset(self, field: str) -> None:
        self.data.pop(field, None)
        self.dirty_fields.pop(field, None)
        self.expr_fields.discard(field)

    def is_dirty(self, field: str) -> bool:
        return field in self.dirty_fields

    def has_changes(self) -> bool:
        return bool(self.dirty_fields) or bool(self.expr_fields)

    def bound_values(self) -> list[Any]:
        """Dirty values that bind to placeholders (expressions excluded)."""
        return [
            value
            for field, value in self.dirty_fields.items()
            if field not in self.expr_fields
        ]

    def mark_clean(self) -> None:
        self.dirty_fields = {}
        self.expr_fields = set()
