"""A list of records that forwards method calls to each of them."""
from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING, Any, overload

if TYPE_CHECKING:
    from chainql.record import Record


class ResultSet:
    """Records returned by :meth:`Record.find_result_set`.

    Behaves like a list and adds bulk operations::

        widgets = chainql.for_table("widget").where("colour", "red").find_result_set()
        widgets.call("set", "colour", "blue").call("save")

    Args:
        results: The records, in query order.
    """

    def __init__(self, results: Iterable[Record] = ()) -> None:
        self._results: list[Record] = list(results)

    def get_results(self) -> list[Record]:
        return self._results

    def set_results(self, results: Iterable[Record]) -> None:
        self._results = list(results)

    def as_list(self) -> list[Record]:
        """A shallow copy of the contained records."""
        return list(self._results)

    def call(self, method: str, *args: Any, **kwargs: Any) -> ResultSet:
        """Call ``method`` on every record in order and return the set.

        Raises:
            AttributeError: If the records have no such method.
        """
        for record in self._results:
            getattr(record, method)(*args, **kwargs)
        return self

    def __len__(self) -> int:
        return len(self._results)

    def __iter__(self) -> Iterator[Record]:
        return iter(self._results)

    @overload
    def __getitem__(self, index: int) -> Record: ...

    @overload
    def __getitem__(self, index: slice) -> list[Record]: ...

    def __getitem__(self, index: int | slice) -> Record | list[Record]:
        return self._results[index]

    def __setitem__(self, index: int, record: Record) -> None:
        self._results[index] = record

    def __delitem__(self, index: int | slice) -> None:
        del self._results[index]

    def __repr__(self) -> str:
        return f"<ResultSet of {len(self._results)} record(s)>"
