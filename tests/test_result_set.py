"""ResultSet tests."""

from __future__ import annotations

import pytest

from chainql.result_set import ResultSet
from chainql.runtime.registry import Registry
from tests.fixtures import MockDriver


def _widgets(registry: Registry, driver: MockDriver) -> ResultSet:
    driver.queue({"id": 1, "colour": "red"}, {"id": 2, "colour": "green"})
    return registry.for_table("widget").find_result_set()


def test_list_behaviour(registry: Registry, driver: MockDriver):
    widgets = _widgets(registry, driver)
    assert len(widgets) == 2
    assert widgets[0].id() == 1
    assert [w.id() for w in widgets[0:2]] == [1, 2]
    assert [w["colour"] for w in widgets] == ["red", "green"]


def test_call_forwards_to_every_record(registry: Registry, driver: MockDriver):
    widgets = _widgets(registry, driver)
    assert widgets.call("set", "colour", "blue") is widgets
    assert all(w.is_dirty("colour") for w in widgets)

    widgets.call("save")

    assert [sql for sql, _ in driver.executed[1:]] == [
        "UPDATE `widget` SET `colour` = ? WHERE `id` = ?",
        "UPDATE `widget` SET `colour` = ? WHERE `id` = ?",
    ]
    assert [params for _, params in driver.executed[1:]] == [["blue", 1], ["blue", 2]]


def test_call_unknown_method(registry: Registry, driver: MockDriver):
    with pytest.raises(AttributeError):
        _widgets(registry, driver).call("explode")


def test_get_and_set_results(registry: Registry, driver: MockDriver):
    widgets = _widgets(registry, driver)
    copy = widgets.as_list()
    copy.pop()
    assert len(widgets) == 2

    widgets.set_results(copy)
    assert widgets.get_results() == copy
    assert len(widgets) == 1


def test_empty_result_set(registry: Registry):
    widgets = registry.for_table("widget").find_result_set()
    assert len(widgets) == 0
    assert list(widgets) == []
    assert repr(widgets) == "<ResultSet of 0 record(s)>"


def test_item_assignment_and_deletion(registry: Registry, driver: MockDriver):
    widgets = _widgets(registry, driver)
    replacement = registry.for_table("widget").create({"id": 3, "colour": "blue"})

    widgets[0] = replacement
    assert [w.id() for w in widgets] == [3, 2]

    del widgets[1]
    assert widgets.get_results() == [replacement]
