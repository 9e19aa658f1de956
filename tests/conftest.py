"""Shared pytest fixtures for chainql unit and integration tests."""
from __future__ import annotations

from collections.abc import Iterator

import pytest

import chainql
from chainql.runtime.registry import Registry
from tests.fixtures import MockDriver


@pytest.fixture()
def driver() -> MockDriver:
    """Recording driver reporting the ``sqlite`` dialect (backticks, LIMIT)."""
    return MockDriver()


@pytest.fixture()
def registry(driver: MockDriver) -> Registry:
    """A private registry whose default connection uses ``driver`` with query logging on."""
    reg = Registry()
    reg.configure("logging", True)
    reg.set_driver(driver)
    return reg


@pytest.fixture()
def default_registry() -> Iterator[Registry]:
    """The process-wide registry, reset before and after the test."""
    reg = chainql.default_registry()
    reg.reset()
    yield reg
    reg.reset()
