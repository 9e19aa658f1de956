"""SQLAlchemy driver tests (skipped when SQLAlchemy is not installed)."""

from __future__ import annotations

import pytest

sqlalchemy = pytest.importorskip("sqlalchemy", reason="sqlalchemy required for the SQLAlchemy driver")

from chainql.driver import driver_from_connection_string  # noqa: E402
from chainql.driver.alchemy import SQLAlchemyDriver  # noqa: E402
from chainql.runtime.registry import Registry  # noqa: E402


class _StyledDriver(SQLAlchemyDriver):
    """Reports a fixed DB-API paramstyle so placeholder rewriting can be checked."""

    style = "qmark"

    @property
    def paramstyle(self) -> str:
        return self.style


def _styled(style: str) -> _StyledDriver:
    driver = _StyledDriver(sqlalchemy.create_engine("sqlite://"))
    driver.style = style
    return driver


@pytest.fixture()
def db() -> Registry:
    registry = Registry()
    registry.set_driver(SQLAlchemyDriver(sqlalchemy.create_engine("sqlite://")))
    registry.configure("logging", True)
    registry.raw_execute("CREATE TABLE widget (id INTEGER PRIMARY KEY, name TEXT, price REAL)")
    return registry


def test_dialect_name_drives_autodetection(db: Registry):
    assert db.get_driver().dialect_name == "sqlite"
    assert db.get_config("identifier_quote_character") == "`"


def test_round_trip(db: Registry):
    widget = db.for_table("widget").create({"name": "Sprocket", "price": 2.5})
    widget.save()
    assert widget.id() == 1

    widget["price"] = 3
    widget.save()

    reloaded = db.for_table("widget").find_one(1)
    assert reloaded.as_dict() == {"id": 1, "name": "Sprocket", "price": 3.0}
    assert db.for_table("widget").count() == 1


def test_named_parameters_pass_through(db: Registry):
    db.raw_execute("INSERT INTO widget (name) VALUES (:name)", {"name": "Cog"})
    rows = db.for_table("widget").raw_query("SELECT name FROM widget WHERE name = :name", {"name": "Cog"}).find_array()
    assert rows == [{"name": "Cog"}]


def test_connection_string_uses_sqlalchemy_for_urls():
    driver = driver_from_connection_string("sqlite://")
    assert isinstance(driver, SQLAlchemyDriver)


def test_translate_format_style_escapes_percent():
    sql, params = _styled("format")._translate("SELECT * FROM t WHERE a LIKE '50%' AND b = ? AND c = '?'", [1])
    assert sql == "SELECT * FROM t WHERE a LIKE '50%%' AND b = %s AND c = '?'"
    assert params == (1,)


def test_translate_numeric_style():
    sql, params = _styled("numeric")._translate("SELECT * FROM t WHERE a = ? AND b = ?", [1, 2])
    assert sql == "SELECT * FROM t WHERE a = :1 AND b = :2"
    assert params == (1, 2)


def test_translate_named_style():
    sql, params = _styled("named")._translate("SELECT * FROM t WHERE a = ? AND b = ?", [1, 2])
    assert sql == "SELECT * FROM t WHERE a = :p1 AND b = :p2"
    assert params == {"p1": 1, "p2": 2}


def test_translate_qmark_unchanged():
    sql, params = _styled("qmark")._translate("SELECT ?", [1])
    assert sql == "SELECT ?"
    assert params == (1,)
