"""Record builder and read-path tests against the recording driver."""

from __future__ import annotations

import pytest

from chainql.errors import CompilationError
from chainql.record import Record, coerce_aggregate
from chainql.result_set import ResultSet
from chainql.runtime.registry import Registry
from tests.fixtures import MockDriver


# ---------------------------------------------------------------------------
# Builder → SQL
# ---------------------------------------------------------------------------


def test_select_name_by_id_scenario(registry: Registry, driver: MockDriver):
    registry.for_table("widget").select("name").where("id", 5).limit(1).find_one()
    assert driver.last_sql == "SELECT `name` FROM `widget` WHERE `id` = ? LIMIT 1"
    assert driver.last_params == [5]


def test_find_one_by_id(registry: Registry, driver: MockDriver):
    registry.for_table("widget").find_one(5)
    assert driver.last_sql == "SELECT * FROM `widget` WHERE `id` = ? LIMIT 1"
    assert driver.last_params == [5]


def test_chained_where_calls_are_anded_in_order(registry: Registry, driver: MockDriver):
    registry.for_table("widget").where("name", "Fred").where("age", 10).where_not_equal("colour", "red").find_many()
    assert driver.last_sql == "SELECT * FROM `widget` WHERE `name` = ? AND `age` = ? AND `colour` != ?"
    assert driver.last_params == ["Fred", 10, "red"]


def test_where_in_scenario(registry: Registry, driver: MockDriver):
    registry.for_table("widget").where_in("id", [1, 2, 3]).find_many()
    assert driver.last_sql == "SELECT * FROM `widget` WHERE `id` IN (?, ?, ?)"
    assert driver.last_params == [1, 2, 3]


def test_where_not_in_accepts_a_generator(registry: Registry, driver: MockDriver):
    registry.for_table("widget").where_not_in("id", (n * 2 for n in range(1, 3))).find_many()
    assert driver.last_sql == "SELECT * FROM `widget` WHERE `id` NOT IN (?, ?)"
    assert driver.last_params == [2, 4]


def test_comparison_and_like_variants(registry: Registry, driver: MockDriver):
    (
        registry.for_table("widget")
        .where_gt("a", 1)
        .where_lt("b", 2)
        .where_gte("c", 3)
        .where_lte("d", 4)
        .where_like("name", "%Fr%")
        .where_not_like("name", "%x%")
        .where_not_in("e", [5, 6])
        .find_many()
    )
    assert driver.last_sql == (
        "SELECT * FROM `widget` WHERE `a` > ? AND `b` < ? AND `c` >= ? AND `d` <= ? "
        "AND `name` LIKE ? AND `name` NOT LIKE ? AND `e` NOT IN (?, ?)"
    )
    assert driver.last_params == [1, 2, 3, 4, "%Fr%", "%x%", 5, 6]


def test_null_checks_and_raw_where(registry: Registry, driver: MockDriver):
    (
        registry.for_table("widget")
        .where_null("deleted_at")
        .where_not_null("name")
        .where_raw("(`a` = ? OR `b` = ?)", [1, 2])
        .find_many()
    )
    assert driver.last_sql == (
        "SELECT * FROM `widget` WHERE `deleted_at` IS NULL AND `name` IS NOT NULL "
        "AND (`a` = ? OR `b` = ?)"
    )
    assert driver.last_params == [1, 2]


def test_where_mapping(registry: Registry, driver: MockDriver):
    registry.for_table("widget").where({"name": "Fred", "age": 10}).find_many()
    assert driver.last_sql == "SELECT * FROM `widget` WHERE `name` = ? AND `age` = ?"


def test_where_any_is(registry: Registry, driver: MockDriver):
    (
        registry.for_table("widget")
        .where_any_is([{"name": "Joe", "age": 10}, {"name": "Fred", "age": 20}], {"age": ">"})
        .find_many()
    )
    assert driver.last_sql == (
        "SELECT * FROM `widget` WHERE (( `name` = ? AND `age` > ? ) OR ( `name` = ? AND `age` > ? ))"
    )
    assert driver.last_params == ["Joe", 10, "Fred", 20]


def test_where_id_in_single_key(registry: Registry, driver: MockDriver):
    registry.for_table("widget").where_id_in([4, 5]).find_many()
    assert driver.last_sql == "SELECT * FROM `widget` WHERE `id` IN (?, ?)"


def test_where_id_in_compound_key(registry: Registry, driver: MockDriver):
    (
        registry.for_table("widget")
        .use_id_column(["a", "b"])
        .where_id_in([{"a": 1, "b": 2, "ignored": 9}, {"a": 3, "b": 4}])
        .find_many()
    )
    assert driver.last_sql == "SELECT * FROM `widget` WHERE (( `a` = ? AND `b` = ? ) OR ( `a` = ? AND `b` = ? ))"
    assert driver.last_params == [1, 2, 3, 4]


def test_where_id_is_compound_key(registry: Registry, driver: MockDriver):
    registry.for_table("widget").use_id_column(["a", "b"]).where_id_is({"a": 1, "b": 2}).find_many()
    assert driver.last_sql == "SELECT * FROM `widget` WHERE `a` = ? AND `b` = ?"
    assert driver.last_params == [1, 2]


def test_id_column_overrides_from_config(registry: Registry, driver: MockDriver):
    registry.configure("id_column_overrides", {"widget": "widget_id"})
    registry.for_table("widget").find_one(3)
    assert driver.last_sql == "SELECT * FROM `widget` WHERE `widget_id` = ? LIMIT 1"


def test_select_many_with_aliases(registry: Registry, driver: MockDriver):
    registry.for_table("widget").select_many({"widget_name": "name"}, "price", ["colour", "size"]).find_many()
    assert driver.last_sql == "SELECT `name` AS `widget_name`, `price`, `colour`, `size` FROM `widget`"


def test_select_many_expr(registry: Registry, driver: MockDriver):
    registry.for_table("widget").select_many_expr({"total": "COUNT(*)"}, "MAX(price)").find_many()
    assert driver.last_sql == "SELECT COUNT(*) AS `total`, MAX(price) FROM `widget`"


def test_distinct_alias_order_offset(registry: Registry, driver: MockDriver):
    (
        registry.for_table("widget")
        .table_alias("w")
        .distinct()
        .select("w.name")
        .order_by_desc("price")
        .order_by_asc("name")
        .order_by_expr("RANDOM()")
        .limit(10)
        .offset(20)
        .find_many()
    )
    assert driver.last_sql == (
        "SELECT DISTINCT `w`.`name` FROM `widget` `w` "
        "ORDER BY `price` DESC, `name` ASC, RANDOM() LIMIT 10 OFFSET 20"
    )


def test_group_by_and_having(registry: Registry, driver: MockDriver):
    (
        registry.for_table("widget")
        .select("colour")
        .select_expr("COUNT(*)", "total")
        .group_by("colour")
        .group_by_expr("YEAR(created)")
        .having_gt("total", 2)
        .having_not_null("colour")
        .having_raw("SUM(price) < ?", 100)
        .find_many()
    )
    assert driver.last_sql == (
        "SELECT `colour`, COUNT(*) AS `total` FROM `widget` "
        "GROUP BY `colour`, YEAR(created) "
        "HAVING `total` > ? AND `colour` IS NOT NULL AND SUM(price) < ?"
    )
    assert driver.last_params == [2, 100]


def test_having_id_is(registry: Registry, driver: MockDriver):
    registry.for_table("widget").group_by("id").having_id_is(7).find_many()
    assert driver.last_sql == "SELECT * FROM `widget` GROUP BY `id` HAVING `id` = ?"


def test_join_with_triple_constraint_qualifies_where(registry: Registry, driver: MockDriver):
    (
        registry.for_table("widget")
        .join("user", ("user.id", "=", "widget.user_id"))
        .where("name", "Sprocket")
        .find_many()
    )
    assert driver.last_sql == (
        "SELECT * FROM `widget` JOIN `user` ON `user`.`id` = `widget`.`user_id` WHERE `widget`.`name` = ?"
    )


def test_join_variants_with_aliases(registry: Registry, driver: MockDriver):
    (
        registry.for_table("widget")
        .inner_join("a", ("a.id", "=", "widget.a_id"), "x")
        .left_outer_join("b", "b.id = widget.b_id")
        .right_outer_join("c", ("c.id", "=", "widget.c_id"))
        .full_outer_join("d", ("d.id", "=", "widget.d_id"), "y")
        .find_many()
    )
    assert driver.last_sql == (
        "SELECT * FROM `widget` "
        "INNER JOIN `a` `x` ON `a`.`id` = `widget`.`a_id` "
        "LEFT OUTER JOIN `b` ON b.id = widget.b_id "
        "RIGHT OUTER JOIN `c` ON `c`.`id` = `widget`.`c_id` "
        "FULL OUTER JOIN `d` `y` ON `d`.`id` = `widget`.`d_id`"
    )


def test_raw_join_params_bind_before_where(registry: Registry, driver: MockDriver):
    (
        registry.for_table("widget")
        .raw_join(
            "JOIN (SELECT * FROM box WHERE colour = ?)",
            ("b.widget_id", "=", "widget.id"),
            "b",
            ["red"],
        )
        .where("size", 3)
        .find_many()
    )
    assert driver.last_sql == (
        "SELECT * FROM `widget` JOIN (SELECT * FROM box WHERE colour = ?) `b` "
        "ON `b`.`widget_id` = `widget`.`id` WHERE `widget`.`size` = ?"
    )
    assert driver.last_params == ["red", 3]


def test_malformed_join_constraint_raises(registry: Registry):
    with pytest.raises(CompilationError) as exc_info:
        registry.for_table("widget").join("user", ("user.id", "="))
    assert exc_info.value.clause == "JOIN"


def test_raw_query_used_verbatim(registry: Registry, driver: MockDriver):
    registry.for_table("widget").raw_query("SELECT * FROM widget WHERE id = :id", {"id": 5}).where("x", 1).find_many()
    assert driver.last_sql == "SELECT * FROM widget WHERE id = :id"
    assert driver.last_params == {"id": 5}


def test_unknown_builder_method_raises_attribute_error(registry: Registry):
    with pytest.raises(AttributeError):
        registry.for_table("widget").find_unicorns()


# ---------------------------------------------------------------------------
# Execution results
# ---------------------------------------------------------------------------


def test_find_one_returns_none_without_rows(registry: Registry):
    assert registry.for_table("widget").find_one(99) is None


def test_find_one_hydrates_clean_record(registry: Registry, driver: MockDriver):
    driver.queue({"id": 5, "name": "Sprocket"})
    widget = registry.for_table("widget").find_one(5)
    assert isinstance(widget, Record)
    assert widget["name"] == "Sprocket"
    assert widget.id() == 5
    assert not widget.is_new()
    assert not widget.is_dirty("name")


def test_find_many_returns_records(registry: Registry, driver: MockDriver):
    driver.queue({"id": 1}, {"id": 2})
    widgets = registry.for_table("widget").find_many()
    assert isinstance(widgets, list)
    assert [w.id() for w in widgets] == [1, 2]


def test_find_many_returns_result_set_when_configured(registry: Registry, driver: MockDriver):
    registry.configure("return_result_sets", True)
    driver.queue({"id": 1})
    assert isinstance(registry.for_table("widget").find_many(), ResultSet)


def test_find_array_returns_plain_rows(registry: Registry, driver: MockDriver):
    driver.queue({"id": 1, "name": "a"})
    assert registry.for_table("widget").find_array() == [{"id": 1, "name": "a"}]


def test_hydrated_records_keep_instance_id_column(registry: Registry, driver: MockDriver):
    driver.queue({"widget_id": 7, "name": "x"})
    widget = registry.for_table("widget").use_id_column("widget_id").find_one()
    assert widget.id() == 7


def test_result_columns_reset_after_execution(registry: Registry):
    query = registry.for_table("widget").select("name")
    query.find_many()
    assert query.compile_select().sql == "SELECT * FROM `widget`"


# ---------------------------------------------------------------------------
# Aggregates
# ---------------------------------------------------------------------------


def test_count_without_rows_is_zero(registry: Registry, driver: MockDriver):
    assert registry.for_table("widget").count() == 0
    assert driver.last_sql == "SELECT COUNT(*) AS `count` FROM `widget` LIMIT 1"


def test_count_coerces_numeric_strings(registry: Registry, driver: MockDriver):
    driver.queue({"count": "7"})
    result = registry.for_table("widget").count()
    assert result == 7
    assert isinstance(result, int)


def test_avg_returns_float_for_fractions(registry: Registry, driver: MockDriver):
    driver.queue({"avg": "7.5"})
    assert registry.for_table("widget").avg("price") == 7.5
    assert driver.last_sql == "SELECT AVG(`price`) AS `avg` FROM `widget` LIMIT 1"


def test_max_min_sum_quote_column(registry: Registry, driver: MockDriver):
    query = registry.for_table("widget").where("colour", "red")
    query.max("price")
    assert driver.last_sql == "SELECT MAX(`price`) AS `max` FROM `widget` WHERE `colour` = ? LIMIT 1"
    query.min("price")
    assert driver.last_sql.startswith("SELECT MIN(`price`) AS `min`")
    query.sum("price")
    assert driver.last_sql.startswith("SELECT SUM(`price`) AS `sum`")


def test_aggregate_restores_selected_columns(registry: Registry):
    query = registry.for_table("widget").select("name")
    query.count()
    assert query.compile_select().sql == "SELECT `name` FROM `widget` LIMIT 1"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, 0),
        (3, 3),
        ("12", 12),
        ("7.0", 7),
        (2.5, 2.5),
        ("abc", "abc"),
        ("nan", "nan"),
    ],
)
def test_coerce_aggregate(raw, expected):
    assert coerce_aggregate(raw) == expected
    assert type(coerce_aggregate(raw)) is type(expected)


# ---------------------------------------------------------------------------
# Query log
# ---------------------------------------------------------------------------


def test_query_log_binds_literals(registry: Registry):
    registry.for_table("widget").where("name", "O'Neil").where("id", 5).find_many()
    expected = "SELECT * FROM `widget` WHERE `name` = 'O''Neil' AND `id` = '5'"
    assert registry.get_query_log() == [expected]
    assert registry.get_last_query() == expected
    assert registry.get_last_query("default") == expected


def test_query_log_empty_for_unused_connection(registry: Registry):
    assert registry.get_last_query("other") == ""
    assert registry.get_query_log("other") == []


def test_query_log_skipped_when_logging_disabled(driver: MockDriver):
    registry = Registry()
    registry.set_driver(driver)
    registry.for_table("widget").find_many()
    assert registry.get_query_log() == []
    assert registry.get_last_query() is None


def test_logger_callback_receives_query_and_elapsed(registry: Registry):
    calls = []
    registry.configure("logger", lambda query, elapsed: calls.append((query, elapsed)))
    registry.for_table("widget").where("id", 1).find_many()
    assert len(calls) == 1
    query, elapsed = calls[0]
    assert query == "SELECT * FROM `widget` WHERE `id` = '1'"
    assert isinstance(elapsed, float)


def test_last_statement_is_tracked(registry: Registry):
    registry.for_table("widget").find_many()
    assert registry.get_last_statement() is not None
