from __future__ import annotations

from sheets_console.core.search import (
    ALL,
    NOT_AVAILABLE,
    apply_filters,
    distinct_values,
    matches_free_text,
    normalise_value,
)

ROWS = [
    {"a": "x", "b": "1"},
    {"a": "y", "b": "1"},
    {"a": "x", "b": "2"},
]


def test_single_constraint_keeps_original_order():
    out = apply_filters(ROWS, {"a": "x"}, "")
    assert out == [ROWS[0], ROWS[2]]


def test_no_active_constraints_equals_free_text_only():
    rows = ROWS + [{"a": "Needle here", "b": None}]
    for query in ["", "x", "NEEDLE", "zzz", "1"]:
        expected = [r for r in rows if matches_free_text(r, query)]
        assert apply_filters(rows, {"a": ALL, "b": ALL}, query) == expected
        assert apply_filters(rows, {}, query) == expected


def test_constraints_and_free_text_are_conjunctive():
    rows = [
        {"name": "Alice", "dept": "Ops", "city": "Leeds"},
        {"name": "Bob", "dept": "Ops", "city": "York"},
        {"name": "Carol", "dept": "HR", "city": "Leeds"},
    ]
    filters = {"dept": "Ops", "city": "Leeds"}
    assert apply_filters(rows, filters, "") == [rows[0]]
    assert apply_filters(rows, filters, "ali") == [rows[0]]
    assert apply_filters(rows, filters, "bob") == []


def test_missing_values_match_not_available_filter():
    rows = [{"a": None}, {"b": "only b"}, {"a": "set"}]
    out = apply_filters(rows, {"a": NOT_AVAILABLE})
    assert out == [rows[0], rows[1]]


def test_free_text_ignores_none_and_stringifies_numbers():
    assert matches_free_text({"n": 1234}, "23")
    assert not matches_free_text({"n": None}, "none")


def test_distinct_values_starts_with_all_and_has_no_duplicates():
    values = distinct_values(ROWS + [{"a": None}, {"b": "3"}], "a")
    assert values[0] == ALL
    assert values == [ALL, "x", "y", NOT_AVAILABLE]
    assert len(values) == len(set(values))


def test_distinct_values_never_repeats_all():
    values = distinct_values([{"a": "All"}, {"a": "x"}], "a")
    assert values == [ALL, "x"]


def test_normalise_value():
    assert normalise_value(None) == NOT_AVAILABLE
    assert normalise_value(0) == 0
    assert normalise_value("") == ""


def test_distinct_values_keep_booleans_apart_from_numbers():
    rows = [{"a": True}, {"a": 1}, {"a": 1.0}, {"a": "1"}, {"a": False}, {"a": 0}]
    assert distinct_values(rows, "a") == [ALL, True, 1, "1", False, 0]


def test_boolean_filter_does_not_match_numbers():
    rows = [{"a": True}, {"a": 1}, {"a": 1.0}, {"a": "1"}]
    assert apply_filters(rows, {"a": True}) == [rows[0]]
    assert apply_filters(rows, {"a": 1}) == [rows[1], rows[2]]
    assert apply_filters(rows, {"a": "1"}) == [rows[3]]
