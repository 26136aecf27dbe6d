from __future__ import annotations

import pytest

from sheets_console.core.filter_state import FilterState
from sheets_console.core.search import ALL, apply_filters


def test_for_columns_shows_first_three_filters():
    st = FilterState.for_columns("ds1", ["a", "b", "c", "d", "e"])

    assert st.visible_filters == ["a", "b", "c"]
    assert st.default_visible == ["a", "b", "c"]
    assert st.extra_columns == ["d", "e"]
    assert st.column_filters == {}


def test_set_filter_none_means_all():
    st = FilterState.for_columns("ds1", ["a"])
    st.set_filter("a", None)
    assert st.column_filters == {"a": ALL}


def test_hidden_filter_keeps_latent_constraint():
    rows = [{"a": 1, "d": "keep"}, {"a": 2, "d": "drop"}]
    st = FilterState.for_columns("ds1", ["a", "b", "c", "d"])

    st.toggle_column("d")
    assert st.visible_filters == ["a", "b", "c", "d"]
    st.set_filter("d", "keep")

    st.toggle_column("d")
    assert "d" not in st.visible_filters
    assert apply_filters(rows, st.column_filters, st.free_text) == [rows[0]]


def test_default_columns_cannot_be_toggled():
    st = FilterState.for_columns("ds1", ["a", "b", "c", "d"])
    with pytest.raises(KeyError):
        st.toggle_column("a")


def test_filter_state_to_from_dict_roundtrip():
    st = FilterState.for_columns("ds1", ["a", "b", "c", "d"], n_visible=2)
    st.free_text = "abc"
    st.set_filter("c", "x")
    st.toggle_column("d")

    rebuilt = FilterState.from_dict(st.to_dict())

    assert rebuilt == st
    assert rebuilt.extra_columns == ["c", "d"]


def test_from_dict_tolerates_empty_store():
    st = FilterState.from_dict(None)
    assert st.dataset_id == ""
    assert st.visible_filters == []
