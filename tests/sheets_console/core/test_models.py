from __future__ import annotations

import pytest

from sheets_console.core.dataset import Dataset
from sheets_console.core.models import DatasetSummary, Department, Notice, UserProfile
from sheets_console.core.roles import Role


def _summary():
    return DatasetSummary(id="d1", sheet_id="s1", name="Staff", department="Ops")


def test_profile_from_dict_accepts_uid():
    p = UserProfile.from_dict({"uid": "u1", "first_name": "Ada", "last_name": "L", "role": "admin"})
    assert p.id == "u1"
    assert p.tier is Role.ADMIN
    assert p.full_name == "Ada L"


def test_profile_from_dict_rejects_bad_payloads():
    with pytest.raises(TypeError):
        UserProfile.from_dict(["not", "a", "mapping"])
    with pytest.raises(ValueError):
        UserProfile.from_dict({"email": "x@y.z"})


def test_profile_merge_is_shallow_and_ignores_unknown_keys():
    p = UserProfile(id="u1", first_name="Ada", role="user")
    merged = p.merged({"first_name": "Grace", "favourite_colour": "blue"})
    assert merged.first_name == "Grace"
    assert merged.role == "user"
    assert p.first_name == "Ada"


def test_summary_from_api_payload():
    s = DatasetSummary.from_dict(
        {"id": 7, "sheet_id": "abc", "database_name": "Staff", "department_name": " Ops "}
    )
    assert s == DatasetSummary(id="7", sheet_id="abc", name="Staff", department="Ops")


def test_department_from_api_payload():
    d = Department.from_dict({"id": "1", "department_name": "HR", "created_at": {"_seconds": 0}})
    assert d.name == "HR"
    assert d.created_at == {"_seconds": 0}


def test_notice_color():
    assert Notice("x", "error").color == "danger"
    assert Notice("x", "success").color == "success"
    assert Notice("x").color == "info"


def test_dataset_columns_follow_first_row():
    ds = Dataset.from_rows(_summary(), [{"b": 1, "a": 2}, {"a": 3, "c": 4}])
    assert ds.columns == ["b", "a"]
    assert ds.id == "d1"


def test_dataset_with_no_rows_has_no_columns():
    ds = Dataset.from_rows(_summary(), [])
    assert ds.columns == []
    assert ds.to_frame().empty


def test_dataset_to_from_dict_roundtrip():
    ds = Dataset.from_rows(_summary(), [{"a": "x", "b": None}])
    rebuilt = Dataset.from_dict(ds.to_dict())
    assert rebuilt == ds


def test_dataset_to_frame_uses_column_order():
    ds = Dataset.from_rows(_summary(), [{"b": 1, "a": 2}])
    frame = ds.to_frame()
    assert list(frame.columns) == ["b", "a"]
    assert frame.iloc[0]["a"] == 2
