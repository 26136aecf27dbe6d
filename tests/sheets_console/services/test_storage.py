from __future__ import annotations

import pytest

from sheets_console.services.storage import BrowserStoreStorage, LocalFileSystemStorage


def test_local_storage_roundtrip(tmp_path):
    storage = LocalFileSystemStorage(tmp_path / "state")
    storage.write_bytes("exports/a.csv", b"x,y")

    assert storage.exists("exports/a.csv")
    assert storage.read_bytes("exports/a.csv") == b"x,y"

    storage.delete("exports/a.csv")
    storage.delete("exports/a.csv")
    assert not storage.exists("exports/a.csv")


def test_local_storage_blocks_path_traversal(tmp_path):
    storage = LocalFileSystemStorage(tmp_path / "state")
    with pytest.raises(ValueError):
        storage.write_bytes("../escape.txt", b"nope")


def test_browser_store_keeps_text_readable():
    storage = BrowserStoreStorage({"token": "abc"})
    storage.write_bytes("user", '{"id": "u1"}'.encode("utf-8"))

    assert storage.data == {"token": "abc", "user": '{"id": "u1"}'}
    assert storage.read_bytes("token") == b"abc"


def test_browser_store_encodes_binary_and_prefixed_text():
    storage = BrowserStoreStorage()
    storage.write_bytes("bin", b"\xff\x00")
    storage.write_bytes("tricky", b"b64:not really")

    assert storage.data["bin"].startswith("b64:")
    assert storage.read_bytes("bin") == b"\xff\x00"
    assert storage.read_bytes("tricky") == b"b64:not really"


def test_browser_store_rejects_non_text_values():
    storage = BrowserStoreStorage({"user": 42})
    with pytest.raises(TypeError):
        storage.read_bytes("user")


def test_browser_store_does_not_alias_input():
    raw = {"token": "abc"}
    storage = BrowserStoreStorage(raw)
    storage.delete("token")
    assert raw == {"token": "abc"}
