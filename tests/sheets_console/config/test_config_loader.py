from __future__ import annotations

import json

import pytest

from sheets_console.config.loader import load_config
from sheets_console.core.exceptions import ConfigError


def _write(root, data):
    root.mkdir(parents=True, exist_ok=True)
    (root / "global.json").write_text(json.dumps(data) if not isinstance(data, str) else data)


def test_missing_global_json_uses_defaults(tmp_path):
    cfg = load_config(tmp_path, environ={})

    assert cfg.ui_title == "Sheets Console"
    assert cfg.placeholder_name == "Sheet1"
    assert cfg.default_visible_filters == 3
    assert cfg.max_cell_chars == 100
    assert cfg.state_root is None


def test_values_from_file(tmp_path):
    _write(tmp_path, {
        "ui_title": "Dept Console",
        "api_base_url": "https://api.example.com/",
        "request_timeout": 12,
        "state_root": "state",
    })

    cfg = load_config(tmp_path, environ={})

    assert cfg.ui_title == "Dept Console"
    assert cfg.api_base_url == "https://api.example.com"
    assert cfg.request_timeout == 12.0
    assert cfg.state_root == (tmp_path / "state").resolve()


def test_environment_overrides_file(tmp_path):
    _write(tmp_path, {"api_base_url": "https://file.example.com", "identity_api_key": "file-key"})
    env = {
        "SHEETS_CONSOLE_API_URL": "https://env.example.com",
        "SHEETS_CONSOLE_IDENTITY_API_KEY": "env-key",
        "SHEETS_CONSOLE_REQUEST_TIMEOUT": "7.5",
    }

    cfg = load_config(tmp_path, environ=env)

    assert cfg.api_base_url == "https://env.example.com"
    assert cfg.identity_api_key == "env-key"
    assert cfg.request_timeout == 7.5


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        "[1, 2, 3]",
        {"api_base_url": ""},
        {"request_timeout": "soon"},
        {"request_timeout": 0},
        {"max_cell_chars": -1},
    ],
)
def test_invalid_config_raises(tmp_path, content):
    _write(tmp_path, content)
    with pytest.raises(ConfigError):
        load_config(tmp_path, environ={})
