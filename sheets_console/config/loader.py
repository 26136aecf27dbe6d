from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from sheets_console.config.model import ConsoleConfig
from sheets_console.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

ENV_API_URL = "SHEETS_CONSOLE_API_URL"
ENV_IDENTITY_API_KEY = "SHEETS_CONSOLE_IDENTITY_API_KEY"
ENV_REQUEST_TIMEOUT = "SHEETS_CONSOLE_REQUEST_TIMEOUT"


def load_config(root: Path, environ: Optional[Mapping[str, str]] = None) -> ConsoleConfig:
    """
    Load configuration from a directory.

    Expected structure:

        root/
            global.json

    A missing global.json falls back to defaults. Environment variables
    override the file:

    - SHEETS_CONSOLE_API_URL -> api_base_url
    - SHEETS_CONSOLE_IDENTITY_API_KEY -> identity_api_key
    - SHEETS_CONSOLE_REQUEST_TIMEOUT -> request_timeout

    :param root: Directory containing 'global.json'.
    :param environ: Mapping to read overrides from (defaults to os.environ).
    :return: A ConsoleConfig instance.
    :raises ConfigError: if global.json is unreadable or a value is invalid.
    """
    root = Path(root)
    env = os.environ if environ is None else environ

    logger.info("Loading console config", extra={"config_root": str(root)})

    global_path = root / "global.json"
    raw: Dict[str, Any] = {}
    if global_path.is_file():
        try:
            with global_path.open() as f:
                raw = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in {global_path}: {e}") from e
        if not isinstance(raw, dict):
            raise ConfigError(f"{global_path} must contain a JSON object")
    else:
        logger.warning("global.json not found, using defaults", extra={"config_root": str(root)})

    defaults = ConsoleConfig()

    state_root_raw = raw.get("state_root")
    state_root = Path(state_root_raw) if state_root_raw else None
    if state_root and not state_root.is_absolute():
        state_root = (root / state_root).resolve()

    cfg = ConsoleConfig(
        ui_title=raw.get("ui_title", defaults.ui_title),
        api_base_url=env.get(ENV_API_URL) or raw.get("api_base_url", defaults.api_base_url),
        identity_api_key=env.get(ENV_IDENTITY_API_KEY) or raw.get("identity_api_key", defaults.identity_api_key),
        request_timeout=_as_float(
            env.get(ENV_REQUEST_TIMEOUT) or raw.get("request_timeout", defaults.request_timeout),
            "request_timeout",
        ),
        placeholder_name=raw.get("placeholder_name", defaults.placeholder_name),
        default_visible_filters=_as_int(
            raw.get("default_visible_filters", defaults.default_visible_filters),
            "default_visible_filters",
        ),
        max_cell_chars=_as_int(raw.get("max_cell_chars", defaults.max_cell_chars), "max_cell_chars"),
        state_root=state_root,
    )

    if not cfg.api_base_url:
        raise ConfigError("api_base_url must not be empty")

    cfg.api_base_url = cfg.api_base_url.rstrip("/")
    return cfg


def _as_float(value: Any, name: str) -> float:
    try:
        out = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{name} must be a number, got {value!r}") from e
    if out <= 0:
        raise ConfigError(f"{name} must be positive, got {out}")
    return out


def _as_int(value: Any, name: str) -> int:
    try:
        out = int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from e
    if out < 0:
        raise ConfigError(f"{name} must not be negative, got {out}")
    return out
