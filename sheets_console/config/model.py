from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass
class ConsoleConfig:
    """
    Parsed global.json plus environment overrides.

    - api_base_url: base URL of the sheets REST API
    - identity_api_key: web API key for the identity provider
    - placeholder_name: sheets with this name are never listed
    - default_visible_filters: filter dropdowns shown before "Add Filters"
    - max_cell_chars: PDF export truncates longer values
    - state_root: where the server keeps its own files (None = no disk state)
    """
    ui_title: str = "Sheets Console"
    api_base_url: str = "http://localhost:5000"
    identity_api_key: str = ""
    request_timeout: float = 30.0
    placeholder_name: str = "Sheet1"
    default_visible_filters: int = 3
    max_cell_chars: int = 100
    state_root: Optional[Path] = None
