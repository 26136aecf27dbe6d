from __future__ import annotations

from typing import Any, Optional

import dash
from dash import Output, no_update

from sheets_console.core.models import Notice
from sheets_console.ui.helpers import notice_props
from sheets_console.ui.ids import IDs


def notice_outputs() -> list:
    """Outputs of the global notice alert, shareable between callbacks."""
    return [
        Output(IDs.Page.NOTICE, "children", allow_duplicate=True),
        Output(IDs.Page.NOTICE, "color", allow_duplicate=True),
        Output(IDs.Page.NOTICE, "is_open", allow_duplicate=True),
    ]


def show(notice: Optional[Notice]) -> tuple:
    """Notice outputs; None leaves whatever is currently shown untouched."""
    if notice is None:
        return no_update, no_update, no_update
    return notice_props(notice)


def clicked_pattern_index(n_clicks_list: Any) -> Optional[str]:
    """
    Index of the pattern-matched button that fired, or None when the
    callback ran because the buttons were (re)rendered.
    """
    triggered = dash.ctx.triggered_id
    if not triggered or not isinstance(triggered, dict):
        return None
    if not any(n_clicks_list or []):
        return None
    value = dash.ctx.triggered[0].get("value") if dash.ctx.triggered else None
    if not value:
        return None
    return triggered.get("index")
