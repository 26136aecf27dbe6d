from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

import dash_bootstrap_components as dbc
import pandas as pd
from dash import dash_table, html

from sheets_console.core.models import Notice
from sheets_console.core.search import NOT_AVAILABLE

NOTICE_DURATION_MS = 4000

TABLE_STYLE_CELL = {
    "fontFamily": 'system-ui, -apple-system, BlinkMacSystemFont, "Segoe UI", sans-serif',
    "fontSize": "12px",
    "padding": "6px 8px",
    "border": "none",
    "textAlign": "left",
    "minWidth": "80px",
    "maxWidth": "260px",
    "whiteSpace": "nowrap",
    "overflow": "hidden",
    "textOverflow": "ellipsis",
}

TABLE_STYLE_HEADER = {
    "fontFamily": TABLE_STYLE_CELL["fontFamily"],
    "fontSize": "12px",
    "fontWeight": "600",
    "backgroundColor": "#f3f4f6",
    "borderBottom": "1px solid #e5e7eb",
}


def notice_props(notice: Optional[Notice]):
    """(children, color, is_open) for the global notice alert."""
    if notice is None:
        return "", "info", False
    return notice.message, notice.color, True


def rows_table(frame: pd.DataFrame, page_size: int = 50):
    """
    Styled DataTable of filtered rows. Missing values show as N/A.
    """
    if frame.empty:
        return html.P("No results found for selected filters.", className="text-muted p-3")

    data: List[Dict[str, Any]] = frame.where(frame.notna(), NOT_AVAILABLE).to_dict("records")
    columns = [str(c) for c in frame.columns]

    return dash_table.DataTable(
        data=data,
        columns=[{"name": c, "id": c} for c in columns],
        style_table={"overflowX": "auto", "maxHeight": "500px", "overflowY": "auto"},
        style_as_list_view=True,
        style_cell=TABLE_STYLE_CELL,
        style_header=TABLE_STYLE_HEADER,
        style_data={"borderBottom": "1px solid #e5e7eb"},
        fixed_rows={"headers": True},
        page_size=page_size,
        sort_action="native",
        filter_action="none",
    )


def simple_table(headers: Sequence[str], body_rows: Sequence[Sequence[Any]], empty_text: str):
    """Bootstrap table used by the settings screens."""
    head = html.Thead(html.Tr([html.Th(h) for h in headers]))
    if not body_rows:
        body = html.Tbody(html.Tr(html.Td(empty_text, colSpan=len(headers), className="text-center text-muted")))
    else:
        body = html.Tbody([html.Tr([html.Td(cell) for cell in r]) for r in body_rows])
    return dbc.Table([head, body], bordered=False, hover=True, responsive=True, size="sm", className="bg-white")
