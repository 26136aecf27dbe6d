from __future__ import annotations

import base64
import binascii
import csv
import json
import logging
from typing import TYPE_CHECKING, List, Optional

import dash
from dash import Input, Output, State, html

from sheets_console.ui.callbacks.callbacks_utils import notice_outputs, show
from sheets_console.ui.ids import IDs

if TYPE_CHECKING:
    from sheets_console.ui.context import AppContext

logger = logging.getLogger(__name__)


def parse_columns(text: str | None) -> List[str]:
    return [line.strip() for line in (text or "").splitlines() if line.strip()]


def parse_row_values(text: str | None) -> List[str]:
    """Comma separated values; quotes allow commas inside a value."""
    if not text:
        return []
    return [v.strip() for v in next(csv.reader([text], skipinitialspace=True))]


def decode_upload(contents: str | None) -> Optional[bytes]:
    """dcc.Upload contents arrive as "data:<mime>;base64,<payload>"."""
    if not contents:
        return None
    try:
        _header, encoded = contents.split(",", 1)
        return base64.b64decode(encoded, validate=True)
    except (ValueError, binascii.Error):
        logger.warning("Could not decode uploaded file")
        return None


def register_manage_callbacks(app: dash.Dash, ctx: AppContext) -> None:
    @app.callback(
        Output(IDs.Control.MANAGE_LIST, "children"),
        Output(IDs.Control.DB_APPEND_SELECT, "options"),
        Input(IDs.Control.MANAGE_LIST, "id"),
        State(IDs.Store.SESSION, "data"),
    )
    def list_databases(_mounted, session_data):
        session = ctx.session(session_data)
        if not session.is_authenticated:
            raise dash.exceptions.PreventUpdate

        groups = ctx.directory(session).list_datasets()
        if not groups:
            return html.P("No databases found.", className="text-muted"), []

        sections = []
        options = []
        for department, summaries in groups.items():
            sections.append(html.H6(department or "Unassigned", className="text-muted mt-2"))
            sections.append(html.Ul([html.Li(s.name) for s in summaries]))
            options += [
                {
                    "label": f"{s.name} ({department})",
                    "value": json.dumps({"sheet_id": s.sheet_id, "name": s.name}),
                }
                for s in summaries
            ]
        return sections, options

    @app.callback(
        *notice_outputs(),
        Input(IDs.Control.DB_CREATE_BTN, "n_clicks"),
        State(IDs.Control.DB_NAME, "value"),
        State(IDs.Control.DB_PASSWORD, "value"),
        State(IDs.Control.DB_DEPARTMENT, "value"),
        State(IDs.Control.DB_COLUMNS, "value"),
        State(IDs.Store.SESSION, "data"),
        prevent_initial_call=True,
    )
    def create_database(n_clicks, name, password, department, columns_text, session_data):
        if not n_clicks:
            raise dash.exceptions.PreventUpdate

        session = ctx.session(session_data)
        notice = ctx.admin(session).create_database(
            name=(name or "").strip(),
            password=password,
            department=department,
            columns=parse_columns(columns_text),
            current=session.profile,
        )
        return show(notice)

    @app.callback(
        *notice_outputs(),
        Input(IDs.Control.DB_APPEND_BTN, "n_clicks"),
        State(IDs.Control.DB_APPEND_SELECT, "value"),
        State(IDs.Control.DB_APPEND_VALUES, "value"),
        State(IDs.Store.SESSION, "data"),
        prevent_initial_call=True,
    )
    def append_row(n_clicks, target, values_text, session_data):
        if not n_clicks or not target:
            raise dash.exceptions.PreventUpdate

        sheet = json.loads(target)
        session = ctx.session(session_data)
        notice = ctx.admin(session).append_row(sheet["sheet_id"], sheet["name"], parse_row_values(values_text))
        return show(notice)

    @app.callback(
        Output(IDs.Control.DB_UPLOAD_NAME, "children"),
        Input(IDs.Control.DB_UPLOAD, "filename"),
        prevent_initial_call=True,
    )
    def show_upload_name(filename):
        return filename or ""

    @app.callback(
        *notice_outputs(),
        Input(IDs.Control.DB_UPLOAD_BTN, "n_clicks"),
        State(IDs.Control.DB_APPEND_SELECT, "value"),
        State(IDs.Control.DB_UPLOAD, "contents"),
        State(IDs.Control.DB_UPLOAD, "filename"),
        State(IDs.Store.SESSION, "data"),
        prevent_initial_call=True,
    )
    def upload_csv(n_clicks, target, contents, filename, session_data):
        if not n_clicks or not target:
            raise dash.exceptions.PreventUpdate

        sheet = json.loads(target)
        session = ctx.session(session_data)
        notice = ctx.admin(session).upload_csv(sheet["sheet_id"], sheet["name"], filename, decode_upload(contents))
        return show(notice)
