from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import dash
from dash import Input, Output, State

from sheets_console.core.roles import LOGIN_PATH
from sheets_console.ui.callbacks.callbacks_utils import notice_outputs, show
from sheets_console.ui.ids import IDs

if TYPE_CHECKING:
    from sheets_console.ui.context import AppContext

logger = logging.getLogger(__name__)


def register_auth_callbacks(app: dash.Dash, ctx: AppContext) -> None:
    # ---------------------------------------------------------
    # Sign in
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.SESSION, "data", allow_duplicate=True),
        *notice_outputs(),
        Input(IDs.Control.LOGIN_BTN, "n_clicks"),
        State(IDs.Control.LOGIN_EMAIL, "value"),
        State(IDs.Control.LOGIN_PASSWORD, "value"),
        State(IDs.Store.SESSION, "data"),
        prevent_initial_call=True,
    )
    def sign_in(n_clicks, email, password, session_data):
        if not n_clicks:
            raise dash.exceptions.PreventUpdate

        session = ctx.session(session_data)
        notice = ctx.account().sign_in(session, (email or "").strip(), password)
        return (session.storage.data, *show(notice))

    # ---------------------------------------------------------
    # Password reset email
    # ---------------------------------------------------------
    @app.callback(
        *notice_outputs(),
        Input(IDs.Control.LOGIN_RESET_BTN, "n_clicks"),
        State(IDs.Control.LOGIN_EMAIL, "value"),
        prevent_initial_call=True,
    )
    def reset_password(n_clicks, email):
        if not n_clicks:
            raise dash.exceptions.PreventUpdate
        return show(ctx.account().send_password_reset((email or "").strip()))

    # ---------------------------------------------------------
    # Sign out (navbar menu)
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.SESSION, "data", allow_duplicate=True),
        Output(IDs.Page.LOCATION, "pathname", allow_duplicate=True),
        Input(IDs.Control.LOGOUT_BTN, "n_clicks"),
        State(IDs.Store.SESSION, "data"),
        prevent_initial_call=True,
    )
    def sign_out(n_clicks, session_data):
        if not n_clicks:
            raise dash.exceptions.PreventUpdate

        session = ctx.session(session_data)
        session.logout()
        return session.storage.data, LOGIN_PATH
