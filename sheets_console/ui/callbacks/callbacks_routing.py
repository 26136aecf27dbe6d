from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

import dash
from dash import Input, Output, no_update

from sheets_console.core.roles import LOGIN_PATH, NOT_FOUND_PATH, guard_route
from sheets_console.services.session_service import SessionStore
from sheets_console.ui.ids import IDs
from sheets_console.ui.layout.build_home_page import build_home_page, build_not_found_page
from sheets_console.ui.layout.build_login_page import build_login_page
from sheets_console.ui.layout.build_manage_page import build_manage_page
from sheets_console.ui.layout.build_navbar import build_navbar
from sheets_console.ui.layout.build_search_page import build_search_page
from sheets_console.ui.layout.build_settings_page import (
    build_account_management_panel,
    build_account_panel,
    build_department_panel,
    build_settings_page,
)

if TYPE_CHECKING:
    from sheets_console.ui.context import AppContext

logger = logging.getLogger(__name__)

HOME_PATH = "/home"
KNOWN_PATHS = {
    LOGIN_PATH,
    HOME_PATH,
    "/search",
    "/manage",
    "/settings",
    "/settings/account",
    "/settings/management",
    "/settings/department",
    NOT_FOUND_PATH,
}


def resolve_path(pathname: Optional[str], session: SessionStore) -> str:
    """Apply the access guards, then map unknown paths to the not-found page."""
    role = session.profile.role if session.profile else None
    path = guard_route(pathname, role, session.is_authenticated)

    if path == LOGIN_PATH and session.is_authenticated:
        return HOME_PATH
    if path == "/settings":
        return "/settings/account"
    if path not in KNOWN_PATHS:
        return NOT_FOUND_PATH
    return path


def render_page(ctx: AppContext, path: str, session: SessionStore):
    profile = session.profile

    if path == LOGIN_PATH:
        return build_login_page()
    if path == HOME_PATH:
        return build_home_page()
    if path == "/search":
        return build_search_page()
    if path == "/manage":
        return build_manage_page(ctx.admin(session).list_departments())
    if path == "/settings/account":
        return build_settings_page(profile, path, build_account_panel(profile))
    if path == "/settings/management":
        admin = ctx.admin(session)
        panel = build_account_management_panel(
            admin.list_users(profile),
            profile,
            admin.list_departments(),
        )
        return build_settings_page(profile, path, panel)
    if path == "/settings/department":
        panel = build_department_panel(ctx.admin(session).list_departments())
        return build_settings_page(profile, path, panel)
    return build_not_found_page()


def register_routing_callbacks(app: dash.Dash, ctx: AppContext) -> None:
    @app.callback(
        Output(IDs.Page.CONTAINER, "children"),
        Output(IDs.Page.NAVBAR, "children"),
        Output(IDs.Page.LOCATION, "pathname"),
        Input(IDs.Page.LOCATION, "pathname"),
        Input(IDs.Store.SESSION, "data"),
    )
    def route(pathname, session_data):
        session = ctx.session(session_data)
        path = resolve_path(pathname, session)

        if path != (pathname or LOGIN_PATH):
            logger.info("Redirecting", extra={"requested": pathname, "resolved": path})

        navbar = build_navbar(ctx.config.ui_title, session.profile) if session.is_authenticated else None
        redirect = path if path != pathname else no_update
        return render_page(ctx, path, session), navbar, redirect
