from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import dash
from dash import ALL, Input, Output, State, no_update

from sheets_console.core.roles import at_least_admin, exactly_super_admin
from sheets_console.ui.callbacks.callbacks_utils import clicked_pattern_index, notice_outputs, show
from sheets_console.ui.ids import IDs
from sheets_console.ui.layout.build_settings_page import (
    account_details,
    department_options,
    departments_table,
    user_options,
    users_table,
)

if TYPE_CHECKING:
    from sheets_console.ui.context import AppContext

logger = logging.getLogger(__name__)


def register_settings_callbacks(app: dash.Dash, ctx: AppContext) -> None:
    # ---------------------------------------------------------
    # Own account
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.SESSION, "data", allow_duplicate=True),
        Output(IDs.Control.ACCOUNT_DETAILS, "children"),
        *notice_outputs(),
        Input(IDs.Control.ACCOUNT_SAVE_BTN, "n_clicks"),
        State(IDs.Control.ACCOUNT_FIELD, "value"),
        State(IDs.Control.ACCOUNT_VALUE, "value"),
        State(IDs.Store.SESSION, "data"),
        prevent_initial_call=True,
    )
    def save_account_field(n_clicks, field, value, session_data):
        if not n_clicks or not field:
            raise dash.exceptions.PreventUpdate

        session = ctx.session(session_data)
        notice = ctx.account(session).update_field(session, field, (value or "").strip())
        return session.storage.data, account_details(session.profile), *show(notice)

    @app.callback(
        Output(IDs.Control.PW_CURRENT, "value"),
        Output(IDs.Control.PW_NEW, "value"),
        Output(IDs.Control.PW_CONFIRM, "value"),
        *notice_outputs(),
        Input(IDs.Control.PW_SAVE_BTN, "n_clicks"),
        State(IDs.Control.PW_CURRENT, "value"),
        State(IDs.Control.PW_NEW, "value"),
        State(IDs.Control.PW_CONFIRM, "value"),
        State(IDs.Store.SESSION, "data"),
        prevent_initial_call=True,
    )
    def change_password(n_clicks, current, new, confirm, session_data):
        if not n_clicks:
            raise dash.exceptions.PreventUpdate

        session = ctx.session(session_data)
        notice = ctx.account(session).change_password(session, current, new, confirm)
        if notice.kind == "success":
            return "", "", "", *show(notice)
        return no_update, no_update, no_update, *show(notice)

    # ---------------------------------------------------------
    # Account management (admin and above)
    # ---------------------------------------------------------
    def refreshed_users(admin, profile):
        users = admin.list_users(profile)
        return users_table(users, profile), user_options(users)

    @app.callback(
        Output(IDs.Control.USERS_TABLE, "children", allow_duplicate=True),
        Output(IDs.Control.USER_EDIT_SELECT, "options", allow_duplicate=True),
        *notice_outputs(),
        Input(IDs.Control.USER_ADD_BTN, "n_clicks"),
        State(IDs.Control.USER_FIRST, "value"),
        State(IDs.Control.USER_LAST, "value"),
        State(IDs.Control.USER_EMAIL, "value"),
        State(IDs.Control.USER_PASSWORD, "value"),
        State(IDs.Control.USER_ROLE, "value"),
        State(IDs.Control.USER_DEPARTMENT, "value"),
        State(IDs.Store.SESSION, "data"),
        prevent_initial_call=True,
    )
    def add_user(n_clicks, first, last, email, password, role, department, session_data):
        if not n_clicks:
            raise dash.exceptions.PreventUpdate

        session = ctx.session(session_data)
        profile = session.profile
        if profile is None or not at_least_admin(profile.role):
            raise dash.exceptions.PreventUpdate

        admin = ctx.admin(session)
        notice = admin.add_user(
            {
                "first_name": first,
                "last_name": last,
                "email": email,
                "password": password,
                "role": role,
                "department": department,
            },
            profile,
        )
        if notice.kind != "success":
            return no_update, no_update, *show(notice)
        return *refreshed_users(admin, profile), *show(notice)

    @app.callback(
        Output(IDs.Control.USERS_TABLE, "children", allow_duplicate=True),
        Output(IDs.Control.USER_EDIT_SELECT, "options", allow_duplicate=True),
        Output(IDs.Control.USER_EDIT_VALUE, "value"),
        *notice_outputs(),
        Input(IDs.Control.USER_EDIT_BTN, "n_clicks"),
        State(IDs.Control.USER_EDIT_SELECT, "value"),
        State(IDs.Control.USER_EDIT_FIELD, "value"),
        State(IDs.Control.USER_EDIT_VALUE, "value"),
        State(IDs.Store.SESSION, "data"),
        prevent_initial_call=True,
    )
    def edit_user(n_clicks, user_id, field, value, session_data):
        if not n_clicks:
            raise dash.exceptions.PreventUpdate

        session = ctx.session(session_data)
        profile = session.profile
        if profile is None or not at_least_admin(profile.role):
            raise dash.exceptions.PreventUpdate

        admin = ctx.admin(session)
        notice = admin.update_user(user_id, field, value, profile)
        if notice.kind != "success":
            return no_update, no_update, no_update, *show(notice)
        return *refreshed_users(admin, profile), "", *show(notice)

    @app.callback(
        Output(IDs.Control.USERS_TABLE, "children", allow_duplicate=True),
        Output(IDs.Control.USER_EDIT_SELECT, "options", allow_duplicate=True),
        *notice_outputs(),
        Input({"type": IDs.Pattern.USER_DELETE, "index": ALL}, "n_clicks"),
        State(IDs.Store.SESSION, "data"),
        prevent_initial_call=True,
    )
    def delete_user(n_clicks_list, session_data):
        user_id = clicked_pattern_index(n_clicks_list)
        if user_id is None:
            raise dash.exceptions.PreventUpdate

        session = ctx.session(session_data)
        profile = session.profile
        if profile is None or not at_least_admin(profile.role):
            raise dash.exceptions.PreventUpdate

        admin = ctx.admin(session)
        notice = admin.delete_user(user_id, profile)
        if notice.kind != "success":
            return no_update, no_update, *show(notice)
        return *refreshed_users(admin, profile), *show(notice)

    # ---------------------------------------------------------
    # Department management (super admin only)
    # ---------------------------------------------------------
    def refreshed_departments(admin):
        departments = admin.list_departments()
        return departments_table(departments), department_options(departments)

    @app.callback(
        Output(IDs.Control.DEPARTMENTS_TABLE, "children", allow_duplicate=True),
        Output(IDs.Control.DEPARTMENT_RENAME_SELECT, "options", allow_duplicate=True),
        Output(IDs.Control.DEPARTMENT_NAME, "value"),
        *notice_outputs(),
        Input(IDs.Control.DEPARTMENT_ADD_BTN, "n_clicks"),
        State(IDs.Control.DEPARTMENT_NAME, "value"),
        State(IDs.Store.SESSION, "data"),
        prevent_initial_call=True,
    )
    def add_department(n_clicks, name, session_data):
        if not n_clicks:
            raise dash.exceptions.PreventUpdate

        session = ctx.session(session_data)
        if session.profile is None or not exactly_super_admin(session.profile.role):
            raise dash.exceptions.PreventUpdate

        admin = ctx.admin(session)
        notice = admin.add_department(name)
        if notice.kind != "success":
            return no_update, no_update, no_update, *show(notice)
        return *refreshed_departments(admin), "", *show(notice)

    @app.callback(
        Output(IDs.Control.DEPARTMENTS_TABLE, "children", allow_duplicate=True),
        Output(IDs.Control.DEPARTMENT_RENAME_SELECT, "options", allow_duplicate=True),
        Output(IDs.Control.DEPARTMENT_RENAME_VALUE, "value"),
        *notice_outputs(),
        Input(IDs.Control.DEPARTMENT_RENAME_BTN, "n_clicks"),
        State(IDs.Control.DEPARTMENT_RENAME_SELECT, "value"),
        State(IDs.Control.DEPARTMENT_RENAME_VALUE, "value"),
        State(IDs.Store.SESSION, "data"),
        prevent_initial_call=True,
    )
    def rename_department(n_clicks, department_id, name, session_data):
        if not n_clicks or not department_id:
            raise dash.exceptions.PreventUpdate

        session = ctx.session(session_data)
        if session.profile is None or not exactly_super_admin(session.profile.role):
            raise dash.exceptions.PreventUpdate

        admin = ctx.admin(session)
        notice = admin.rename_department(department_id, name)
        if notice.kind != "success":
            return no_update, no_update, no_update, *show(notice)
        return *refreshed_departments(admin), "", *show(notice)

    @app.callback(
        Output(IDs.Control.DEPARTMENTS_TABLE, "children", allow_duplicate=True),
        Output(IDs.Control.DEPARTMENT_RENAME_SELECT, "options", allow_duplicate=True),
        *notice_outputs(),
        Input({"type": IDs.Pattern.DEPARTMENT_DELETE, "index": ALL}, "n_clicks"),
        State(IDs.Store.SESSION, "data"),
        prevent_initial_call=True,
    )
    def delete_department(n_clicks_list, session_data):
        department_id = clicked_pattern_index(n_clicks_list)
        if department_id is None:
            raise dash.exceptions.PreventUpdate

        session = ctx.session(session_data)
        if session.profile is None or not exactly_super_admin(session.profile.role):
            raise dash.exceptions.PreventUpdate

        admin = ctx.admin(session)
        notice = admin.delete_department(department_id)
        if notice.kind != "success":
            return no_update, no_update, *show(notice)
        return *refreshed_departments(admin), *show(notice)
