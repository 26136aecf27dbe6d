from __future__ import annotations

from typing import Optional, Sequence

import dash_bootstrap_components as dbc
from dash import html

from sheets_console.core.models import Department, ManagedUser, UserProfile
from sheets_console.core.roles import Role, at_least_admin, exactly_super_admin
from sheets_console.services.admin_service import format_created_at
from sheets_console.ui.helpers import simple_table
from sheets_console.ui.ids import IDs, department_delete_id, user_delete_id
from sheets_console.validation.forms import USER_EDIT_FIELDS

ACCOUNT_FIELDS = [
    ("username", "Username"),
    ("first_name", "First Name"),
    ("last_name", "Last Name"),
    ("email", "Email"),
    ("role", "Role"),
    ("department", "Department"),
]


def build_side_tabs(profile: Optional[UserProfile], active_path: str) -> dbc.Nav:
    role = profile.role if profile else None
    tabs = [("Account", "/settings/account")]
    if at_least_admin(role):
        tabs.append(("Account Management", "/settings/management"))
    if exactly_super_admin(role):
        tabs.append(("Department Management", "/settings/department"))

    links = [dbc.NavLink(label, href=path, active=path == active_path) for label, path in tabs]
    return dbc.Nav(links, vertical=True, pills=True, className="bg-white rounded shadow-sm p-2")


def build_settings_page(profile: Optional[UserProfile], active_path: str, body) -> dbc.Row:
    return dbc.Row(
        [
            dbc.Col(build_side_tabs(profile, active_path), md=2),
            dbc.Col(dbc.Card(dbc.CardBody(body)), md=10),
        ],
        className="gx-3",
    )


def account_details(profile: Optional[UserProfile]):
    rows = []
    for key, label in ACCOUNT_FIELDS:
        value = getattr(profile, key, None) if profile else None
        rows.append(html.Tr([html.Th(label, className="text-muted fw-normal"), html.Td(value or "-")]))
    return dbc.Table(html.Tbody(rows), borderless=True, size="sm")


def build_account_panel(profile: Optional[UserProfile]) -> html.Div:
    restricted = profile is None or profile.tier is Role.USER
    editable = [] if restricted else [
        {"label": label, "value": key} for key, label in ACCOUNT_FIELDS if key not in ("role", "department")
    ]

    edit_block = []
    if editable:
        edit_block = [
            html.H5("Edit profile", className="mt-4"),
            dbc.Row(
                [
                    dbc.Col(dbc.Select(id=IDs.Control.ACCOUNT_FIELD, options=editable, value=editable[0]["value"]), md=3),
                    dbc.Col(dbc.Input(id=IDs.Control.ACCOUNT_VALUE), md=6),
                    dbc.Col(dbc.Button("Save", id=IDs.Control.ACCOUNT_SAVE_BTN, n_clicks=0), md=3),
                ],
                className="g-2",
            ),
        ]

    return html.Div(
        [
            html.H3("Account Settings", className="mb-3"),
            html.Div(account_details(profile), id=IDs.Control.ACCOUNT_DETAILS),
            *edit_block,
            html.H5("Change password", className="mt-4"),
            dbc.Input(id=IDs.Control.PW_CURRENT, type="password", placeholder="Current Password", className="mb-2"),
            dbc.Input(id=IDs.Control.PW_NEW, type="password", placeholder="New Password", className="mb-2"),
            dbc.Input(id=IDs.Control.PW_CONFIRM, type="password", placeholder="Confirm Password", className="mb-2"),
            dbc.Button("Update password", id=IDs.Control.PW_SAVE_BTN, n_clicks=0),
        ]
    )


def users_table(users: Sequence[ManagedUser], current: Optional[UserProfile]):
    current_id = current.id if current else None
    body = []
    for u in users:
        if u.id == current_id:
            action = html.Span("You", className="text-muted fst-italic")
        else:
            action = dbc.Button("Delete", id=user_delete_id(u.id), color="link", size="sm", className="text-danger", n_clicks=0)
        body.append([u.first_name, u.last_name, u.email, u.role, u.department or "-", action])
    return simple_table(
        ["First Name", "Last Name", "Email", "Role", "Department", "Actions"],
        body,
        "No users found.",
    )


def user_options(users: Sequence[ManagedUser]):
    return [{"label": f"{u.first_name} {u.last_name} ({u.email})", "value": u.id} for u in users]


def user_edit_fields(current: Optional[UserProfile]):
    is_super = current is not None and current.tier is Role.SUPER_ADMIN
    return [
        {"label": label, "value": key}
        for key, label in ACCOUNT_FIELDS
        if key in USER_EDIT_FIELDS and (is_super or key != "department")
    ]


def build_account_management_panel(
        users: Sequence[ManagedUser],
        current: Optional[UserProfile],
        departments: Sequence[Department],
) -> html.Div:
    is_super = current is not None and current.tier is Role.SUPER_ADMIN
    role_options = [{"label": r.value, "value": r.value} for r in Role if is_super or r is not Role.SUPER_ADMIN]

    # Always rendered so the add-user callback can read it; admins never pick one.
    department_field = dbc.Col(
        dbc.Select(
            id=IDs.Control.USER_DEPARTMENT,
            options=[{"label": d.name, "value": d.name} for d in departments],
            placeholder="Department",
        ),
        md=2,
        style=None if is_super else {"display": "none"},
    )

    form = dbc.Row(
        [
            dbc.Col(dbc.Input(id=IDs.Control.USER_FIRST, placeholder="First Name"), md=2),
            dbc.Col(dbc.Input(id=IDs.Control.USER_LAST, placeholder="Last Name"), md=2),
            dbc.Col(dbc.Input(id=IDs.Control.USER_EMAIL, type="email", placeholder="Email"), md=2),
            dbc.Col(dbc.Input(id=IDs.Control.USER_PASSWORD, type="password", placeholder="Password"), md=2),
            dbc.Col(dbc.Select(id=IDs.Control.USER_ROLE, options=role_options, placeholder="Role"), md=1),
            department_field,
            dbc.Col(dbc.Button("Add User", id=IDs.Control.USER_ADD_BTN, color="primary", n_clicks=0), md=1),
        ],
        className="g-2 mb-3",
    )

    fields = user_edit_fields(current)
    edit_form = dbc.Row(
        [
            dbc.Col(dbc.Select(id=IDs.Control.USER_EDIT_SELECT, options=user_options(users), placeholder="User"), md=4),
            dbc.Col(dbc.Select(id=IDs.Control.USER_EDIT_FIELD, options=fields, value=fields[0]["value"]), md=2),
            dbc.Col(dbc.Input(id=IDs.Control.USER_EDIT_VALUE, placeholder="New value"), md=4),
            dbc.Col(dbc.Button("Save", id=IDs.Control.USER_EDIT_BTN, n_clicks=0), md=2),
        ],
        className="g-2 mb-3",
    )

    return html.Div(
        [
            html.H3("Account Management", className="mb-3"),
            form,
            html.H5("Edit user"),
            edit_form,
            html.Div(users_table(users, current), id=IDs.Control.USERS_TABLE),
        ]
    )


def departments_table(departments: Sequence[Department]):
    body = [
        [
            d.name,
            format_created_at(d.created_at),
            dbc.Button("Delete", id=department_delete_id(d.id), color="link", size="sm", className="text-danger", n_clicks=0),
        ]
        for d in departments
    ]
    return simple_table(["Department Name", "Created", "Actions"], body, "No departments found.")


def department_options(departments: Sequence[Department]):
    return [{"label": d.name, "value": d.id} for d in departments]


def build_department_panel(departments: Sequence[Department]) -> html.Div:
    return html.Div(
        [
            html.H3("Department Management", className="mb-3"),
            dbc.InputGroup(
                [
                    dbc.Input(id=IDs.Control.DEPARTMENT_NAME, placeholder="Department name"),
                    dbc.Button("Add Department", id=IDs.Control.DEPARTMENT_ADD_BTN, color="primary", n_clicks=0),
                ],
                className="mb-3",
            ),
            dbc.InputGroup(
                [
                    dbc.Select(
                        id=IDs.Control.DEPARTMENT_RENAME_SELECT,
                        options=department_options(departments),
                        placeholder="Department to rename",
                    ),
                    dbc.Input(id=IDs.Control.DEPARTMENT_RENAME_VALUE, placeholder="New name"),
                    dbc.Button("Rename", id=IDs.Control.DEPARTMENT_RENAME_BTN, n_clicks=0),
                ],
                className="mb-3",
            ),
            html.Div(departments_table(departments), id=IDs.Control.DEPARTMENTS_TABLE),
        ]
    )
