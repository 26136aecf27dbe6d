from __future__ import annotations

from typing import Optional

import dash_bootstrap_components as dbc
from dash import html

from sheets_console.core.models import UserProfile
from sheets_console.core.roles import at_least_admin, exactly_super_admin
from sheets_console.ui.ids import IDs


def build_navbar(title: str, profile: Optional[UserProfile]) -> dbc.Navbar:
    """Top bar; the user menu only lists pages the current role may open."""
    first_name = profile.first_name if profile and profile.first_name else "Guest"
    role = profile.role if profile else None

    menu = [
        dbc.DropdownMenuItem(f"Welcome, {first_name}", header=True),
        dbc.DropdownMenuItem("Account Settings", href="/settings/account"),
    ]
    if at_least_admin(role):
        menu.append(dbc.DropdownMenuItem("Account Management", href="/settings/management"))
    if exactly_super_admin(role):
        menu.append(dbc.DropdownMenuItem("Department Management", href="/settings/department"))
    menu += [
        dbc.DropdownMenuItem(divider=True),
        dbc.DropdownMenuItem("Logout", id=IDs.Control.LOGOUT_BTN, n_clicks=0),
    ]

    return dbc.Navbar(
        dbc.Container(
            fluid=True,
            children=[
                dbc.NavbarBrand(title, href="/home", className="fw-semibold"),
                html.Div(
                    dbc.DropdownMenu(
                        menu,
                        label=first_name,
                        align_end=True,
                        color="light",
                    ),
                    className="ms-auto",
                ),
            ],
        ),
        dark=False,
        className="shadow-sm shc-navbar",
    )
