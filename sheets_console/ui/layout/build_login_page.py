from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import html

from sheets_console.ui.ids import IDs


def build_login_page() -> dbc.Row:
    return dbc.Row(
        dbc.Col(
            dbc.Card(
                dbc.CardBody(
                    [
                        html.H2("Welcome Back", className="text-center mb-4"),
                        dbc.Label("Email", html_for=IDs.Control.LOGIN_EMAIL),
                        dbc.Input(id=IDs.Control.LOGIN_EMAIL, type="email", className="mb-3"),
                        dbc.Label("Password", html_for=IDs.Control.LOGIN_PASSWORD),
                        dbc.Input(id=IDs.Control.LOGIN_PASSWORD, type="password", className="mb-2"),
                        html.Div(
                            dbc.Button(
                                "Forgot Password?",
                                id=IDs.Control.LOGIN_RESET_BTN,
                                color="link",
                                size="sm",
                                n_clicks=0,
                            ),
                            className="text-end mb-3",
                        ),
                        dbc.Button(
                            "Sign In",
                            id=IDs.Control.LOGIN_BTN,
                            color="primary",
                            className="w-100",
                            n_clicks=0,
                        ),
                    ]
                ),
                className="shadow",
            ),
            md=4,
        ),
        justify="center",
        className="mt-5",
    )
