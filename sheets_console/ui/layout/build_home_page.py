from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import dcc, html


def _tile(icon: str, title: str, href: str) -> dbc.Col:
    return dbc.Col(
        dcc.Link(
            dbc.Card(
                dbc.CardBody(
                    [html.Div(icon, className="display-4"), html.H4(title, className="mt-2")],
                    className="text-center",
                ),
                className="shadow-sm shc-tile",
            ),
            href=href,
            className="text-decoration-none",
        ),
        md=3,
    )


def build_home_page() -> dbc.Row:
    return dbc.Row(
        [
            _tile("🔍", "Search a Database", "/search"),
            _tile("🗂️", "Manage Database", "/manage"),
        ],
        justify="center",
        className="mt-5 gx-5",
    )


def build_not_found_page() -> html.Div:
    return html.Div(
        [
            html.H1("404", className="display-3"),
            html.P("The page you are looking for does not exist."),
            dcc.Link("Back to Home", href="/home"),
        ],
        className="text-center mt-5",
    )
