from __future__ import annotations

from typing import Sequence

import dash_bootstrap_components as dbc
from dash import dcc, html

from sheets_console.core.models import Department
from sheets_console.ui.ids import IDs


def build_manage_page(departments: Sequence[Department]) -> dbc.Row:
    """
    Manage page: create a database, append a row to an existing one or
    upload a CSV of rows into it.
    The list of databases is filled by the manage callbacks.
    """
    department_options = [{"label": d.name, "value": d.name} for d in departments]

    create_card = dbc.Card(
        [
            dbc.CardHeader("Create New Google Sheet"),
            dbc.CardBody(
                [
                    dbc.Label("Database Title"),
                    dbc.Input(id=IDs.Control.DB_NAME, className="mb-2"),
                    dbc.Label("Database Password"),
                    dbc.Input(id=IDs.Control.DB_PASSWORD, type="password", className="mb-2"),
                    dbc.Label("Department"),
                    dbc.Select(
                        id=IDs.Control.DB_DEPARTMENT,
                        options=department_options,
                        placeholder="Select a department",
                        className="mb-2",
                    ),
                    dbc.Label("Columns (one per line)"),
                    dbc.Textarea(id=IDs.Control.DB_COLUMNS, className="mb-3", style={"height": "120px"}),
                    dbc.Button("Create", id=IDs.Control.DB_CREATE_BTN, color="primary", n_clicks=0),
                ]
            ),
        ],
        className="mb-3",
    )

    append_card = dbc.Card(
        [
            dbc.CardHeader("Add a Row"),
            dbc.CardBody(
                [
                    dbc.Label("Database"),
                    dbc.Select(id=IDs.Control.DB_APPEND_SELECT, options=[], className="mb-2"),
                    dbc.Label("Values (comma separated, in column order)"),
                    dbc.Input(id=IDs.Control.DB_APPEND_VALUES, className="mb-3"),
                    dbc.Button("Add Row", id=IDs.Control.DB_APPEND_BTN, color="primary", n_clicks=0),
                    html.Hr(),
                    dbc.Label("Or upload a CSV into the selected database"),
                    dcc.Upload(
                        id=IDs.Control.DB_UPLOAD,
                        children=html.Div(["Drag and drop or ", html.A("select a .csv file")]),
                        multiple=False,
                        accept=".csv,text/csv",
                        className="border rounded p-2 text-center mb-2",
                    ),
                    html.Div(id=IDs.Control.DB_UPLOAD_NAME, className="small text-muted mb-2"),
                    dbc.Button("Upload CSV", id=IDs.Control.DB_UPLOAD_BTN, color="secondary", n_clicks=0),
                ]
            ),
        ],
        className="mb-3",
    )

    list_card = dbc.Card(
        [
            dbc.CardHeader("Available Databases"),
            dbc.CardBody(html.Div(id=IDs.Control.MANAGE_LIST)),
        ]
    )

    return dbc.Row(
        [
            dbc.Col([create_card, append_card], md=5),
            dbc.Col(list_card, md=7),
        ],
        className="gx-3",
    )
