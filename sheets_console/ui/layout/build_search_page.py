from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence

import dash_bootstrap_components as dbc
from dash import dcc, html

from sheets_console.core.filter_state import FilterState
from sheets_console.core.search import ALL, distinct_values
from sheets_console.ui.ids import IDs, dataset_card_id, filter_dropdown_id


def build_search_page() -> html.Div:
    """
    Search page skeleton. The dataset list, unlock panel, filters and
    results are filled in by the search callbacks.
    """
    datasets_card = dbc.Card(
        [
            dbc.CardHeader("Select a Database"),
            dbc.CardBody(
                dcc.Loading(html.Div(id=IDs.Control.DATASET_LIST), type="dot"),
            ),
        ],
        className="mb-3",
    )

    unlock_card = dbc.Card(
        dbc.CardBody(
            [
                dbc.Label("Database password", html_for=IDs.Control.UNLOCK_PASSWORD),
                dbc.InputGroup(
                    [
                        dbc.Input(id=IDs.Control.UNLOCK_PASSWORD, type="password"),
                        dbc.Button("Unlock", id=IDs.Control.UNLOCK_BTN, color="primary", n_clicks=0),
                    ]
                ),
                html.Div(id=IDs.Control.UNLOCK_STATUS, className="small text-danger mt-2"),
            ]
        ),
        id=IDs.Control.UNLOCK_PANEL,
        className="mb-3",
        style={"display": "none"},
    )

    filters_card = dbc.Card(
        [
            dbc.CardHeader(
                html.Div(
                    [
                        html.Span("Search Filters", className="fw-semibold"),
                        dbc.DropdownMenu(
                            html.Div(
                                dbc.Checklist(id=IDs.Control.COLUMN_PICKER, options=[], value=[]),
                                className="px-3 py-2",
                                style={"maxHeight": "240px", "overflowY": "auto"},
                            ),
                            label="Add Filters",
                            size="sm",
                            color="light",
                            align_end=True,
                        ),
                    ],
                    className="d-flex justify-content-between align-items-center",
                )
            ),
            dbc.CardBody(
                [
                    dbc.Label("Search Input", html_for=IDs.Control.SEARCH_INPUT),
                    dbc.Input(
                        id=IDs.Control.SEARCH_INPUT,
                        placeholder="Type to search all data...",
                        debounce=False,
                        className="mb-3",
                    ),
                    dbc.Row(id=IDs.Control.FILTER_CONTAINER, className="g-3"),
                ]
            ),
        ],
        className="mb-3",
    )

    results_card = dbc.Card(
        [
            dbc.CardHeader(
                html.Div(
                    [
                        html.Span(id=IDs.Control.RESULTS_TITLE, className="fw-semibold"),
                        dbc.ButtonGroup(
                            [
                                dbc.Button("Export as CSV", id=IDs.Control.EXPORT_CSV_BTN, size="sm", n_clicks=0),
                                dbc.Button("Export as PDF", id=IDs.Control.EXPORT_PDF_BTN, size="sm", n_clicks=0),
                            ]
                        ),
                    ],
                    className="d-flex justify-content-between align-items-center",
                )
            ),
            dbc.CardBody(dcc.Loading(html.Div(id=IDs.Control.RESULTS_TABLE), type="default")),
            dcc.Download(id=IDs.Control.DOWNLOAD),
        ],
    )

    return html.Div(
        [
            datasets_card,
            unlock_card,
            html.Div([filters_card, results_card], id=IDs.Control.SEARCH_PANEL, style={"display": "none"}),
        ],
        className="shc-search",
    )


def dataset_cards(groups: Mapping[str, Sequence[Mapping[str, Any]]], selected_id: Optional[str]):
    """Buttons for every dataset, grouped under their department."""
    if not groups:
        return html.P("No databases available.", className="text-muted")

    sections = []
    for department, summaries in groups.items():
        buttons = [
            dbc.Button(
                s["name"],
                id=dataset_card_id(s["id"]),
                color="primary" if s["id"] == selected_id else "light",
                className="me-2 mb-2",
                n_clicks=0,
            )
            for s in summaries
        ]
        sections.append(
            html.Div(
                [html.H6(department or "Unassigned", className="text-muted mt-2"), html.Div(buttons)],
            )
        )
    return sections


def filter_controls(state: FilterState, rows: Sequence[Mapping[str, Any]]) -> List[dbc.Col]:
    """One dropdown per visible filter column, seeded with its distinct values."""
    controls = []
    for col in state.visible_filters:
        options = [{"label": str(v), "value": v} for v in distinct_values(rows, col)]
        controls.append(
            dbc.Col(
                [
                    dbc.Label(col),
                    dcc.Dropdown(
                        id=filter_dropdown_id(col),
                        options=options,
                        value=state.column_filters.get(col, ALL),
                        clearable=False,
                    ),
                ],
                md=3,
            )
        )
    return controls


def column_picker_options(state: FilterState) -> List[Dict[str, str]]:
    return [{"label": c, "value": c} for c in state.extra_columns]
