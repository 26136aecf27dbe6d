from __future__ import annotations

from typing import TYPE_CHECKING

import dash_bootstrap_components as dbc
from dash import dcc, html

from sheets_console.ui.ids import IDs

if TYPE_CHECKING:
    from sheets_console.ui.context import AppContext


def build_layout(ctx: AppContext):
    """
    Shell of the app: URL router, browser stores, navbar slot, the global
    notice and the page container filled by the routing callback.
    """
    return dbc.Container(
        fluid=True,
        className="shc-root",
        children=[
            dcc.Location(id=IDs.Page.LOCATION, refresh=False),

            # Survives reloads: token + serialized profile
            dcc.Store(id=IDs.Store.SESSION, storage_type="local"),

            # Owned by the search page while it is mounted
            dcc.Store(id=IDs.Store.DATASETS, storage_type="memory"),
            dcc.Store(id=IDs.Store.SELECTED_DATASET, storage_type="memory"),
            dcc.Store(id=IDs.Store.LOADED_DATASET, storage_type="memory"),
            dcc.Store(id=IDs.Store.FILTER_STATE, storage_type="memory"),

            html.Div(id=IDs.Page.NAVBAR),

            dbc.Alert(
                id=IDs.Page.NOTICE,
                is_open=False,
                dismissable=True,
                duration=4000,
                className="shc-notice position-fixed top-0 end-0 m-4",
                style={"zIndex": 1050, "minWidth": "280px"},
            ),

            dcc.Loading(
                html.Div(id=IDs.Page.CONTAINER, className="mt-3"),
                type="circle",
            ),
        ],
    )
