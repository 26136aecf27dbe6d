from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional

import dash
from dash import ALL, Input, Output, State, dcc, no_update

from sheets_console.core.dataset import Dataset
from sheets_console.core.exceptions import ApiError, IncorrectPasswordError, StaleResponseError
from sheets_console.core.filter_state import FilterState
from sheets_console.core.models import DatasetSummary, Notice
from sheets_console.core.search import apply_filters
from sheets_console.ui.callbacks.callbacks_utils import clicked_pattern_index, notice_outputs, show
from sheets_console.ui.helpers import rows_table
from sheets_console.ui.ids import IDs
from sheets_console.ui.layout.build_search_page import (
    column_picker_options,
    dataset_cards,
    filter_controls,
)

if TYPE_CHECKING:
    from sheets_console.ui.context import AppContext

logger = logging.getLogger(__name__)

HIDDEN = {"display": "none"}
SHOWN: dict = {}


def current_dataset(loaded_data: Optional[Mapping[str, Any]], selected_data: Optional[Mapping[str, Any]]) -> Optional[Dataset]:
    """
    The loaded dataset, but only if it belongs to the current selection.
    A late unlock response for a previously selected dataset is ignored.
    """
    if not loaded_data or not selected_data:
        return None
    dataset = Dataset.from_dict(loaded_data)
    if dataset.id != selected_data.get("id"):
        logger.info(
            "Ignoring stale dataset rows",
            extra={"loaded": dataset.id, "selected": selected_data.get("id")},
        )
        return None
    return dataset


def visible_rows(dataset: Optional[Dataset], filter_data: Optional[Mapping[str, Any]]) -> List[Mapping[str, Any]]:
    if dataset is None:
        return []
    state = FilterState.from_dict(filter_data or {})
    if state.dataset_id and state.dataset_id != dataset.id:
        state = FilterState.for_columns(dataset.id, dataset.columns)
    return apply_filters(dataset.rows, state.column_filters, state.free_text)


def _find_summary(groups: Optional[Mapping[str, List[Dict[str, Any]]]], dataset_id: str) -> Optional[DatasetSummary]:
    for summaries in (groups or {}).values():
        for s in summaries:
            if s.get("id") == dataset_id:
                return DatasetSummary(**s)
    return None


def register_search_callbacks(app: dash.Dash, ctx: AppContext) -> None:
    # ---------------------------------------------------------
    # Fetch and group datasets when the search page mounts
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.DATASETS, "data"),
        Output(IDs.Store.SELECTED_DATASET, "data", allow_duplicate=True),
        Output(IDs.Store.LOADED_DATASET, "data", allow_duplicate=True),
        Output(IDs.Store.FILTER_STATE, "data", allow_duplicate=True),
        Input(IDs.Control.DATASET_LIST, "id"),
        State(IDs.Store.SESSION, "data"),
        prevent_initial_call="initial_duplicate",
    )
    def load_datasets(_mounted, session_data):
        session = ctx.session(session_data)
        if not session.is_authenticated:
            raise dash.exceptions.PreventUpdate

        groups = ctx.directory(session).list_datasets()
        data = {dept: [s.to_dict() for s in summaries] for dept, summaries in groups.items()}
        return data, None, None, None

    @app.callback(
        Output(IDs.Control.DATASET_LIST, "children"),
        Input(IDs.Store.DATASETS, "data"),
        Input(IDs.Store.SELECTED_DATASET, "data"),
    )
    def render_dataset_list(groups, selected):
        selected_id = (selected or {}).get("id")
        return dataset_cards(groups or {}, selected_id)

    # ---------------------------------------------------------
    # Selecting a dataset resets unlock state, rows and filters
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.SELECTED_DATASET, "data", allow_duplicate=True),
        Output(IDs.Store.LOADED_DATASET, "data", allow_duplicate=True),
        Output(IDs.Store.FILTER_STATE, "data", allow_duplicate=True),
        Output(IDs.Control.UNLOCK_PASSWORD, "value"),
        Output(IDs.Control.SEARCH_INPUT, "value"),
        Input({"type": IDs.Pattern.DATASET_CARD, "index": ALL}, "n_clicks"),
        State(IDs.Store.SELECTED_DATASET, "data"),
        prevent_initial_call=True,
    )
    def select_dataset(n_clicks_list, selected):
        dataset_id = clicked_pattern_index(n_clicks_list)
        if dataset_id is None:
            raise dash.exceptions.PreventUpdate
        if (selected or {}).get("id") == dataset_id:
            raise dash.exceptions.PreventUpdate
        return {"id": dataset_id}, None, None, "", ""

    @app.callback(
        Output(IDs.Control.UNLOCK_PANEL, "style"),
        Output(IDs.Control.SEARCH_PANEL, "style"),
        Output(IDs.Control.UNLOCK_STATUS, "children", allow_duplicate=True),
        Input(IDs.Store.SELECTED_DATASET, "data"),
        Input(IDs.Store.LOADED_DATASET, "data"),
        prevent_initial_call="initial_duplicate",
    )
    def toggle_panels(selected, loaded):
        if not selected:
            return HIDDEN, HIDDEN, ""
        if current_dataset(loaded, selected) is None:
            return SHOWN, HIDDEN, ""
        return HIDDEN, SHOWN, ""

    # ---------------------------------------------------------
    # Unlock: password check on the server, then fetch rows
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.LOADED_DATASET, "data", allow_duplicate=True),
        Output(IDs.Store.FILTER_STATE, "data", allow_duplicate=True),
        Output(IDs.Control.COLUMN_PICKER, "options"),
        Output(IDs.Control.COLUMN_PICKER, "value"),
        Output(IDs.Control.UNLOCK_STATUS, "children", allow_duplicate=True),
        *notice_outputs(),
        Input(IDs.Control.UNLOCK_BTN, "n_clicks"),
        State(IDs.Control.UNLOCK_PASSWORD, "value"),
        State(IDs.Store.SELECTED_DATASET, "data"),
        State(IDs.Store.DATASETS, "data"),
        State(IDs.Store.SESSION, "data"),
        prevent_initial_call=True,
    )
    def unlock_dataset(n_clicks, password, selected, groups, session_data):
        if not n_clicks or not selected:
            raise dash.exceptions.PreventUpdate

        summary = _find_summary(groups, selected.get("id"))
        if summary is None:
            raise dash.exceptions.PreventUpdate

        session = ctx.session(session_data)
        directory = ctx.directory(session)
        directory.select(summary)

        unchanged = (no_update, no_update, no_update, no_update)
        try:
            dataset = directory.unlock(summary, password or "")
        except IncorrectPasswordError:
            return (*unchanged, "Incorrect password.", *show(None))
        except StaleResponseError:
            raise dash.exceptions.PreventUpdate
        except ApiError as e:
            return (*unchanged, "", *show(Notice(f"Failed to load rows: {e.message}", "error")))

        state = FilterState.for_columns(dataset.id, dataset.columns, ctx.config.default_visible_filters)
        return (
            dataset.to_dict(),
            state.to_dict(),
            column_picker_options(state),
            [],
            "",
            *show(None),
        )

    # ---------------------------------------------------------
    # Filter dropdowns: defaults plus columns picked in "Add Filters"
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.FILTER_CONTAINER, "children"),
        Output(IDs.Store.FILTER_STATE, "data", allow_duplicate=True),
        Input(IDs.Control.COLUMN_PICKER, "value"),
        Input(IDs.Store.LOADED_DATASET, "data"),
        State(IDs.Store.FILTER_STATE, "data"),
        State(IDs.Store.SELECTED_DATASET, "data"),
        prevent_initial_call=True,
    )
    def render_filter_controls(picked, loaded, filter_data, selected):
        dataset = current_dataset(loaded, selected)
        if dataset is None:
            return [], no_update

        state = FilterState.from_dict(filter_data or {})
        if state.dataset_id != dataset.id:
            state = FilterState.for_columns(dataset.id, dataset.columns, ctx.config.default_visible_filters)

        wanted = set(picked or [])
        shown_extras = set(state.visible_filters) - set(state.default_visible)
        for col in state.extra_columns:
            if (col in wanted) != (col in shown_extras):
                state.toggle_column(col)

        return filter_controls(state, dataset.rows), state.to_dict()

    @app.callback(
        Output(IDs.Store.FILTER_STATE, "data", allow_duplicate=True),
        Input({"type": IDs.Pattern.FILTER, "index": ALL}, "value"),
        Input(IDs.Control.SEARCH_INPUT, "value"),
        State({"type": IDs.Pattern.FILTER, "index": ALL}, "id"),
        State(IDs.Store.FILTER_STATE, "data"),
        prevent_initial_call=True,
    )
    def update_filter_values(values, free_text, ids, filter_data):
        if not filter_data:
            raise dash.exceptions.PreventUpdate
        state = FilterState.from_dict(filter_data)
        for comp_id, value in zip(ids or [], values or []):
            state.set_filter(comp_id["index"], value)
        state.free_text = free_text or ""
        return state.to_dict()

    # ---------------------------------------------------------
    # Results
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.RESULTS_TITLE, "children"),
        Output(IDs.Control.RESULTS_TABLE, "children"),
        Input(IDs.Store.FILTER_STATE, "data"),
        State(IDs.Store.LOADED_DATASET, "data"),
        State(IDs.Store.SELECTED_DATASET, "data"),
    )
    def render_results(filter_data, loaded, selected):
        dataset = current_dataset(loaded, selected)
        if dataset is None:
            return "Results (0)", []
        rows = visible_rows(dataset, filter_data)
        return f"Results ({len(rows)})", rows_table(dataset.to_frame(rows))

    # ---------------------------------------------------------
    # Export the filtered rows
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.DOWNLOAD, "data"),
        *notice_outputs(),
        Input(IDs.Control.EXPORT_CSV_BTN, "n_clicks"),
        Input(IDs.Control.EXPORT_PDF_BTN, "n_clicks"),
        State(IDs.Store.FILTER_STATE, "data"),
        State(IDs.Store.LOADED_DATASET, "data"),
        State(IDs.Store.SELECTED_DATASET, "data"),
        prevent_initial_call=True,
    )
    def export_rows(_csv_clicks, _pdf_clicks, filter_data, loaded, selected):
        triggered = dash.ctx.triggered_id
        if triggered not in (IDs.Control.EXPORT_CSV_BTN, IDs.Control.EXPORT_PDF_BTN):
            raise dash.exceptions.PreventUpdate

        dataset = current_dataset(loaded, selected)
        if dataset is None:
            raise dash.exceptions.PreventUpdate

        kind = "csv" if triggered == IDs.Control.EXPORT_CSV_BTN else "pdf"
        rows = visible_rows(dataset, filter_data)
        try:
            filename, payload = ctx.export_service.export(kind, rows, dataset.columns, dataset.name)
        except Exception:
            logger.exception("Export failed", extra={"dataset": dataset.name, "kind": kind})
            return (no_update, *show(Notice("Export failed.", "error")))

        return (dcc.send_bytes(payload, filename), *show(None))
