from __future__ import annotations

import logging
from pathlib import Path

import dash_bootstrap_components as dbc
from dash import Dash

from sheets_console.config import load_config
from sheets_console.services.export_service import ExportService
from sheets_console.services.identity import FirebaseRestIdentityProvider
from sheets_console.services.storage import LocalFileSystemStorage
from sheets_console.ui.context import AppContext
from sheets_console.ui.layout.build_layout import build_layout
from sheets_console.ui.callbacks.callbacks_auth import register_auth_callbacks
from sheets_console.ui.callbacks.callbacks_manage import register_manage_callbacks
from sheets_console.ui.callbacks.callbacks_routing import register_routing_callbacks
from sheets_console.ui.callbacks.callbacks_search import register_search_callbacks
from sheets_console.ui.callbacks.callbacks_settings import register_settings_callbacks

logger = logging.getLogger(__name__)


def create_dash_app(config_root: Path | str = Path("config")) -> Dash:
    config_root = Path(config_root)

    # 1) Load Config
    config = load_config(config_root)
    if not config.identity_api_key:
        logger.warning("No identity API key configured; sign in will fail")

    # 2) Initialize Service Layer
    identity = FirebaseRestIdentityProvider(config.identity_api_key, timeout=config.request_timeout)

    # Exports are archived on disk only when a state root is configured
    archive = LocalFileSystemStorage(config.state_root) if config.state_root else None
    export_service = ExportService(max_cell_chars=config.max_cell_chars, archive=archive)

    # 3) App Context
    ctx = AppContext(config=config, identity=identity, export_service=export_service)

    # Pages are swapped in by the router, so most callback targets are
    # absent from the initial layout.
    app = Dash(
        __name__,
        external_stylesheets=[dbc.themes.FLATLY],
        suppress_callback_exceptions=True,
    )
    app.title = config.ui_title

    app.layout = build_layout(ctx)

    # Register callbacks
    register_routing_callbacks(app, ctx)
    register_auth_callbacks(app, ctx)
    register_search_callbacks(app, ctx)
    register_manage_callbacks(app, ctx)
    register_settings_callbacks(app, ctx)

    logger.info("Dash app created", extra={"api_base_url": config.api_base_url})
    return app
