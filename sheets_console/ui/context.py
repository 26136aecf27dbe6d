from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from sheets_console.config.model import ConsoleConfig
from sheets_console.services.account_service import AccountService
from sheets_console.services.admin_service import AdminService
from sheets_console.services.api_client import ApiClient
from sheets_console.services.dataset_service import DatasetDirectory
from sheets_console.services.export_service import ExportService
from sheets_console.services.identity import IdentityProvider
from sheets_console.services.session_service import SessionStore
from sheets_console.services.storage import BrowserStoreStorage


@dataclass
class AppContext:
    """
    Holds shared services for the Dash app. This is passed into layout +
    callback registration functions instead of using module-level globals.

    Per-request objects (session, API client with the caller's token) are
    built from the browser stores by the helpers below.
    """
    config: ConsoleConfig
    identity: IdentityProvider
    export_service: ExportService

    def session(self, store_data: Optional[Mapping[str, Any]]) -> SessionStore:
        return SessionStore(BrowserStoreStorage(store_data), self.identity).hydrate()

    def api(self, session: Optional[SessionStore] = None) -> ApiClient:
        return ApiClient(
            self.config.api_base_url,
            timeout=self.config.request_timeout,
            token=session.token if session is not None else None,
        )

    def directory(self, session: SessionStore) -> DatasetDirectory:
        return DatasetDirectory(self.api(session), placeholder_name=self.config.placeholder_name)

    def admin(self, session: SessionStore) -> AdminService:
        return AdminService(self.api(session))

    def account(self, session: Optional[SessionStore] = None) -> AccountService:
        return AccountService(self.api(session), self.identity)
