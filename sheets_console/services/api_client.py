from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

import requests

from sheets_console.core.exceptions import ApiError
from sheets_console.core.models import UserProfile

logger = logging.getLogger(__name__)


class ApiClient:
    """
    Thin JSON client for the sheets REST API.

    Every failure (no connection, timeout, non-2xx) surfaces as ApiError,
    carrying the server's `message` field when it sent one.
    """

    def __init__(
            self,
            base_url: str,
            *,
            timeout: float = 30.0,
            token: Optional[str] = None,
            session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.token = token
        self.session = session or requests.Session()

    def _request(
            self,
            method: str,
            path: str,
            *,
            json: Any = None,
            data: Optional[Mapping[str, Any]] = None,
            files: Optional[Mapping[str, Any]] = None,
            token: Optional[str] = None,
    ) -> Any:
        url = f"{self.base_url}{path}"
        headers = {}
        bearer = token or self.token
        if bearer:
            headers["Authorization"] = f"Bearer {bearer}"

        try:
            response = self.session.request(
                method, url, json=json, data=data, files=files, headers=headers, timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("API request failed", extra={"method": method, "path": path, "error": str(e)})
            raise ApiError(f"Could not reach the server: {e}") from e

        if not response.ok:
            message = _error_message(response)
            logger.warning(
                "API returned an error",
                extra={"method": method, "path": path, "status": response.status_code},
            )
            raise ApiError(message, status=response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ApiError("Server returned invalid JSON", status=response.status_code) from e

    # ------------------------------------------------------------------
    # Auth / account
    # ------------------------------------------------------------------
    def login(self, id_token: str) -> UserProfile:
        data = self._request("POST", "/api/auth/login", token=id_token)
        try:
            return UserProfile.from_dict((data or {})["user"])
        except (KeyError, TypeError, ValueError) as e:
            raise ApiError(f"Malformed login response: {e}") from e

    def update_account(self, user_id: str, fields: Mapping[str, Any]) -> Dict[str, Any]:
        data = self._request("PATCH", f"/api/account/user/{user_id}", json=dict(fields))
        return (data or {}).get("updatedUser") or {}

    def change_password(self, user_id: str, current_password: str, new_password: str) -> None:
        self._request(
            "PATCH",
            f"/api/account/user/{user_id}/password",
            json={"current_password": current_password, "new_password": new_password},
        )

    # ------------------------------------------------------------------
    # Databases
    # ------------------------------------------------------------------
    def list_sheets(self) -> List[Dict[str, Any]]:
        data = self._request("GET", "/api/database/databases")
        return list((data or {}).get("sheets") or [])

    def fetch_rows(self, sheet_id: str) -> List[Dict[str, Any]]:
        data = self._request("GET", f"/api/database/{sheet_id}")
        if not isinstance(data, list):
            raise ApiError("Expected a list of rows")
        return data

    def confirm_password(self, sheet_id: str, input_password: str) -> None:
        self._request(
            "POST",
            "/api/database/confirm-password",
            json={"sheet_id": sheet_id, "input_password": input_password},
        )

    def create_database(self, payload: Mapping[str, Any]) -> None:
        self._request("POST", "/api/database/databases", json=dict(payload))

    def append_rows(self, sheet_id: str, tab_name: str, rows: Sequence[Sequence[Any]]) -> None:
        self._request(
            "POST",
            "/api/database/append-rows",
            json={"sheet_id": sheet_id, "tab_name": tab_name, "rows": [list(r) for r in rows]},
        )

    def upload_csv(self, sheet_id: str, database_name: str, content: bytes, filename: str = "upload.csv") -> None:
        """Multipart upload; the server appends the file's rows to the sheet."""
        self._request(
            "POST",
            "/api/database/upload-csv",
            data={"sheet_id": sheet_id, "database_name": database_name},
            files={"file": (filename, content, "text/csv")},
        )

    # ------------------------------------------------------------------
    # Departments
    # ------------------------------------------------------------------
    def list_departments(self) -> List[Dict[str, Any]]:
        data = self._request("GET", "/api/super-admin/departments")
        return list((data or {}).get("departments") or [])

    def create_department(self, name: str) -> None:
        self._request("POST", "/api/super-admin/department", json={"department_name": name})

    def update_department(self, department_id: str, name: str) -> None:
        self._request("PATCH", f"/api/super-admin/department/{department_id}", json={"department_name": name})

    def delete_department(self, department_id: str) -> None:
        self._request("DELETE", f"/api/super-admin/department/{department_id}")

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------
    def list_users(self) -> List[Dict[str, Any]]:
        data = self._request("GET", "/api/super-admin/users")
        return list((data or {}).get("users") or [])

    def create_user(self, payload: Mapping[str, Any]) -> None:
        self._request("POST", "/api/super-admin/user", json=dict(payload))

    def update_user(self, user_id: str, fields: Mapping[str, Any]) -> None:
        self._request("PATCH", f"/api/super-admin/user/{user_id}", json=dict(fields))

    def delete_user(self, user_id: str) -> None:
        self._request("DELETE", f"/api/super-admin/user/{user_id}")


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.reason or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or response.reason or "")
    return response.reason or f"HTTP {response.status_code}"
