from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence

from sheets_console.core.exceptions import ApiError
from sheets_console.core.models import Department, ManagedUser, Notice, UserProfile
from sheets_console.core.roles import Role
from sheets_console.core.search import NOT_AVAILABLE
from sheets_console.services.api_client import ApiClient
from sheets_console.validation.errors import ValidationError
from sheets_console.validation.forms import (
    validate_department_name,
    validate_new_database,
    validate_new_user,
    validate_row,
    validate_user_update,
)

logger = logging.getLogger(__name__)

NO_DEPARTMENT = "N/A"


def visible_users(users: Sequence[ManagedUser], current: Optional[UserProfile]) -> List[ManagedUser]:
    """
    Users the current account may manage, with the current user first.

    Admins only see non-super-admin users of their own department.
    """
    scoped = list(users)
    if current is not None and current.tier is Role.ADMIN:
        scoped = [
            u for u in scoped
            if Role.parse(u.role) is not Role.SUPER_ADMIN and u.department == current.department
        ]

    current_id = current.id if current is not None else None
    me = [u for u in scoped if u.id == current_id]
    others = [u for u in scoped if u.id != current_id]
    return me + others


def build_new_user_payload(form: Mapping[str, Any], current: Optional[UserProfile]) -> Dict[str, Any]:
    """Validate the add-user form and build the POST body."""
    creator_role = current.role if current is not None else None
    validate_new_user(form, creator_role)

    is_super = Role.parse(creator_role) is Role.SUPER_ADMIN
    return {
        "email": form["email"].strip(),
        "password": form["password"],
        "first_name": form["first_name"].strip(),
        "last_name": form["last_name"].strip(),
        "role": Role.parse(form["role"]).value,
        "department": form.get("department") if is_super else NO_DEPARTMENT,
    }


def format_created_at(timestamp: Any) -> str:
    """Server timestamps look like {"_seconds": 1700000000, "_nanoseconds": 0}."""
    if not timestamp or not isinstance(timestamp, Mapping):
        return NOT_AVAILABLE
    seconds = timestamp.get("_seconds") or timestamp.get("seconds")
    if not seconds:
        return NOT_AVAILABLE
    try:
        return datetime.fromtimestamp(float(seconds)).strftime("%Y-%m-%d %H:%M:%S")
    except (TypeError, ValueError, OverflowError, OSError):
        return NOT_AVAILABLE


class AdminService:
    """
    User, department and database management screens.

    Each action validates first, then calls the API. Failures come back as
    a Notice; nothing local changes unless the call succeeded.
    """

    def __init__(self, api: ApiClient):
        self.api = api

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------
    def list_users(self, current: Optional[UserProfile]) -> List[ManagedUser]:
        try:
            raw = self.api.list_users()
        except ApiError as e:
            logger.error("Failed to fetch users", extra={"error": str(e)})
            return []
        return visible_users([ManagedUser.from_dict(u) for u in raw], current)

    def add_user(self, form: Mapping[str, Any], current: Optional[UserProfile]) -> Notice:
        try:
            payload = build_new_user_payload(form, current)
        except ValidationError as e:
            return Notice(e.first_message, "error")
        try:
            self.api.create_user(payload)
        except ApiError as e:
            logger.error("Error submitting user", extra={"error": str(e)})
            return Notice("Failed to add user.", "error")
        logger.info("User added", extra={"role": payload["role"], "department": payload["department"]})
        return Notice("User added successfully.", "success")

    def update_user(
            self,
            user_id: Optional[str],
            field: Optional[str],
            value: Optional[str],
            current: Optional[UserProfile],
    ) -> Notice:
        if not user_id:
            return Notice("Select a user to edit.", "error")
        value = (value or "").strip()
        try:
            validate_user_update(field, value, current.role if current is not None else None)
        except ValidationError as e:
            return Notice(e.first_message, "error")
        if field == "role" and current is not None and current.id == user_id:
            return Notice("You cannot change your own role.", "error")

        if field == "role":
            value = Role.parse(value).value
        try:
            self.api.update_user(user_id, {field: value})
        except ApiError as e:
            logger.error("Error updating user", extra={"user_id": user_id, "field": field, "error": str(e)})
            return Notice(e.message or "Failed to update user.", "error")
        logger.info("User updated", extra={"user_id": user_id, "field": field})
        return Notice("User updated.", "success")

    def delete_user(self, user_id: str, current: Optional[UserProfile]) -> Notice:
        if current is not None and current.id == user_id:
            return Notice("You cannot delete your own account.", "error")
        try:
            self.api.delete_user(user_id)
        except ApiError as e:
            logger.error("Error deleting user", extra={"user_id": user_id, "error": str(e)})
            return Notice("Failed to delete user.", "error")
        return Notice("User deleted.", "success")

    # ------------------------------------------------------------------
    # Departments
    # ------------------------------------------------------------------
    def list_departments(self) -> List[Department]:
        try:
            raw = self.api.list_departments()
        except ApiError as e:
            logger.error("Failed to fetch departments", extra={"error": str(e)})
            return []
        return [Department.from_dict(d) for d in raw]

    def add_department(self, name: Optional[str]) -> Notice:
        try:
            validate_department_name(name)
        except ValidationError as e:
            return Notice(e.first_message, "error")
        try:
            self.api.create_department(name.strip())
        except ApiError as e:
            logger.error("Error creating department", extra={"error": str(e)})
            return Notice(e.message or "Failed to add department.", "error")
        return Notice("Department added.", "success")

    def rename_department(self, department_id: str, name: Optional[str]) -> Notice:
        try:
            validate_department_name(name)
        except ValidationError as e:
            return Notice(e.first_message, "error")
        try:
            self.api.update_department(department_id, name.strip())
        except ApiError as e:
            logger.error("Error renaming department", extra={"department_id": department_id, "error": str(e)})
            return Notice(e.message or "Failed to update department.", "error")
        return Notice("Department updated.", "success")

    def delete_department(self, department_id: str) -> Notice:
        try:
            self.api.delete_department(department_id)
        except ApiError as e:
            logger.error("Error deleting department", extra={"department_id": department_id, "error": str(e)})
            return Notice(e.message or "Failed to delete department.", "error")
        return Notice("Department deleted.", "success")

    # ------------------------------------------------------------------
    # Databases
    # ------------------------------------------------------------------
    def create_database(
            self,
            *,
            name: Optional[str],
            password: Optional[str],
            department: Optional[str],
            columns: Sequence[str],
            current: Optional[UserProfile],
    ) -> Notice:
        created_by = current.full_name if current is not None else ""
        try:
            validate_new_database(name, password, department, created_by, columns)
        except ValidationError as e:
            return Notice(e.first_message, "error")

        payload = {
            "database_name": name,
            "department_name": department,
            "created_by": created_by,
            "database_password": password,
            "columns": [c.strip() for c in columns if c and c.strip()],
        }
        try:
            self.api.create_database(payload)
        except ApiError as e:
            logger.error("Error creating database", extra={"database": name, "error": str(e)})
            return Notice(e.message or "Failed to create sheet.", "error")
        return Notice("Database created.", "success")

    def append_row(self, sheet_id: str, tab_name: str, values: Sequence[Any]) -> Notice:
        try:
            validate_row(values)
        except ValidationError as e:
            return Notice(e.first_message, "error")
        try:
            self.api.append_rows(sheet_id, tab_name, [list(values)])
        except ApiError as e:
            logger.error("Error appending row", extra={"sheet_id": sheet_id, "error": str(e)})
            return Notice(e.message or "Failed to append row.", "error")
        return Notice("Row added successfully!", "success")

    def upload_csv(self, sheet_id: str, database_name: str, filename: Optional[str], content: Optional[bytes]) -> Notice:
        if not content:
            return Notice("No file selected.", "error")
        try:
            self.api.upload_csv(sheet_id, database_name, content, filename or "upload.csv")
        except ApiError as e:
            logger.error("Error uploading CSV", extra={"sheet_id": sheet_id, "error": str(e)})
            return Notice(e.message or "CSV upload failed.", "error")
        logger.info("CSV uploaded", extra={"sheet_id": sheet_id, "size": len(content)})
        return Notice("CSV uploaded successfully!", "success")
