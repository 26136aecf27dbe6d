from __future__ import annotations

import logging
from typing import Optional

from sheets_console.core.exceptions import ApiError, AuthError
from sheets_console.core.models import Notice
from sheets_console.core.roles import Role
from sheets_console.services.api_client import ApiClient
from sheets_console.services.identity import IdentityProvider, describe_auth_error
from sheets_console.services.session_service import SessionStore
from sheets_console.validation.errors import ValidationError
from sheets_console.validation.forms import (
    is_valid_email,
    validate_account_field,
    validate_login,
    validate_password_change,
)

logger = logging.getLogger(__name__)

# Profile fields a plain user may not edit (password is always editable)
RESTRICTED_FIELDS = ("username", "first_name", "last_name", "email")


class AccountService:
    """
    Sign-in, password reset and self-service profile edits.
    """

    def __init__(self, api: ApiClient, identity: IdentityProvider):
        self.api = api
        self.identity = identity

    def sign_in(self, session: SessionStore, email: Optional[str], password: Optional[str]) -> Notice:
        try:
            validate_login(email, password)
        except ValidationError as e:
            return Notice(e.first_message, "error")

        try:
            id_token = self.identity.sign_in(email, password)
        except AuthError as e:
            logger.info("Sign-in rejected", extra={"code": e.code})
            return Notice(describe_auth_error(e.code), "error")

        try:
            profile = self.api.login(id_token)
        except ApiError as e:
            logger.error("Backend login failed", extra={"error": str(e)})
            return Notice("Login failed. Please try again.", "error")

        session.login(id_token, profile)
        return Notice("Login successful!", "success")

    def send_password_reset(self, email: Optional[str]) -> Notice:
        if not email:
            return Notice("Please enter your email first.", "error")
        if not is_valid_email(email):
            return Notice(describe_auth_error("auth/invalid-email"), "error")
        try:
            self.identity.send_password_reset(email)
        except AuthError as e:
            return Notice(describe_auth_error(e.code), "error")
        return Notice("Password reset email sent!", "success")

    @staticmethod
    def can_edit(session: SessionStore, field: str) -> bool:
        profile = session.profile
        if profile is None or field in ("role", "department"):
            return False
        if field == "password":
            return True
        return not (profile.tier is Role.USER and field in RESTRICTED_FIELDS)

    def update_field(self, session: SessionStore, field: str, value: Optional[str]) -> Notice:
        profile = session.profile
        if profile is None:
            return Notice("You are not signed in.", "error")
        if not self.can_edit(session, field) or field == "password":
            return Notice("This field cannot be edited.", "error")
        try:
            validate_account_field(field, value)
        except ValidationError as e:
            return Notice(e.first_message, "error")

        try:
            updated = self.api.update_account(profile.id, {field: value})
        except ApiError as e:
            logger.error("Update failed", extra={"field": field, "error": str(e)})
            return Notice(e.message or "Failed to update. Try again.", "error")

        session.update_profile(updated or {field: value})
        return Notice(f"{field.replace('_', ' ')} updated!", "success")

    def change_password(
            self,
            session: SessionStore,
            current: Optional[str],
            new: Optional[str],
            confirm: Optional[str],
    ) -> Notice:
        profile = session.profile
        if profile is None:
            return Notice("You are not signed in.", "error")
        try:
            validate_password_change(current, new, confirm)
        except ValidationError as e:
            return Notice(e.first_message, "error")
        try:
            self.api.change_password(profile.id, current, new)
        except ApiError as e:
            logger.error("Password change failed", extra={"error": str(e)})
            return Notice(e.message or "Failed to update. Try again.", "error")
        return Notice("Password updated successfully!", "success")
