from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional

import requests

from sheets_console.core.exceptions import AuthError

logger = logging.getLogger(__name__)

IDENTITY_TOOLKIT_URL = "https://identitytoolkit.googleapis.com/v1"

GENERIC_AUTH_MESSAGE = "Login failed. Please try again."

# Provider error code -> message shown on the login page
AUTH_ERROR_MESSAGES: Dict[str, str] = {
    "auth/user-not-found": "Invalid email or password.",
    "auth/invalid-credential": "Invalid email or password.",
    "auth/invalid-email": "Please enter a valid email address.",
    "auth/too-many-requests": "Too many attempts. Please try again later.",
    "auth/network-request-failed": "Network error. Check your connection.",
}

# Identity Toolkit REST error messages -> provider error codes
_REST_ERROR_CODES: Dict[str, str] = {
    "EMAIL_NOT_FOUND": "auth/user-not-found",
    "INVALID_PASSWORD": "auth/invalid-credential",
    "INVALID_LOGIN_CREDENTIALS": "auth/invalid-credential",
    "INVALID_EMAIL": "auth/invalid-email",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "auth/too-many-requests",
    "USER_DISABLED": "auth/user-disabled",
}


def describe_auth_error(code: Optional[str]) -> str:
    return AUTH_ERROR_MESSAGES.get(code or "", GENERIC_AUTH_MESSAGE)


class IdentityProvider(ABC):
    """
    Sign-in capability used by the login page and the session store.
    """

    @abstractmethod
    def sign_in(self, email: str, password: str) -> str:
        """Return an ID token; raise AuthError on failure."""
        pass

    @abstractmethod
    def sign_out(self) -> None:
        pass

    @abstractmethod
    def send_password_reset(self, email: str) -> None:
        pass


class FirebaseRestIdentityProvider(IdentityProvider):
    """
    Email/password accounts through the Identity Toolkit REST API.

    Sign-out is local: REST clients simply forget their tokens.
    """

    def __init__(
            self,
            api_key: str,
            *,
            timeout: float = 30.0,
            session: Optional[requests.Session] = None,
            base_url: str = IDENTITY_TOOLKIT_URL,
    ):
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()
        self.base_url = base_url.rstrip("/")
        self._refresh_token: Optional[str] = None

    def _post(self, action: str, payload: dict) -> dict:
        url = f"{self.base_url}/accounts:{action}"
        try:
            response = self.session.post(
                url,
                params={"key": self.api_key},
                json=payload,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning("Identity provider unreachable", extra={"action": action, "error": str(e)})
            raise AuthError("auth/network-request-failed", str(e)) from e

        if response.ok:
            return response.json()

        try:
            raw_message = response.json().get("error", {}).get("message", "")
        except ValueError:
            raw_message = response.text
        # e.g. "TOO_MANY_ATTEMPTS_TRY_LATER : Access to this account has been ..."
        key = raw_message.split(":", 1)[0].strip()
        code = _REST_ERROR_CODES.get(key, "auth/unknown")
        logger.info("Identity provider rejected request", extra={"action": action, "code": code})
        raise AuthError(code, raw_message)

    def sign_in(self, email: str, password: str) -> str:
        data = self._post(
            "signInWithPassword",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        self._refresh_token = data.get("refreshToken")
        return data["idToken"]

    def sign_out(self) -> None:
        self._refresh_token = None

    def send_password_reset(self, email: str) -> None:
        self._post("sendOobCode", {"requestType": "PASSWORD_RESET", "email": email})
