from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Optional

from sheets_console.core.models import UserProfile
from sheets_console.services.identity import IdentityProvider
from sheets_console.services.storage import StorageBackend

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
PROFILE_KEY = "user"


class SessionStore:
    """
    Holds the signed-in identity token and user profile.

    Every change is written through to the storage backend so the session
    survives reloads. Token and profile are always set and cleared together.

    Lifecycle: construct, `hydrate()` once at startup, then `login` /
    `update_profile` / `logout`. `teardown()` clears state without
    contacting the identity provider.
    """

    def __init__(self, storage: StorageBackend, identity: Optional[IdentityProvider] = None):
        self.storage = storage
        self.identity = identity
        self._token: Optional[str] = None
        self._profile: Optional[UserProfile] = None

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def profile(self) -> Optional[UserProfile]:
        return self._profile

    @property
    def is_authenticated(self) -> bool:
        return self._token is not None and self._profile is not None

    def hydrate(self) -> SessionStore:
        """Read the persisted session; corrupt values are discarded, not raised."""
        token = self._read_text(TOKEN_KEY)
        profile = self._read_profile()

        if token and profile is not None:
            self._token, self._profile = token, profile
        else:
            if token or profile is not None:
                logger.warning("Discarding half-persisted session")
            self._clear()
        return self

    def login(self, token: str, profile: UserProfile) -> None:
        self._token = token
        self._profile = profile
        self._persist()
        logger.info("Session started", extra={"user_id": profile.id, "role": profile.role})

    def logout(self) -> None:
        """
        Sign out with the identity provider, then always clear local state,
        even when the remote call fails.
        """
        user_id = self._profile.id if self._profile else None
        try:
            if self.identity is not None:
                self.identity.sign_out()
        except Exception:
            logger.exception("Error signing out", extra={"user_id": user_id})
        finally:
            self._clear()
        logger.info("Session ended", extra={"user_id": user_id})

    def update_profile(self, partial: Mapping[str, Any]) -> None:
        if self._profile is None:
            return
        self._profile = self._profile.merged(partial or {})
        self._persist()

    def teardown(self) -> None:
        self._clear()

    # ------------------------------------------------------------------
    # Persistence helpers
    # ------------------------------------------------------------------
    def _persist(self) -> None:
        if self._token is None or self._profile is None:
            self._clear()
            return
        self.storage.write_bytes(TOKEN_KEY, self._token.encode("utf-8"))
        self.storage.write_bytes(PROFILE_KEY, json.dumps(self._profile.to_dict()).encode("utf-8"))

    def _clear(self) -> None:
        self._token = None
        self._profile = None
        self.storage.delete(TOKEN_KEY)
        self.storage.delete(PROFILE_KEY)

    def _read_text(self, key: str) -> Optional[str]:
        if not self.storage.exists(key):
            return None
        try:
            return self.storage.read_bytes(key).decode("utf-8") or None
        except (TypeError, ValueError, OSError):
            logger.warning("Discarding unreadable persisted value", extra={"key": key})
            return None

    def _read_profile(self) -> Optional[UserProfile]:
        raw = self._read_text(PROFILE_KEY)
        if raw is None:
            return None
        try:
            return UserProfile.from_dict(json.loads(raw))
        except (TypeError, ValueError):
            logger.warning("Discarding corrupt persisted profile", extra={"key": PROFILE_KEY})
            return None
