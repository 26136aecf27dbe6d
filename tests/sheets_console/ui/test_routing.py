from __future__ import annotations

import pytest

from sheets_console.core.models import UserProfile
from sheets_console.services.session_service import SessionStore
from sheets_console.services.storage import BrowserStoreStorage
from sheets_console.ui.callbacks.callbacks_routing import resolve_path


def _session(role=None):
    session = SessionStore(BrowserStoreStorage())
    if role is not None:
        session.login("T", UserProfile(id="u1", role=role))
    return session


@pytest.mark.parametrize(
    "pathname, role, expected",
    [
        ("/", None, "/"),
        ("/search", None, "/"),
        ("/settings/department", None, "/"),
        ("/", "user", "/home"),
        ("/settings", "user", "/settings/account"),
        ("/settings/management", "user", "/404"),
        ("/settings/management", "admin", "/settings/management"),
        ("/settings/department", "admin", "/404"),
        ("/settings/department", "super_admin", "/settings/department"),
        ("/manage/", "admin", "/manage"),
        ("/nowhere", "admin", "/404"),
        (None, None, "/"),
    ],
)
def test_resolve_path(pathname, role, expected):
    assert resolve_path(pathname, _session(role)) == expected
