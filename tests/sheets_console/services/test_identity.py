from __future__ import annotations

import pytest
import requests

from sheets_console.core.exceptions import AuthError
from sheets_console.services.identity import (
    GENERIC_AUTH_MESSAGE,
    FirebaseRestIdentityProvider,
    describe_auth_error,
)


class FakeResponse:
    def __init__(self, status_code, body):
        self.status_code = status_code
        self._body = body
        self.text = str(body)

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def json(self):
        return self._body


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def post(self, url, params=None, json=None, timeout=None):
        self.calls.append({"url": url, "params": params, "json": json})
        if self.error is not None:
            raise self.error
        return self.response


@pytest.mark.parametrize(
    "code, message",
    [
        ("auth/user-not-found", "Invalid email or password."),
        ("auth/invalid-credential", "Invalid email or password."),
        ("auth/invalid-email", "Please enter a valid email address."),
        ("auth/too-many-requests", "Too many attempts. Please try again later."),
        ("auth/network-request-failed", "Network error. Check your connection."),
        ("auth/something-else", GENERIC_AUTH_MESSAGE),
        (None, GENERIC_AUTH_MESSAGE),
    ],
)
def test_describe_auth_error(code, message):
    assert describe_auth_error(code) == message


def test_sign_in_returns_id_token():
    session = FakeSession(FakeResponse(200, {"idToken": "ID", "refreshToken": "R"}))
    provider = FirebaseRestIdentityProvider("KEY", session=session, base_url="http://idp.test")

    assert provider.sign_in("a@b.co", "pw") == "ID"
    assert session.calls[0]["url"] == "http://idp.test/accounts:signInWithPassword"
    assert session.calls[0]["params"] == {"key": "KEY"}


def test_rest_error_is_mapped_to_provider_code():
    body = {"error": {"message": "TOO_MANY_ATTEMPTS_TRY_LATER : Access disabled"}}
    provider = FirebaseRestIdentityProvider("KEY", session=FakeSession(FakeResponse(400, body)))

    with pytest.raises(AuthError) as err:
        provider.sign_in("a@b.co", "pw")
    assert err.value.code == "auth/too-many-requests"


def test_network_failure_is_mapped():
    provider = FirebaseRestIdentityProvider("KEY", session=FakeSession(error=requests.Timeout("slow")))
    with pytest.raises(AuthError) as err:
        provider.send_password_reset("a@b.co")
    assert err.value.code == "auth/network-request-failed"
