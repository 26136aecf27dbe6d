from __future__ import annotations

import json

from sheets_console.core.models import UserProfile
from sheets_console.services.identity import IdentityProvider
from sheets_console.services.session_service import PROFILE_KEY, TOKEN_KEY, SessionStore
from sheets_console.services.storage import BrowserStoreStorage


class FakeIdentity(IdentityProvider):
    def __init__(self, fail_sign_out: bool = False):
        self.fail_sign_out = fail_sign_out
        self.sign_out_calls = 0

    def sign_in(self, email, password):
        return "id-token"

    def sign_out(self):
        self.sign_out_calls += 1
        if self.fail_sign_out:
            raise RuntimeError("network down")

    def send_password_reset(self, email):
        pass


def _profile(**overrides):
    data = {"id": "u1", "first_name": "Ada", "last_name": "Lovelace", "role": "admin", "department": "Ops"}
    data.update(overrides)
    return UserProfile(**data)


def test_login_persists_token_and_profile():
    storage = BrowserStoreStorage()
    session = SessionStore(storage)
    session.login("T", _profile())

    assert session.is_authenticated
    assert storage.data[TOKEN_KEY] == "T"
    assert json.loads(storage.data[PROFILE_KEY])["role"] == "admin"


def test_hydrate_restores_persisted_session():
    storage = BrowserStoreStorage()
    SessionStore(storage).login("T", _profile())

    restored = SessionStore(BrowserStoreStorage(storage.data)).hydrate()
    assert restored.token == "T"
    assert restored.profile == _profile()


def test_hydrate_discards_corrupt_profile_and_token():
    storage = BrowserStoreStorage({TOKEN_KEY: "T", PROFILE_KEY: "{not json"})
    session = SessionStore(storage).hydrate()

    assert session.profile is None
    assert session.token is None
    assert storage.data == {}


def test_hydrate_discards_profile_that_is_not_an_object():
    storage = BrowserStoreStorage({TOKEN_KEY: "T", PROFILE_KEY: "[1, 2]"})
    session = SessionStore(storage).hydrate()
    assert not session.is_authenticated


def test_logout_clears_even_when_sign_out_fails():
    identity = FakeIdentity(fail_sign_out=True)
    storage = BrowserStoreStorage()
    session = SessionStore(storage, identity)
    session.login("T", _profile(role="admin"))

    session.logout()

    assert identity.sign_out_calls == 1
    assert session.token is None
    assert session.profile is None
    assert storage.data == {}


def test_update_profile_merges_and_persists():
    storage = BrowserStoreStorage()
    session = SessionStore(storage)
    session.login("T", _profile())

    session.update_profile({"first_name": "Grace"})

    assert session.profile.first_name == "Grace"
    assert session.profile.last_name == "Lovelace"
    assert json.loads(storage.data[PROFILE_KEY])["first_name"] == "Grace"


def test_update_profile_without_session_is_noop():
    storage = BrowserStoreStorage()
    session = SessionStore(storage)
    session.update_profile({"first_name": "Grace"})
    assert session.profile is None
    assert storage.data == {}


def test_teardown_does_not_contact_identity_provider():
    identity = FakeIdentity()
    session = SessionStore(BrowserStoreStorage(), identity)
    session.login("T", _profile())

    session.teardown()

    assert identity.sign_out_calls == 0
    assert not session.is_authenticated


def test_hydrate_tolerates_store_that_is_not_an_object():
    for raw in (["x"], "T", 42):
        session = SessionStore(BrowserStoreStorage(raw)).hydrate()
        assert not session.is_authenticated
        assert session.storage.data == {}
