from __future__ import annotations

from sheets_console.core.exceptions import ApiError, AuthError
from sheets_console.core.models import UserProfile
from sheets_console.services.account_service import AccountService
from sheets_console.services.identity import IdentityProvider
from sheets_console.services.session_service import SessionStore
from sheets_console.services.storage import BrowserStoreStorage


class FakeIdentity(IdentityProvider):
    def __init__(self, error_code=None):
        self.error_code = error_code
        self.reset_emails = []

    def sign_in(self, email, password):
        if self.error_code:
            raise AuthError(self.error_code)
        return "ID"

    def sign_out(self):
        pass

    def send_password_reset(self, email):
        self.reset_emails.append(email)


class FakeApi:
    def __init__(self, fail=False, updated=None):
        self.fail = fail
        self.updated = updated
        self.calls = []

    def login(self, id_token):
        self.calls.append(("login", id_token))
        if self.fail:
            raise ApiError("down", status=503)
        return UserProfile(id="u1", first_name="Ada", role="admin")

    def update_account(self, user_id, fields):
        self.calls.append(("update_account", user_id, fields))
        if self.fail:
            raise ApiError("Email already in use", status=409)
        return self.updated or {}

    def change_password(self, user_id, current, new):
        self.calls.append(("change_password", user_id))
        if self.fail:
            raise ApiError("Wrong password", status=400)


def _signed_in(role="admin"):
    session = SessionStore(BrowserStoreStorage())
    session.login("T", UserProfile(id="u1", first_name="Ada", last_name="L", role=role))
    return session


def test_sign_in_success_starts_session():
    session = SessionStore(BrowserStoreStorage())
    notice = AccountService(FakeApi(), FakeIdentity()).sign_in(session, "ada@example.com", "pw")

    assert notice.message == "Login successful!"
    assert session.token == "ID"
    assert session.profile.id == "u1"


def test_sign_in_maps_provider_codes():
    session = SessionStore(BrowserStoreStorage())
    service = AccountService(FakeApi(), FakeIdentity("auth/invalid-credential"))

    notice = service.sign_in(session, "ada@example.com", "pw")

    assert notice.message == "Invalid email or password."
    assert not session.is_authenticated


def test_sign_in_validates_before_network():
    api = FakeApi()
    notice = AccountService(api, FakeIdentity()).sign_in(SessionStore(BrowserStoreStorage()), "not-an-email", "pw")
    assert notice.kind == "error"
    assert api.calls == []


def test_backend_login_failure_leaves_session_empty():
    session = SessionStore(BrowserStoreStorage())
    notice = AccountService(FakeApi(fail=True), FakeIdentity()).sign_in(session, "ada@example.com", "pw")
    assert notice.message == "Login failed. Please try again."
    assert not session.is_authenticated


def test_password_reset():
    identity = FakeIdentity()
    service = AccountService(FakeApi(), identity)

    assert service.send_password_reset("").message == "Please enter your email first."
    assert service.send_password_reset("ada@example.com").message == "Password reset email sent!"
    assert identity.reset_emails == ["ada@example.com"]


def test_plain_users_cannot_edit_restricted_fields():
    session = _signed_in(role="user")
    assert not AccountService.can_edit(session, "first_name")
    assert AccountService.can_edit(session, "password")
    assert not AccountService.can_edit(_signed_in(), "role")


def test_update_field_merges_server_copy_into_session():
    session = _signed_in()
    api = FakeApi(updated={"uid": "u1", "first_name": "Grace"})

    notice = AccountService(api, FakeIdentity()).update_field(session, "first_name", "Grace")

    assert notice.kind == "success"
    assert session.profile.first_name == "Grace"
    assert api.calls == [("update_account", "u1", {"first_name": "Grace"})]


def test_update_field_failure_keeps_profile():
    session = _signed_in()
    notice = AccountService(FakeApi(fail=True), FakeIdentity()).update_field(session, "email", "x@y.co")

    assert notice.message == "Email already in use"
    assert session.profile.email == ""


def test_change_password_rules():
    session = _signed_in()
    service = AccountService(FakeApi(), FakeIdentity())

    assert service.change_password(session, "", "A", "A").message == "Please fill in all password fields."
    assert service.change_password(session, "old", "Passw0rd!", "Passw0rd?").message == "New passwords do not match."
    assert service.change_password(session, "old", "Passw0rd!", "Passw0rd!").message == "Password updated successfully!"
