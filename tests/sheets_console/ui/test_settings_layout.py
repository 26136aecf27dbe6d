from __future__ import annotations

from sheets_console.core.models import Department, ManagedUser, UserProfile
from sheets_console.ui.layout.build_settings_page import department_options, user_edit_fields, user_options

ADMIN = UserProfile(id="a1", role="admin", department="Ops")
SUPER = UserProfile(id="s1", role="super_admin")


def test_admins_cannot_pick_department_to_edit():
    admin_fields = [f["value"] for f in user_edit_fields(ADMIN)]
    super_fields = [f["value"] for f in user_edit_fields(SUPER)]

    assert admin_fields == ["first_name", "last_name", "email", "role"]
    assert super_fields == admin_fields + ["department"]


def test_edit_selects_use_ids_as_values():
    users = [ManagedUser(id="u1", first_name="Al", last_name="Lee", email="al@x.co")]
    departments = [Department(id="d1", name="Ops")]

    assert user_options(users) == [{"label": "Al Lee (al@x.co)", "value": "u1"}]
    assert department_options(departments) == [{"label": "Ops", "value": "d1"}]
