from __future__ import annotations

import pytest

from sheets_console.validation.errors import ValidationError
from sheets_console.validation.forms import (
    PASSWORD_RULES,
    is_valid_email,
    is_valid_name,
    is_valid_password,
    validate_account_field,
    validate_login,
    validate_new_database,
    validate_new_user,
    validate_row,
    validate_user_update,
)

FORM = {
    "first_name": "Ada",
    "last_name": "Lovelace",
    "email": "ada@example.com",
    "password": "Passw0rd!",
    "role": "user",
    "department": "Ops",
}


@pytest.mark.parametrize(
    "value, ok",
    [("a@b.co", True), ("a@b", False), ("a b@c.de", False), ("", False), (None, False)],
)
def test_email_rule(value, ok):
    assert is_valid_email(value) is ok


def test_name_and_password_rules():
    assert is_valid_name("Mary Ann")
    assert not is_valid_name("R2D2")
    assert is_valid_password("Abc1!x")
    assert not is_valid_password("abc1!x")
    assert not is_valid_password("Abcdef!")
    assert not is_valid_password("Ab1!")


def _first_message(form, creator="super_admin"):
    with pytest.raises(ValidationError) as err:
        validate_new_user(form, creator)
    return err.value.first_message


def test_new_user_checks_in_order():
    assert _first_message({**FORM, "email": ""}) == "Please fill all required fields."
    assert _first_message({**FORM, "first_name": "4da", "email": "bad"}) == "First name must contain only letters."
    assert _first_message({**FORM, "email": "bad"}) == "Enter a valid email address."
    assert _first_message({**FORM, "password": "weak"}) == PASSWORD_RULES
    assert _first_message({**FORM, "role": "owner"}) == "Please select a valid role and department."


def test_new_user_department_only_required_for_super_admin():
    validate_new_user({**FORM, "department": None}, "admin")
    assert _first_message({**FORM, "department": None}) == "Please select a valid role and department."


def test_login_requires_both_fields():
    with pytest.raises(ValidationError):
        validate_login("ada@example.com", "")
    validate_login("ada@example.com", "pw")


def test_account_field_rules():
    with pytest.raises(ValidationError):
        validate_account_field("email", "nope")
    with pytest.raises(ValidationError):
        validate_account_field("username", "")
    validate_account_field("username", "ada")


def test_new_database_rules():
    with pytest.raises(ValidationError) as err:
        validate_new_database("Staff", "", "Ops", "Ada", ["Name"])
    assert err.value.first_message == "All fields are required."
    validate_new_database("Staff", "pw", "Ops", "Ada", ["Name"])


def test_row_rules():
    with pytest.raises(ValidationError):
        validate_row([])
    with pytest.raises(ValidationError):
        validate_row(["a", None])
    validate_row(["a", 0])


def test_user_update_rules_depend_on_editor():
    validate_user_update("role", "admin", "admin")
    validate_user_update("department", "HR", "super_admin")
    validate_user_update("last_name", "Smith", "admin")

    with pytest.raises(ValidationError):
        validate_user_update("role", "super_admin", "admin")
    with pytest.raises(ValidationError):
        validate_user_update("role", "owner", "super_admin")
    with pytest.raises(ValidationError):
        validate_user_update("department", "HR", "admin")
    with pytest.raises(ValidationError):
        validate_user_update("username", "ada", "super_admin")
