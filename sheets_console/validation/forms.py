"""
Form validation. Everything here runs before any network call; a failing
form is reported inline and never sent to the server.
"""
from __future__ import annotations

import re
from typing import Any, Mapping, Optional, Sequence

from sheets_console.core.roles import Role
from sheets_console.validation.errors import ValidationError, ValidationIssue

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
NAME_RE = re.compile(r"^[A-Za-z\s]+$")
# 6+ chars with an uppercase letter, a digit and a special character
PASSWORD_RE = re.compile(r"^(?=.*[A-Z])(?=.*\d)(?=.*[!@#$%^&*()_+\-=\[\]{};':\"\\|,.<>/?]).{6,}$")

PASSWORD_RULES = "Password must be at least 6 characters with uppercase, number, and special character."


def is_valid_email(value: Optional[str]) -> bool:
    return bool(value) and EMAIL_RE.match(value) is not None


def is_valid_name(value: Optional[str]) -> bool:
    return bool(value) and NAME_RE.match(value) is not None


def is_valid_password(value: Optional[str]) -> bool:
    return bool(value) and PASSWORD_RE.match(value) is not None


def _raise_first(issues: list[ValidationIssue]) -> None:
    if issues:
        raise ValidationError(issues)


def validate_login(email: Optional[str], password: Optional[str]) -> None:
    issues = []
    if not email or not password:
        issues.append(ValidationIssue("REQUIRED", "Please enter your email and password."))
    elif not is_valid_email(email):
        issues.append(ValidationIssue("EMAIL", "Please enter a valid email address."))
    _raise_first(issues)


def validate_new_user(form: Mapping[str, Any], creator_role: Any) -> None:
    """
    Checks are ordered; only the first failing rule is reported, matching
    what the add-user form shows.
    """
    first = (form.get("first_name") or "").strip()
    last = (form.get("last_name") or "").strip()
    email = (form.get("email") or "").strip()
    password = form.get("password") or ""
    role = form.get("role")
    department = form.get("department")

    if not first or not last or not email or not password or not role:
        raise ValidationError([ValidationIssue("REQUIRED", "Please fill all required fields.")])
    if not is_valid_name(first):
        raise ValidationError([ValidationIssue("FIRST_NAME", "First name must contain only letters.")])
    if not is_valid_name(last):
        raise ValidationError([ValidationIssue("LAST_NAME", "Last name must contain only letters.")])
    if not is_valid_email(email):
        raise ValidationError([ValidationIssue("EMAIL", "Enter a valid email address.")])
    if not is_valid_password(password):
        raise ValidationError([ValidationIssue("PASSWORD", PASSWORD_RULES)])
    creator = Role.parse(creator_role)
    new_role = Role.parse(role)
    if new_role is None or (creator is Role.SUPER_ADMIN and not department):
        raise ValidationError([ValidationIssue("ROLE", "Please select a valid role and department.")])
    # only super admins may create super admins
    if new_role is Role.SUPER_ADMIN and creator is not Role.SUPER_ADMIN:
        raise ValidationError([ValidationIssue("ROLE", "Please select a valid role and department.")])


def validate_password_change(current: Optional[str], new: Optional[str], confirm: Optional[str]) -> None:
    if not current or not new or not confirm:
        raise ValidationError([ValidationIssue("REQUIRED", "Please fill in all password fields.")])
    if new != confirm:
        raise ValidationError([ValidationIssue("MISMATCH", "New passwords do not match.")])
    if not is_valid_password(new):
        raise ValidationError([ValidationIssue("PASSWORD", PASSWORD_RULES)])


def validate_account_field(field: str, value: Optional[str]) -> None:
    if field == "email" and not is_valid_email(value):
        raise ValidationError([ValidationIssue("EMAIL", "Invalid email address.")])
    if field in ("first_name", "last_name") and not is_valid_name(value):
        raise ValidationError([ValidationIssue("NAME", "Names must contain only letters.")])
    if not value:
        raise ValidationError([ValidationIssue("REQUIRED", "This field cannot be empty.")])


def validate_department_name(name: Optional[str]) -> None:
    if not name or not name.strip():
        raise ValidationError([ValidationIssue("REQUIRED", "Department name is required.")])


def validate_new_database(
        name: Optional[str],
        password: Optional[str],
        department: Optional[str],
        created_by: Optional[str],
        columns: Sequence[str],
) -> None:
    issues = []
    if not name or not password or not department or not created_by:
        issues.append(ValidationIssue("REQUIRED", "All fields are required."))
    if not [c for c in columns if c and c.strip()]:
        issues.append(ValidationIssue("COLUMNS", "Add at least one column."))
    _raise_first(issues)


def validate_row(values: Sequence[Any]) -> None:
    if not values or any(v in (None, "") for v in values):
        raise ValidationError([ValidationIssue("REQUIRED", "Please fill all column fields.")])


USER_EDIT_FIELDS = ("first_name", "last_name", "email", "role", "department")


def validate_user_update(field: Optional[str], value: Optional[str], editor_role: Any) -> None:
    """Single-field edit of a managed user. Department moves are super-admin only."""
    editor = Role.parse(editor_role)
    if field not in USER_EDIT_FIELDS:
        raise ValidationError([ValidationIssue("FIELD", "Select a field to edit.")])
    if field == "role":
        new_role = Role.parse(value)
        if new_role is None or (new_role is Role.SUPER_ADMIN and editor is not Role.SUPER_ADMIN):
            raise ValidationError([ValidationIssue("ROLE", "Please select a valid role.")])
        return
    if field == "department":
        if editor is not Role.SUPER_ADMIN:
            raise ValidationError([ValidationIssue("DEPARTMENT", "Only super admins can move users between departments.")])
        if not value or not value.strip():
            raise ValidationError([ValidationIssue("REQUIRED", "This field cannot be empty.")])
        return
    validate_account_field(field, value)
