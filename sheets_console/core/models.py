from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Mapping, Optional

from sheets_console.core.roles import Role


@dataclass
class UserProfile:
    """
    The signed-in user, as returned by POST /api/auth/login.

    Fields:

    - id: account id (the API calls it `uid`)
    - role: raw role string; use `tier` for comparisons
    - department: department name, None for super admins
    """
    id: str
    username: str = ""
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    role: str = Role.USER.value
    department: Optional[str] = None

    @property
    def tier(self) -> Optional[Role]:
        return Role.parse(self.role)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def merged(self, partial: Mapping[str, Any]) -> UserProfile:
        """Shallow merge; unknown keys are ignored."""
        known = {k: v for k, v in partial.items() if k in _PROFILE_FIELDS}
        if "uid" in partial and "id" not in known:
            known["id"] = partial["uid"]
        return replace(self, **known)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> UserProfile:
        if not isinstance(data, Mapping):
            raise TypeError(f"UserProfile expects a mapping, got {type(data).__name__}")
        user_id = data.get("id") or data.get("uid")
        if not user_id:
            raise ValueError("UserProfile is missing an id")
        return cls(
            id=str(user_id),
            username=data.get("username") or "",
            first_name=data.get("first_name") or "",
            last_name=data.get("last_name") or "",
            email=data.get("email") or "",
            role=data.get("role") or Role.USER.value,
            department=data.get("department"),
        )


_PROFILE_FIELDS = {"id", "username", "first_name", "last_name", "email", "role", "department"}


@dataclass(frozen=True)
class DatasetSummary:
    """One entry of GET /api/database/databases."""
    id: str
    sheet_id: str
    name: str
    department: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DatasetSummary:
        return cls(
            id=str(data.get("id", "")),
            sheet_id=str(data.get("sheet_id", "")),
            name=data.get("database_name") or "",
            department=(data.get("department_name") or "").strip(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Department:
    id: str
    name: str
    created_at: Any = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Department:
        return cls(
            id=str(data.get("id", "")),
            name=(data.get("department_name") or "").strip(),
            created_at=data.get("created_at"),
        )


@dataclass
class Notice:
    """A transient, dismissible message shown to the user."""
    message: str
    kind: str = "info"  # info | success | error

    @property
    def color(self) -> str:
        return {"error": "danger", "success": "success"}.get(self.kind, "info")

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message, "kind": self.kind}


@dataclass
class ManagedUser:
    """A row of the account management table."""
    id: str
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    role: str = Role.USER.value
    department: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ManagedUser:
        return cls(
            id=str(data.get("uid") or data.get("id") or ""),
            first_name=data.get("first_name") or "",
            last_name=data.get("last_name") or "",
            email=data.get("email") or "",
            role=data.get("role") or Role.USER.value,
            department=data.get("department"),
        )
