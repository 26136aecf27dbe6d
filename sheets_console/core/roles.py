from __future__ import annotations

from enum import Enum
from typing import Dict, Optional


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"

    @classmethod
    def parse(cls, value) -> Optional[Role]:
        """Map a raw role string to a Role; unknown or missing roles map to None."""
        if isinstance(value, Role):
            return value
        if not value:
            return None
        try:
            return cls(str(value).strip())
        except ValueError:
            return None


# Ordered tiers, used for comparison only.
TIER_ORDER: Dict[Role, int] = {
    Role.USER: 0,
    Role.ADMIN: 1,
    Role.SUPER_ADMIN: 2,
}


class AccessTier(str, Enum):
    """The two guard policies. They are NOT one monotonic check."""
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


NOT_FOUND_PATH = "/404"
LOGIN_PATH = "/"


def at_least_admin(role) -> bool:
    """Deny when there is no role, and deny the bottom tier only."""
    parsed = Role.parse(role)
    if parsed is None:
        return False
    return TIER_ORDER[parsed] > TIER_ORDER[Role.USER]


def exactly_super_admin(role) -> bool:
    return Role.parse(role) is Role.SUPER_ADMIN


def can_access(role, tier: AccessTier) -> bool:
    if tier is AccessTier.ADMIN:
        return at_least_admin(role)
    if tier is AccessTier.SUPER_ADMIN:
        return exactly_super_admin(role)
    raise ValueError(f"Unknown access tier: {tier!r}")


# Routes that need more than a signed-in user.
PROTECTED_ROUTES: Dict[str, AccessTier] = {
    "/settings/management": AccessTier.ADMIN,
    "/settings/department": AccessTier.SUPER_ADMIN,
}

AUTHENTICATED_PREFIXES = ("/home", "/search", "/manage", "/settings")


def guard_route(pathname: Optional[str], role, authenticated: bool) -> str:
    """
    Resolve the path the router should actually render.

    - signed-out users on an app page go back to the login page
    - a failed tier check resolves to the not-found page, so protected
      routes are never revealed
    """
    path = (pathname or LOGIN_PATH).rstrip("/") or LOGIN_PATH

    if path.startswith(AUTHENTICATED_PREFIXES) and not authenticated:
        return LOGIN_PATH

    tier = PROTECTED_ROUTES.get(path)
    if tier is not None and not can_access(role, tier):
        return NOT_FOUND_PATH

    return path
