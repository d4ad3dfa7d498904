"""
Role Constants

Defines the role identifiers used by login, dashboard routing, the
login-success sniffer and API guards.

Roles:
- MANAGER (1000): Manage projects and team members
- CLIENT (1001): View and track project progress
- ADMIN (1002): Full access to all features and settings
- UNKNOWN (0): Anything that does not resolve to one of the above

Role identifiers reach us in several shapes (int, numeric string, legacy
document-store token, role name, username hint). Everything funnels through
role_from_id() / role_from_name() so the rest of the system only ever
handles a Role member.
"""

import math
from enum import IntEnum
from typing import Any, Dict, Optional, Tuple

# ============================================================================
# Role Identifiers
# ============================================================================

MANAGER_ROLE_ID = 1000
CLIENT_ROLE_ID = 1001
ADMIN_ROLE_ID = 1002


class Role(IntEnum):
    """Closed set of roles. UNKNOWN is the only non-canonical member."""

    UNKNOWN = 0
    MANAGER = MANAGER_ROLE_ID
    CLIENT = CLIENT_ROLE_ID
    ADMIN = ADMIN_ROLE_ID

    @property
    def is_known(self) -> bool:
        return self is not Role.UNKNOWN

    @property
    def role_name(self) -> str:
        return ROLE_NAMES.get(self, "unknown")


# All canonical role ids
ALL_ROLE_IDS = {MANAGER_ROLE_ID, CLIENT_ROLE_ID, ADMIN_ROLE_ID}

ROLE_NAMES: Dict[Role, str] = {
    Role.ADMIN: "admin",
    Role.MANAGER: "manager",
    Role.CLIENT: "client",
}

# Opaque role ids inherited from the old document-store schema
LEGACY_ROLE_TOKENS: Dict[str, Role] = {
    "YcKKrgriG70R2O9Qg4io": Role.ADMIN,
    "S9g5SmjPkiUH5cwwQiSK": Role.MANAGER,
    "tkIVVYpWobVjoawaozmp": Role.CLIENT,
}

# Username substring hints, checked in this order
USERNAME_ROLE_HINTS: Tuple[Tuple[str, Role], ...] = (
    ("admin", Role.ADMIN),
    ("manager", Role.MANAGER),
    ("client", Role.CLIENT),
)


# ============================================================================
# Helper Functions
# ============================================================================

def is_known_role_id(value: Any) -> bool:
    """
    Check if value is one of the canonical role ids.

    Example:
        >>> is_known_role_id(1001)
        True
        >>> is_known_role_id(1003)
        False
        >>> is_known_role_id(True)
        False
    """
    return role_from_id(value) is not Role.UNKNOWN


def role_from_id(value: Any) -> Role:
    """
    Validating constructor for Role.

    Accepts ints and integral floats. Everything else, including bools,
    NaN and ids outside the canonical set, becomes Role.UNKNOWN.

    Args:
        value: Raw numeric role id (may be None or any type)

    Returns:
        Matching Role, or Role.UNKNOWN

    Example:
        >>> role_from_id(1002)
        <Role.ADMIN: 1002>
        >>> role_from_id(9999)
        <Role.UNKNOWN: 0>
    """
    if isinstance(value, Role):
        return value
    if value is None or isinstance(value, bool):
        return Role.UNKNOWN
    if isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            return Role.UNKNOWN
        value = int(value)
    if not isinstance(value, int):
        return Role.UNKNOWN
    if value in ALL_ROLE_IDS:
        return Role(value)
    return Role.UNKNOWN


def role_from_name(name: Optional[str]) -> Role:
    """
    Map a role name (admin/manager/client, any case) to a Role.

    Example:
        >>> role_from_name("Manager")
        <Role.MANAGER: 1000>
        >>> role_from_name("carrier")
        <Role.UNKNOWN: 0>
    """
    if not name or not isinstance(name, str):
        return Role.UNKNOWN
    normalized = name.strip().lower()
    for role, role_name in ROLE_NAMES.items():
        if role_name == normalized:
            return role
    return Role.UNKNOWN


def role_from_legacy_token(token: Optional[str]) -> Role:
    """Map a legacy document-store role id to a Role (exact match)."""
    if not isinstance(token, str):
        return Role.UNKNOWN
    return LEGACY_ROLE_TOKENS.get(token, Role.UNKNOWN)


def role_from_username(username: Optional[str]) -> Role:
    """
    Guess a role from a username (case-insensitive substring match).

    Example:
        >>> role_from_username("ADMIN_USER")
        <Role.ADMIN: 1002>
        >>> role_from_username("jdoe")
        <Role.UNKNOWN: 0>
    """
    if not username or not isinstance(username, str):
        return Role.UNKNOWN
    lowered = username.lower()
    for hint, role in USERNAME_ROLE_HINTS:
        if hint in lowered:
            return role
    return Role.UNKNOWN
