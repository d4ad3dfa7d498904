"""
Role Normalizer

Turns a user record into exactly one Role.

User records come from several places (login response, localStorage blob,
token claims) and carry the role in different shapes. The cascade below is
first-match-wins:

1. roleId is a number              -> that number
2. roleId is a string              -> its integer prefix, if any
3. roleId is a legacy token        -> mapped canonical id
4. roleName / role.name            -> mapped canonical id
5. username contains admin/manager/client (case-insensitive)
6. nothing matched                 -> None

resolve_role_id() returns the raw result of that cascade (an unknown
number such as 1003 passes through untouched). normalize_role() runs the
result through role_from_id(), so callers only ever see a Role member and
an out-of-range id becomes Role.UNKNOWN instead of leaking through.
"""

import logging
import re
from typing import Any, Mapping, Optional, Union

from portal.constants.roles import (
    Role,
    role_from_id,
    role_from_legacy_token,
    role_from_name,
    role_from_username,
)

logger = logging.getLogger(__name__)

Number = Union[int, float]

_INT_PREFIX = re.compile(r"^[+-]?\d+")
_HEX_PREFIX = re.compile(r"^([+-]?)0[xX]([0-9a-fA-F]*)")


def parse_int_prefix(value: str) -> Optional[int]:
    """
    Parse the leading integer of a string, ignoring trailing garbage.

    Leading whitespace and a sign are allowed; a "0x" prefix switches to
    hexadecimal. Returns None when no digits lead the string.

    Example:
        >>> parse_int_prefix("1001")
        1001
        >>> parse_int_prefix(" 1002abc")
        1002
        >>> parse_int_prefix("0x3EA")
        1002
        >>> parse_int_prefix("tkIVVYpWobVjoawaozmp") is None
        True
    """
    if not isinstance(value, str):
        return None
    text = value.strip()

    hex_match = _HEX_PREFIX.match(text)
    if hex_match:
        sign, digits = hex_match.groups()
        if not digits:
            return None
        number = int(digits, 16)
        return -number if sign == "-" else number

    match = _INT_PREFIX.match(text)
    if not match:
        return None
    return int(match.group(0))


def extract_role_indicator(user: Mapping[str, Any]) -> Any:
    """
    Pull the raw role indicator out of a user record.

    Prefers the flat roleId field; falls back to a nested role object's id
    (the shape some login responses use).
    """
    role_id = user.get("roleId")
    if role_id is not None:
        return role_id

    role_obj = user.get("role")
    if isinstance(role_obj, Mapping):
        return role_obj.get("id")
    return None


def _role_name_of(user: Mapping[str, Any]) -> Optional[str]:
    name = user.get("roleName")
    if isinstance(name, str):
        return name
    role_obj = user.get("role")
    if isinstance(role_obj, Mapping) and isinstance(role_obj.get("name"), str):
        return role_obj["name"]
    if isinstance(role_obj, str):
        return role_obj
    return None


def resolve_role_id(user: Any) -> Optional[Number]:
    """
    Run the role cascade and return the raw numeric result.

    Numbers from steps 1 and 2 are NOT checked against the canonical set.
    Use normalize_role() unless you need the unvalidated value (e.g. to
    store userNumericRoleId exactly as received).

    Args:
        user: User record (any type; non-mappings resolve to None)

    Returns:
        Number or None

    Example:
        >>> resolve_role_id({"roleId": "1001"})
        1001
        >>> resolve_role_id({"roleId": 9999})
        9999
        >>> resolve_role_id({"username": "ADMIN_USER"})
        1002
    """
    if not isinstance(user, Mapping):
        return None

    role_id = extract_role_indicator(user)

    if isinstance(role_id, (int, float)) and not isinstance(role_id, bool):
        return role_id

    if isinstance(role_id, str):
        parsed = parse_int_prefix(role_id)
        if parsed is not None:
            return parsed

        legacy = role_from_legacy_token(role_id)
        if legacy.is_known:
            return int(legacy)

    by_name = role_from_name(_role_name_of(user))
    if by_name.is_known:
        return int(by_name)

    by_username = role_from_username(user.get("username"))
    if by_username.is_known:
        return int(by_username)

    return None


def normalize_role(user: Any) -> Role:
    """
    Resolve a user record to a Role (never raises, never returns a raw int).

    Example:
        >>> normalize_role({"roleId": "YcKKrgriG70R2O9Qg4io"})
        <Role.ADMIN: 1002>
        >>> normalize_role({"roleId": 1003})
        <Role.UNKNOWN: 0>
    """
    raw = resolve_role_id(user)
    role = role_from_id(raw)

    if raw is not None and not role.is_known:
        logger.warning(f"Unrecognized role id {raw!r} - treating as unknown role")

    return role
