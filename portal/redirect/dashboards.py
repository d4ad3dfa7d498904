"""
Dashboard Router

Maps a role to the dashboard path the user lands on after login.
Always returns a path; anything unrecognized lands on /dashboard.
"""

import logging
from typing import Any, Optional

from portal.constants.paths import DASHBOARD_PATHS, DEFAULT_DASHBOARD_PATH, ROLE_SECTIONS
from portal.constants.roles import Role, role_from_id
from portal.redirect.normalizer import normalize_role

logger = logging.getLogger(__name__)


def coerce_role(indicator: Any) -> Role:
    """
    Turn a bare role indicator (Role, number, numeric string, legacy token)
    into a Role by running it through the normalizer as a roleId.
    """
    if isinstance(indicator, Role):
        return indicator
    if indicator is None:
        return Role.UNKNOWN
    return normalize_role({"roleId": indicator})


def dashboard_path_for(indicator: Any) -> str:
    """
    Dashboard path for a role indicator.

    Example:
        >>> dashboard_path_for(1002)
        '/admin/dashboard'
        >>> dashboard_path_for("tkIVVYpWobVjoawaozmp")
        '/client/dashboard'
        >>> dashboard_path_for(9999)
        '/dashboard'
    """
    role = coerce_role(indicator)
    return DASHBOARD_PATHS.get(role, DEFAULT_DASHBOARD_PATH)


def get_dashboard_path(user: Any) -> str:
    """
    Dashboard path for a user record.

    Example:
        >>> get_dashboard_path({"roleId": "1001"})
        '/client/dashboard'
        >>> get_dashboard_path({"username": "ADMIN_USER"})
        '/admin/dashboard'
        >>> get_dashboard_path(None)
        '/dashboard'
    """
    role = normalize_role(user)
    path = DASHBOARD_PATHS.get(role, DEFAULT_DASHBOARD_PATH)
    logger.debug(f"Dashboard for role {role.role_name}: {path}")
    return path


def role_section(role: Any) -> Optional[str]:
    """Area prefix (/admin, /manager, /client) for a role, None if unknown."""
    return ROLE_SECTIONS.get(role_from_id(role) if not isinstance(role, Role) else role)


def is_within_section(pathname: str, role: Role) -> bool:
    """
    True when pathname is the role's section root or lies beneath it.

    Example:
        >>> is_within_section("/client/projects", Role.CLIENT)
        True
        >>> is_within_section("/clients-portfolio", Role.CLIENT)
        False
    """
    section = role_section(role)
    if section is None or not pathname:
        return False
    return pathname == section or pathname.startswith(section + "/")
