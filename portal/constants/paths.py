"""
Path Constants

Fixed in-app paths produced by dashboard routing and matched by the
login-success sniffer.
"""

import re
from typing import Dict, Tuple

from portal.constants.roles import Role

# ============================================================================
# Dashboard Paths
# ============================================================================

ADMIN_DASHBOARD_PATH = "/admin/dashboard"
MANAGER_DASHBOARD_PATH = "/manager/dashboard"
CLIENT_DASHBOARD_PATH = "/client/dashboard"
DEFAULT_DASHBOARD_PATH = "/dashboard"

HOME_PATH = "/"

# Single table, keyed by Role. Legacy tokens are normalized before lookup.
DASHBOARD_PATHS: Dict[Role, str] = {
    Role.ADMIN: ADMIN_DASHBOARD_PATH,
    Role.MANAGER: MANAGER_DASHBOARD_PATH,
    Role.CLIENT: CLIENT_DASHBOARD_PATH,
}

# Area prefix each role's pages live under
ROLE_SECTIONS: Dict[Role, str] = {
    Role.ADMIN: "/admin",
    Role.MANAGER: "/manager",
    Role.CLIENT: "/client",
}


# ============================================================================
# Sniffer Markers
# ============================================================================

LOGIN_PATH_MARKER = "/login"
LOGIN_SUCCESS_PARAM = "login_success"
LOGIN_SUCCESS_VALUE = "true"

# Path fragments that imply a role, most specific first
ROLE_PATH_FRAGMENTS: Tuple[Tuple[str, Role], ...] = (
    ("/login/admin", Role.ADMIN),
    ("/login/manager", Role.MANAGER),
    ("/login/client", Role.CLIENT),
    ("/admin/login", Role.ADMIN),
    ("/manager/login", Role.MANAGER),
    ("/client/login", Role.CLIENT),
    ("admin", Role.ADMIN),
    ("manager", Role.MANAGER),
    ("client", Role.CLIENT),
)

# Allowed in-app redirect targets: absolute path, no "//", no ".."
INAPP_PATH_PATTERN = re.compile(r"^(?!.*//)(?!.*\.\.)/[A-Za-z0-9._\-/]*$")
MAX_INAPP_REDIRECT_LEN = 256


def is_inapp_path(value: object) -> bool:
    """
    Check that value is a safe absolute in-app path.

    Example:
        >>> is_inapp_path("/custom/path")
        True
        >>> is_inapp_path("https://evil.example")
        False
        >>> is_inapp_path("//evil.example")
        False
    """
    if not isinstance(value, str) or len(value) > MAX_INAPP_REDIRECT_LEN:
        return False
    return bool(INAPP_PATH_PATTERN.match(value))
