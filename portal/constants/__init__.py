"""
Constants Package

Centralized constants for the portal service.

Exports:
- Role identifiers, the closed Role enum and role helpers
- Dashboard paths and sniffer path markers
- Browser storage key names
- Global constants (headers, defaults)

Safe to import anywhere - no heavy dependencies or circular imports.
"""

# Role constants
from .roles import (
    MANAGER_ROLE_ID,
    CLIENT_ROLE_ID,
    ADMIN_ROLE_ID,
    Role,
    ALL_ROLE_IDS,
    ROLE_NAMES,
    LEGACY_ROLE_TOKENS,
    USERNAME_ROLE_HINTS,
    is_known_role_id,
    role_from_id,
    role_from_name,
    role_from_legacy_token,
    role_from_username,
)

# Path constants
from .paths import (
    ADMIN_DASHBOARD_PATH,
    MANAGER_DASHBOARD_PATH,
    CLIENT_DASHBOARD_PATH,
    DEFAULT_DASHBOARD_PATH,
    HOME_PATH,
    DASHBOARD_PATHS,
    ROLE_SECTIONS,
    LOGIN_PATH_MARKER,
    LOGIN_SUCCESS_PARAM,
    LOGIN_SUCCESS_VALUE,
    ROLE_PATH_FRAGMENTS,
    is_inapp_path,
)

# Global constants
from .constants import (
    TRACE_HEADER_NAME,
    AUTHORIZATION_HEADER_NAME,
    HOST_HEADER_NAME,
    DEFAULT_REDIRECT_FALLBACK_DELAY_MS,
    DEFAULT_MAX_REDIRECT_RESUME_ATTEMPTS,
    normalize_trace_id,
)

__all__ = [
    # Roles
    "MANAGER_ROLE_ID",
    "CLIENT_ROLE_ID",
    "ADMIN_ROLE_ID",
    "Role",
    "ALL_ROLE_IDS",
    "ROLE_NAMES",
    "LEGACY_ROLE_TOKENS",
    "USERNAME_ROLE_HINTS",
    "is_known_role_id",
    "role_from_id",
    "role_from_name",
    "role_from_legacy_token",
    "role_from_username",
    # Paths
    "ADMIN_DASHBOARD_PATH",
    "MANAGER_DASHBOARD_PATH",
    "CLIENT_DASHBOARD_PATH",
    "DEFAULT_DASHBOARD_PATH",
    "HOME_PATH",
    "DASHBOARD_PATHS",
    "ROLE_SECTIONS",
    "LOGIN_PATH_MARKER",
    "LOGIN_SUCCESS_PARAM",
    "LOGIN_SUCCESS_VALUE",
    "ROLE_PATH_FRAGMENTS",
    "is_inapp_path",
    # Global
    "TRACE_HEADER_NAME",
    "AUTHORIZATION_HEADER_NAME",
    "HOST_HEADER_NAME",
    "DEFAULT_REDIRECT_FALLBACK_DELAY_MS",
    "DEFAULT_MAX_REDIRECT_RESUME_ATTEMPTS",
    "normalize_trace_id",
]
