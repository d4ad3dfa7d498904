"""
Browser Storage Keys

Key names written to and read from the browser's localStorage and
sessionStorage. Values are always strings.
"""

from typing import Tuple

# ============================================================================
# localStorage
# ============================================================================

IS_AUTHENTICATED = "isAuthenticated"
CURRENT_USER = "currentUser"
TARGET_REDIRECT = "targetRedirect"
USER_ROLE = "userRole"
USER_ROLE_ID = "userRoleId"
USER_NUMERIC_ROLE_ID = "userNumericRoleId"
ACCESS_TOKEN = "accessToken"
REFRESH_TOKEN = "refreshToken"
SELECTED_ROLE = "selectedRole"
FORCE_REFRESH = "forceRefresh"
LOGIN_TIMESTAMP = "loginTimestamp"
LOGIN_STATUS = "loginStatus"
AUTH_TOKEN = "authToken"

# Redirect diagnostics
FALLBACK_REDIRECT = "fallbackRedirect"
FALLBACK_REDIRECT_ATTEMPTS = "fallbackRedirectAttempts"


# ============================================================================
# sessionStorage
# ============================================================================

PENDING_REDIRECT = "pendingRedirect"
FAILED_REDIRECT = "failedRedirect"


# ============================================================================
# Groups
# ============================================================================

TRUE_VALUE = "true"
LOGIN_STATUS_SUCCESS = "success"

# Everything removed from localStorage at logout
AUTH_KEYS: Tuple[str, ...] = (
    CURRENT_USER,
    IS_AUTHENTICATED,
    SELECTED_ROLE,
    ACCESS_TOKEN,
    REFRESH_TOKEN,
    USER_ROLE,
    USER_ROLE_ID,
    USER_NUMERIC_ROLE_ID,
    FORCE_REFRESH,
    LOGIN_TIMESTAMP,
    LOGIN_STATUS,
    TARGET_REDIRECT,
    AUTH_TOKEN,
)
