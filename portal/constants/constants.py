"""
Global Constants

Non-business constants used throughout the application.
These are infrastructure/technical constants, not role or path tables.
"""

import uuid
from typing import Optional

# ============================================================================
# HTTP Headers
# ============================================================================

TRACE_HEADER_NAME = "x-request-id"
AUTHORIZATION_HEADER_NAME = "authorization"
HOST_HEADER_NAME = "host"


# ============================================================================
# Default Values
# ============================================================================

# Delay before the second (replace-style) navigation in deployed environments
DEFAULT_REDIRECT_FALLBACK_DELAY_MS = 100

# Number of times a failed redirect is re-attempted at bootstrap
DEFAULT_MAX_REDIRECT_RESUME_ATTEMPTS = 2

ACCESS_TOKEN_TTL_MINUTES = 15
REFRESH_TOKEN_TTL_DAYS = 7

TOKEN_TYPE_ACCESS = "access"
TOKEN_TYPE_REFRESH = "refresh"


# ============================================================================
# Helper Functions
# ============================================================================

def normalize_trace_id(trace_id: Optional[str]) -> str:
    """
    Normalize trace ID, generate new one if missing/invalid.

    Example:
        >>> normalize_trace_id("abc123")
        'abc123'
        >>> len(normalize_trace_id(None))
        36
    """
    if not trace_id or not isinstance(trace_id, str) or not trace_id.strip():
        return str(uuid.uuid4())
    return trace_id.strip()
