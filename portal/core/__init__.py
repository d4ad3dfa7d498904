"""
Core Package

Configuration, logging, error handling and security utilities for the
portal service.

Modules:
- config: Environment configuration and settings
- logging: Logging with trace_id support
- errors: Error classes and HTTP conversion
- security: Bearer tokens and role guards

Usage:
    from portal.core import settings, setup_logging, set_trace_id
    from portal.core import UnauthorizedError, require_role
"""

# Configuration
from portal.core.config import settings, get_settings, is_production, is_deployed_host

# Logging
from portal.core.logging import (
    setup_logging,
    set_trace_id,
    get_trace_id,
)

# Errors
from portal.core.errors import (
    AppError,
    ValidationError,
    UnauthorizedError,
    ForbiddenError,
    ConflictError,
    error_payload,
    to_http_exception
)

# Security
from portal.core.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    parse_bearer_token,
    require_auth,
    require_role,
    has_role,
    is_admin,
)

__all__ = [
    # Config
    "settings",
    "get_settings",
    "is_production",
    "is_deployed_host",

    # Logging
    "setup_logging",
    "set_trace_id",
    "get_trace_id",

    # Errors
    "AppError",
    "ValidationError",
    "UnauthorizedError",
    "ForbiddenError",
    "ConflictError",
    "error_payload",
    "to_http_exception",

    # Security
    "create_access_token",
    "create_refresh_token",
    "decode_token",
    "parse_bearer_token",
    "require_auth",
    "require_role",
    "has_role",
    "is_admin",
]
