"""
Core Errors Module

Error classes for the server-side surface (login, tokens, API guards) and
helpers converting them to HTTP responses.

Browser-side bookkeeping (role normalization, redirects, the sniffer) never
raises these: those paths recover locally and log instead.

Usage:
    from portal.core.errors import UnauthorizedError, to_http_exception

    raise UnauthorizedError("Invalid credentials")
"""

import logging
from typing import Optional, Dict, Any

logger = logging.getLogger(__name__)


# ==================== Base Error Class ====================

class AppError(Exception):
    """
    Base application error.

    Subclasses fix the code and HTTP status; details is an optional dict
    returned to the client as-is (never put secrets in it).
    """

    def __init__(
        self,
        message: str,
        code: str = "app_error",
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.status_code = status_code

    def to_dict(self, trace_id: Optional[str] = None) -> Dict[str, Any]:
        """Convert error to a JSON-serializable dict."""
        return error_payload(self.code, self.message, details=self.details, trace_id=trace_id)


# ==================== Specific Error Classes ====================

class ValidationError(AppError):
    """Input validation failed (400)."""

    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="validation_error", details=details, status_code=400)


class UnauthorizedError(AppError):
    """Authentication missing or invalid (401)."""

    def __init__(self, message: str = "Authentication required", details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="unauthorized", details=details, status_code=401)


class ForbiddenError(AppError):
    """Authenticated, but the role may not access the resource (403)."""

    def __init__(self, message: str = "Access forbidden", details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="forbidden", details=details, status_code=403)


class ConflictError(AppError):
    """Resource already exists (409)."""

    def __init__(self, message: str = "Resource already exists", details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="conflict", details=details, status_code=409)


# ==================== Helper Functions ====================

def error_payload(
    code: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
    trace_id: Optional[str] = None
) -> Dict[str, Any]:
    """
    Create a standardized error payload dict.

    Example:
        >>> error_payload("bad_request", "Invalid input", trace_id="abc123")
        {'code': 'bad_request', 'message': 'Invalid input', 'trace_id': 'abc123'}
    """
    result: Dict[str, Any] = {
        "code": code,
        "message": message,
    }

    if details:
        result["details"] = details

    if trace_id:
        result["trace_id"] = trace_id

    return result


def to_http_exception(error: AppError):
    """
    Convert AppError to a FastAPI HTTPException carrying the error payload.

    401 responses get a WWW-Authenticate header so bearer clients know to
    re-authenticate.
    """
    from fastapi import HTTPException
    from portal.core.logging import get_trace_id

    trace_id = get_trace_id()
    if trace_id == "-":
        trace_id = None

    headers = {"WWW-Authenticate": "Bearer"} if error.status_code == 401 else None

    if error.status_code >= 500:
        logger.error(f"Server error ({error.code}): {error.message}")

    return HTTPException(
        status_code=error.status_code,
        detail=error.to_dict(trace_id=trace_id),
        headers=headers
    )
