"""
Shared helpers for API routers.
"""

from typing import Any, Dict, Optional

from fastapi import Request

from portal.constants.constants import AUTHORIZATION_HEADER_NAME, HOST_HEADER_NAME
from portal.core.logging import get_trace_id as current_trace_id


def get_trace_id(request: Request) -> Optional[str]:
    """Trace id set by the request middleware (None outside a request)."""
    trace_id = getattr(request.state, "trace_id", None) or current_trace_id()
    return None if trace_id == "-" else trace_id


def get_auth_header(request: Request) -> Optional[str]:
    return request.headers.get(AUTHORIZATION_HEADER_NAME)


def get_host(request: Request) -> Optional[str]:
    return request.headers.get(HOST_HEADER_NAME)


def standard_response(
    message: str,
    data: Optional[Dict[str, Any]] = None,
    proofs: Optional[Dict[str, Any]] = None,
    trace_id: Optional[str] = None
) -> Dict[str, Any]:
    """Build standard response format."""
    merged = {"trace_id": trace_id}
    if proofs:
        merged.update(proofs)
    return {
        "message": message,
        "data": data or {},
        "proofs": merged
    }
