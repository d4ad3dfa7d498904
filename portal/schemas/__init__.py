"""
Pydantic Schemas Package

Request/response models for the portal API.

- Base: Proofs, ApiResponse
- Auth: LoginRequest, RefreshRequest
- Redirect: ResolveRequest, PageSnapshot, RedirectFailureReport
"""

from portal.schemas.base import Proofs, ApiResponse
from portal.schemas.auth import LoginRequest, RefreshRequest
from portal.schemas.redirect import ResolveRequest, PageSnapshot, RedirectFailureReport

__all__ = [
    "Proofs",
    "ApiResponse",
    "LoginRequest",
    "RefreshRequest",
    "ResolveRequest",
    "PageSnapshot",
    "RedirectFailureReport",
]
