"""
Redirect Schemas

Request models for role resolution, the sniffer and failure reports.

User records are accepted as free-form dicts: the role arrives as a
number, a numeric string, a legacy token or not at all, and the
normalizer is what makes sense of it.
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field, ConfigDict


class ResolveRequest(BaseModel):
    """User record to resolve to a role and dashboard."""
    user: Optional[Dict[str, Any]] = Field(None, description="User record (roleId, username, ...)")


class PageSnapshot(BaseModel):
    """
    State of a browser page for a server-side sniffer run.

    Storage values are the raw strings the browser holds.
    """
    url: str = Field(..., description="Full page URL", min_length=1)
    local_storage: Dict[str, str] = Field(default_factory=dict, alias="localStorage")
    session_storage: Dict[str, str] = Field(default_factory=dict, alias="sessionStorage")

    model_config = ConfigDict(populate_by_name=True)


class RedirectFailureReport(BaseModel):
    """Failed navigation reported by the browser (fallbackRedirect)."""
    url: str = Field(..., description="Redirect target that failed", min_length=1)
    page: Optional[str] = Field(None, description="Page the browser was on")
    reason: Optional[str] = Field(None, description="Failure reason, if known")

    model_config = ConfigDict(extra="allow")
