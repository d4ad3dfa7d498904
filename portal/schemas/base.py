"""
Base Schemas

Envelope shared by every JSON endpoint: {message, data, proofs}.
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field, ConfigDict


class Proofs(BaseModel):
    """
    Tracing information included in responses.

    - trace_id: Request trace ID
    - role: Caller's resolved role name, when known
    - reason: Why a decision was taken (sniffer, redirects)
    """
    trace_id: Optional[str] = Field(None, description="Request trace ID")
    role: Optional[str] = Field(None, description="Resolved role name")
    reason: Optional[str] = Field(None, description="Decision reason")

    model_config = ConfigDict(extra="allow")


class ApiResponse(BaseModel):
    """Standard response envelope."""
    message: str = Field(..., description="Human-readable summary")
    data: Dict[str, Any] = Field(default_factory=dict, description="Response payload")
    proofs: Optional[Proofs] = Field(None, description="Tracing information")

    model_config = ConfigDict(extra="allow")
