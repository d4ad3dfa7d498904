"""
Auth Schemas

Request models for login, logout and token refresh.
"""

from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class LoginRequest(BaseModel):
    """
    Login payload.

    selected_role is the role picked on the login screen (admin, manager,
    client); it only matters when the account's own role cannot be resolved.
    """
    username: str = Field(..., description="Login name", min_length=1)
    password: str = Field(..., description="Password", min_length=1)
    selected_role: Optional[str] = Field(None, alias="selectedRole", description="Role chosen on the login screen")

    model_config = ConfigDict(populate_by_name=True)


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., alias="refreshToken", min_length=1)

    model_config = ConfigDict(populate_by_name=True)
