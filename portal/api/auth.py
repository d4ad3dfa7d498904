"""
Auth API Endpoints

Endpoints:
- POST /login - Authenticate; returns user, tokens, redirect and storage writes
- POST /logout - Keys the browser must clear, and where to go next
- GET /user - Current user for a bearer token
- POST /token/refresh - New access token from a refresh token
"""

import logging

from fastapi import APIRouter, Request

from portal.api.common import get_auth_header, get_host, get_trace_id, standard_response
from portal.constants.paths import HOME_PATH
from portal.core.errors import AppError, to_http_exception
from portal.redirect.normalizer import normalize_role
from portal.schemas.auth import LoginRequest, RefreshRequest
from portal.schemas.base import ApiResponse
from portal.services import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/login", response_model=ApiResponse)
async def login(body: LoginRequest, request: Request):
    """
    Authenticate with username and password.

    The response tells the browser which dashboard to open, whether the host
    is a deployed environment (two-phase redirect) and which localStorage
    entries to write.
    """
    trace_id = get_trace_id(request)

    try:
        result = auth_service.login(
            body.username,
            body.password,
            host=get_host(request),
            selected_role=body.selected_role,
        )
    except AppError as e:
        raise to_http_exception(e)

    return standard_response(
        message=f"Welcome, {result.user.get('name') or result.user.get('username')}!",
        data={
            "user": result.user,
            "accessToken": result.access_token,
            "refreshToken": result.refresh_token,
            "redirectUrl": result.redirect_url,
            "isDeployedEnv": result.is_deployed_env,
            "storage": result.storage,
        },
        proofs={"role": result.role.role_name},
        trace_id=trace_id
    )


@router.post("/logout", response_model=ApiResponse)
async def logout(request: Request):
    """Tokens are stateless; logout is the client clearing its storage."""
    return standard_response(
        message="You have been logged out",
        data={"clearKeys": auth_service.logout_keys(), "redirectUrl": HOME_PATH},
        trace_id=get_trace_id(request)
    )


@router.get("/user", response_model=ApiResponse)
async def get_user(request: Request):
    """Current user for the bearer token in the Authorization header."""
    try:
        user = auth_service.current_user(get_auth_header(request))
    except AppError as e:
        raise to_http_exception(e)

    return standard_response(
        message="Authenticated",
        data={"user": user},
        proofs={"role": normalize_role(user).role_name},
        trace_id=get_trace_id(request)
    )


@router.post("/token/refresh", response_model=ApiResponse)
async def refresh_token(body: RefreshRequest, request: Request):
    try:
        access_token = auth_service.refresh_access_token(body.refresh_token)
    except AppError as e:
        raise to_http_exception(e)

    return standard_response(
        message="Token refreshed",
        data={"accessToken": access_token},
        trace_id=get_trace_id(request)
    )
