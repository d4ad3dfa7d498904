"""
Auth Service

Login, current-user lookup and token refresh.

A successful login returns everything the browser needs to finish the
flow without guessing: the public user record, tokens, the dashboard to go
to, whether the host counts as a deployed environment, and the exact
localStorage writes to perform.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from portal.constants import storage_keys as keys
from portal.constants.constants import TOKEN_TYPE_REFRESH
from portal.constants.paths import DASHBOARD_PATHS, DEFAULT_DASHBOARD_PATH
from portal.constants.roles import Role, role_from_name
from portal.core.config import is_deployed_host
from portal.core.errors import UnauthorizedError, ValidationError
from portal.core.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    require_auth,
)
from portal.redirect.normalizer import normalize_role
from portal.services.user_directory import UserDirectory, get_user_directory
from portal.session.bootstrap import build_login_storage

logger = logging.getLogger(__name__)


@dataclass
class LoginResult:
    user: Dict[str, Any]
    role: Role
    access_token: str
    refresh_token: str
    redirect_url: str
    is_deployed_env: bool
    storage: Dict[str, str] = field(default_factory=dict)


def resolve_login_redirect(user: Dict[str, Any], selected_role: Optional[str] = None) -> str:
    """
    Dashboard for a freshly logged-in user.

    The role the user picked on the login screen is only consulted when
    their record resolves to no known role.
    """
    role = normalize_role(user)
    if not role.is_known and selected_role:
        role = role_from_name(selected_role)
        if role.is_known:
            logger.info(f"Role unresolved for {user.get('username')} - using selected role {role.role_name}")
    return DASHBOARD_PATHS.get(role, DEFAULT_DASHBOARD_PATH)


def login(
    username: str,
    password: str,
    host: Optional[str] = None,
    selected_role: Optional[str] = None,
    directory: Optional[UserDirectory] = None
) -> LoginResult:
    """
    Authenticate and prepare the post-login redirect.

    Args:
        username: Login name
        password: Plain-text password
        host: Request Host header (drives deployed-environment handling)
        selected_role: Role name chosen on the login screen (optional)
        directory: User store (process singleton by default)

    Raises:
        ValidationError: Missing username or password
        UnauthorizedError: Bad credentials
    """
    if not username or not password:
        raise ValidationError("Username and password are required")

    directory = directory or get_user_directory()
    record = directory.authenticate(username, password)
    if record is None:
        logger.warning(f"Failed login for username '{username}'")
        raise UnauthorizedError("Authentication failed. Please check your credentials.")

    user = record.to_public_dict()
    role = normalize_role(user)
    redirect_url = resolve_login_redirect(user, selected_role)
    deployed = is_deployed_host(host)

    access_token = create_access_token(user)
    refresh_token = create_refresh_token(user)

    storage = build_login_storage(
        user,
        redirect_url,
        access_token=access_token,
        refresh_token=refresh_token,
        is_deployed_env=deployed,
    )

    logger.info(f"User {record.username} logged in as {role.role_name} -> {redirect_url}")

    return LoginResult(
        user=user,
        role=role,
        access_token=access_token,
        refresh_token=refresh_token,
        redirect_url=redirect_url,
        is_deployed_env=deployed,
        storage=storage,
    )


def current_user(auth_header: Optional[str], directory: Optional[UserDirectory] = None) -> Dict[str, Any]:
    """
    Resolve the bearer token to a public user record.

    Raises:
        UnauthorizedError: Missing/invalid token or the user no longer exists
    """
    claims = require_auth(auth_header)
    directory = directory or get_user_directory()
    record = directory.get_by_id(claims.get("sub"))
    if record is None:
        raise UnauthorizedError("User no longer exists", details={"reason": "unknown_subject"})
    return record.to_public_dict()


def refresh_access_token(refresh_token: Optional[str], directory: Optional[UserDirectory] = None) -> str:
    """Exchange a refresh token for a new access token."""
    claims = decode_token(refresh_token, expected_type=TOKEN_TYPE_REFRESH)
    directory = directory or get_user_directory()
    record = directory.get_by_id(claims.get("sub"))
    if record is None:
        raise UnauthorizedError("User no longer exists", details={"reason": "unknown_subject"})
    return create_access_token(record.to_public_dict())


def logout_keys() -> List[str]:
    """localStorage keys the browser must remove at logout."""
    return list(keys.AUTH_KEYS)
