"""
Core Security Module

Bearer token issuing/verification and role guards for API endpoints.

Tokens are HS256 JWTs signed with JWT_SECRET. When no secret is
configured a random per-process secret is generated, which invalidates
every token on restart.

Usage:
    from portal.core.security import create_access_token, decode_token, require_role

    token = create_access_token(user)
    claims = decode_token(token, expected_type="access")
    require_role(role, [Role.ADMIN, Role.MANAGER])
"""

import logging
import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, Optional

from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError

from portal.constants.constants import TOKEN_TYPE_ACCESS, TOKEN_TYPE_REFRESH
from portal.constants.roles import Role, role_from_id
from portal.core.config import settings
from portal.core.errors import UnauthorizedError, ForbiddenError

logger = logging.getLogger(__name__)

_process_secret: Optional[str] = None


def get_signing_secret() -> str:
    """Return JWT_SECRET, or a random secret generated once per process."""
    global _process_secret

    configured = settings.JWT_SECRET
    if configured:
        return configured

    if _process_secret is None:
        _process_secret = secrets.token_hex(64)
        logger.warning("JWT_SECRET not set - using a random per-process signing secret")

    return _process_secret


# ==================== Token Issuing ====================

def _encode(claims: Dict[str, Any], ttl: timedelta) -> str:
    now = datetime.now(timezone.utc)
    payload = dict(claims)
    payload["iat"] = now
    payload["exp"] = now + ttl
    return jwt.encode(payload, get_signing_secret(), algorithm=settings.JWT_ALGORITHM)


def create_access_token(user: Dict[str, Any]) -> str:
    """
    Issue a short-lived access token for a user record.

    Args:
        user: Public user dict with id, username, email, roleId
    """
    claims = {
        "sub": str(user.get("id")),
        "username": user.get("username"),
        "email": user.get("email"),
        "roleId": user.get("roleId"),
        "type": TOKEN_TYPE_ACCESS,
    }
    return _encode(claims, timedelta(minutes=settings.ACCESS_TOKEN_TTL_MINUTES))


def create_refresh_token(user: Dict[str, Any]) -> str:
    """Issue a long-lived refresh token carrying only the subject and a jti."""
    claims = {
        "sub": str(user.get("id")),
        "type": TOKEN_TYPE_REFRESH,
        "jti": uuid.uuid4().hex,
    }
    return _encode(claims, timedelta(days=settings.REFRESH_TOKEN_TTL_DAYS))


# ==================== Token Verification ====================

def parse_bearer_token(auth_header: Optional[str]) -> Optional[str]:
    """
    Extract bearer token from an Authorization header.

    Example:
        >>> parse_bearer_token("Bearer abc123")
        'abc123'
        >>> parse_bearer_token("Basic abc123") is None
        True
    """
    if not auth_header:
        return None

    parts = auth_header.split()
    if len(parts) != 2:
        return None

    if parts[0].lower() != "bearer":
        return None

    return parts[1]


def decode_token(token: Optional[str], expected_type: str = TOKEN_TYPE_ACCESS) -> Dict[str, Any]:
    """
    Verify a token and return its claims.

    Raises:
        UnauthorizedError: If the token is missing, expired, malformed or of
            the wrong type
    """
    if not token:
        raise UnauthorizedError(details={"reason": "Missing bearer token"})

    try:
        claims = jwt.decode(token, get_signing_secret(), algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise UnauthorizedError("Token expired", details={"reason": "expired"})
    except JWTError:
        raise UnauthorizedError("Invalid token", details={"reason": "invalid"})

    if claims.get("type") != expected_type:
        raise UnauthorizedError("Invalid token", details={"reason": "wrong_token_type"})

    return claims


def require_auth(auth_header: Optional[str]) -> Dict[str, Any]:
    """
    Require a valid access token in the Authorization header.

    Returns:
        Access token claims
    """
    if auth_header is None or not auth_header.strip():
        raise UnauthorizedError(details={"reason": "Missing Authorization header"})

    return decode_token(parse_bearer_token(auth_header), expected_type=TOKEN_TYPE_ACCESS)


# ==================== Authorization (RBAC) ====================

def role_from_claims(claims: Dict[str, Any]) -> Role:
    return role_from_id(claims.get("roleId"))


def require_role(role: Role, allowed_roles: Iterable[Role]) -> Role:
    """
    Require one of the allowed roles.

    Raises:
        ForbiddenError: If role is UNKNOWN or not allowed
    """
    allowed = list(allowed_roles)
    if role not in allowed:
        logger.warning(f"Access denied: role '{role.role_name}' not in {[r.role_name for r in allowed]}")
        raise ForbiddenError(
            message="Insufficient permissions",
            details={
                "user_role": role.role_name,
                "allowed_roles": [r.role_name for r in allowed],
            }
        )
    return role


def has_role(role: Role, allowed_roles: Iterable[Role]) -> bool:
    """Non-raising version of require_role()."""
    return role in list(allowed_roles)


def is_admin(role: Role) -> bool:
    return role is Role.ADMIN
