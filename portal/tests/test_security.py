"""
Security and Auth Service Tests

Tests for:
- core.security (tokens, bearer parsing, role guards)
- services.user_directory
- services.auth_service

Run: pytest portal/tests/test_security.py -v
"""

from datetime import timedelta

import pytest


# ==================== Tokens ====================

def test_access_token_round_trip():
    from portal.core.security import create_access_token, decode_token, role_from_claims
    from portal.constants.roles import Role

    token = create_access_token({"id": 7, "username": "boss", "email": "b@x.io", "roleId": 1002})
    claims = decode_token(token)

    assert claims["sub"] == "7"
    assert claims["type"] == "access"
    assert role_from_claims(claims) is Role.ADMIN


def test_refresh_token_rejected_as_access_token():
    from portal.core.errors import UnauthorizedError
    from portal.core.security import create_refresh_token, decode_token

    token = create_refresh_token({"id": 7})

    with pytest.raises(UnauthorizedError) as exc_info:
        decode_token(token)
    assert exc_info.value.details["reason"] == "wrong_token_type"
    assert decode_token(token, expected_type="refresh")["sub"] == "7"


def test_expired_token():
    from portal.core.errors import UnauthorizedError
    from portal.core.security import _encode, decode_token

    token = _encode({"sub": "1", "type": "access"}, timedelta(seconds=-30))

    with pytest.raises(UnauthorizedError) as exc_info:
        decode_token(token)
    assert exc_info.value.details["reason"] == "expired"


def test_token_signed_with_other_secret(monkeypatch):
    from portal.core.errors import UnauthorizedError
    from portal.core.security import create_access_token, decode_token

    token = create_access_token({"id": 1, "roleId": 1001})
    monkeypatch.setenv("JWT_SECRET", "another-secret")

    with pytest.raises(UnauthorizedError):
        decode_token(token)


def test_random_secret_when_unset(monkeypatch):
    from portal.core import security

    monkeypatch.delenv("JWT_SECRET")
    monkeypatch.setattr(security, "_process_secret", None)

    first = security.get_signing_secret()
    assert first == security.get_signing_secret()
    assert len(first) == 128


@pytest.mark.parametrize("header,expected", [
    ("Bearer abc", "abc"),
    ("bearer abc", "abc"),
    ("Basic abc", None),
    ("Bearer", None),
    ("", None),
    (None, None),
])
def test_parse_bearer_token(header, expected):
    from portal.core.security import parse_bearer_token

    assert parse_bearer_token(header) == expected


def test_require_auth_missing_header():
    from portal.core.errors import UnauthorizedError
    from portal.core.security import require_auth

    with pytest.raises(UnauthorizedError):
        require_auth(None)
    with pytest.raises(UnauthorizedError):
        require_auth("Basic abc")


def test_require_role():
    from portal.constants.roles import Role
    from portal.core.errors import ForbiddenError
    from portal.core.security import has_role, is_admin, require_role

    assert require_role(Role.ADMIN, [Role.ADMIN, Role.MANAGER]) is Role.ADMIN
    assert has_role(Role.CLIENT, [Role.CLIENT])
    assert not is_admin(Role.MANAGER)

    with pytest.raises(ForbiddenError) as exc_info:
        require_role(Role.UNKNOWN, [Role.ADMIN])
    assert exc_info.value.details["user_role"] == "unknown"


def test_to_http_exception_adds_bearer_challenge():
    from portal.core.errors import UnauthorizedError, ValidationError, to_http_exception

    exc = to_http_exception(UnauthorizedError("nope"))
    assert exc.status_code == 401
    assert exc.headers["WWW-Authenticate"] == "Bearer"

    assert to_http_exception(ValidationError("bad")).status_code == 400


# ==================== User Directory ====================

def test_directory_authenticate(directory):
    assert directory.authenticate("ADMIN", "secret123").username == "admin"
    assert directory.authenticate("admin", "wrong") is None
    assert directory.authenticate("ghost", "secret123") is None
    assert directory.get_by_id("2").username == "manager"
    assert directory.get_by_id("abc") is None
    assert [user.username for user in directory.list_users()] == ["admin", "manager", "client"]


def test_directory_rejects_duplicates_and_blanks(directory):
    from portal.core.errors import ConflictError, ValidationError

    with pytest.raises(ConflictError):
        directory.add_user("Admin", "pw", 1002)
    with pytest.raises(ValidationError):
        directory.add_user("  ", "pw", 1002)
    with pytest.raises(ValidationError):
        directory.add_user("new", "", 1002)


def test_password_is_hashed(directory):
    record = directory.get_by_username("client")

    assert record.password_hash != "secret123"
    assert "password_hash" not in record.to_public_dict()


# ==================== Auth Service ====================

def test_login_local_host(directory):
    from portal.constants.roles import Role
    from portal.services.auth_service import login

    result = login("manager", "secret123", host="localhost:5000", directory=directory)

    assert result.role is Role.MANAGER
    assert result.redirect_url == "/manager/dashboard"
    assert result.is_deployed_env is False
    assert "targetRedirect" not in result.storage
    assert result.storage["accessToken"] == result.access_token


def test_login_deployed_host(directory):
    from portal.services.auth_service import login

    result = login("client", "secret123", host="portal.replit.app", directory=directory)

    assert result.is_deployed_env is True
    assert result.storage["targetRedirect"] == "/client/dashboard"


def test_login_legacy_token_user(directory):
    from portal.services.auth_service import login

    directory.add_user("ops", "pw", "YcKKrgriG70R2O9Qg4io")
    result = login("ops", "pw", directory=directory)

    assert result.redirect_url == "/admin/dashboard"
    assert result.user["roleId"] == "YcKKrgriG70R2O9Qg4io"


def test_selected_role_only_used_when_role_unknown(directory):
    from portal.services.auth_service import login

    directory.add_user("jdoe", "pw", 4242)

    assert login("jdoe", "pw", selected_role="client", directory=directory).redirect_url == "/client/dashboard"
    assert login("admin", "secret123", selected_role="client", directory=directory).redirect_url == "/admin/dashboard"
    assert login("jdoe", "pw", directory=directory).redirect_url == "/dashboard"


def test_login_failures(directory):
    from portal.core.errors import UnauthorizedError, ValidationError
    from portal.services.auth_service import login

    with pytest.raises(UnauthorizedError):
        login("admin", "wrong", directory=directory)
    with pytest.raises(ValidationError):
        login("", "secret123", directory=directory)


def test_current_user_and_refresh(directory):
    from portal.core.errors import UnauthorizedError
    from portal.core.security import decode_token
    from portal.services.auth_service import current_user, login, refresh_access_token

    result = login("admin", "secret123", directory=directory)

    assert current_user(f"Bearer {result.access_token}", directory=directory)["username"] == "admin"

    new_token = refresh_access_token(result.refresh_token, directory=directory)
    assert decode_token(new_token)["roleId"] == 1002

    with pytest.raises(UnauthorizedError):
        refresh_access_token(result.access_token, directory=directory)

    directory.clear()
    with pytest.raises(UnauthorizedError):
        current_user(f"Bearer {result.access_token}", directory=directory)


def test_is_deployed_host():
    from portal.core.config import is_deployed_host

    assert is_deployed_host("my-app.replit.dev")
    assert is_deployed_host("WWW.ADITEKE.COM")
    assert not is_deployed_host("localhost:5000")
    assert not is_deployed_host(None)
    assert is_deployed_host("staging.internal", patterns=["staging."])
