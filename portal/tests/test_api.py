"""
API Tests

Tests for FastAPI endpoints using TestClient.
The user directory is replaced by a seeded in-memory one.

Run: pytest portal/tests/test_api.py -v
"""

import json

import pytest


# ==================== Test Client Fixture ====================

@pytest.fixture
def client(shared_directory):
    """Create FastAPI TestClient."""
    from fastapi.testclient import TestClient
    from portal.main import app

    with TestClient(app) as test_client:
        yield test_client


def login(client, username="admin", password="secret123", **extra):
    response = client.post("/api/login", json={"username": username, "password": password, **extra})
    assert response.status_code == 200, response.text
    return response.json()["data"]


# ==================== Health and Root Endpoints ====================

def test_root_endpoint(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["status"] == "running"


def test_health_endpoint(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_trace_id_is_echoed(client):
    response = client.post("/api/logout", headers={"x-request-id": "trace-abc"})

    assert response.headers["x-request-id"] == "trace-abc"
    assert response.json()["proofs"]["trace_id"] == "trace-abc"


# ==================== Auth Endpoints ====================

def test_login_returns_redirect_and_storage(client):
    data = login(client, "manager")

    assert data["redirectUrl"] == "/manager/dashboard"
    assert data["user"]["roleId"] == 1000
    assert data["isDeployedEnv"] is False
    assert data["storage"]["isAuthenticated"] == "true"
    assert data["storage"]["userRole"] == "manager"


def test_login_on_deployed_host(client):
    response = client.post(
        "/api/login",
        json={"username": "client", "password": "secret123"},
        headers={"host": "portal.aditeke.com"}
    )

    data = response.json()["data"]
    assert data["isDeployedEnv"] is True
    assert data["storage"]["targetRedirect"] == "/client/dashboard"


def test_login_bad_credentials(client):
    response = client.post("/api/login", json={"username": "admin", "password": "nope"})

    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"
    assert response.json()["detail"]["code"] == "unauthorized"


def test_login_missing_fields(client):
    response = client.post("/api/login", json={"username": "admin"})

    assert response.status_code == 422


def test_current_user(client):
    data = login(client)

    response = client.get("/api/user", headers={"Authorization": f"Bearer {data['accessToken']}"})

    assert response.status_code == 200
    body = response.json()
    assert body["data"]["user"]["username"] == "admin"
    assert body["proofs"]["role"] == "admin"


def test_current_user_requires_token(client):
    assert client.get("/api/user").status_code == 401
    assert client.get("/api/user", headers={"Authorization": "Bearer junk"}).status_code == 401


def test_token_refresh(client):
    data = login(client, "client")

    response = client.post("/api/token/refresh", json={"refreshToken": data["refreshToken"]})
    assert response.status_code == 200
    new_token = response.json()["data"]["accessToken"]

    user = client.get("/api/user", headers={"Authorization": f"Bearer {new_token}"})
    assert user.json()["data"]["user"]["username"] == "client"

    wrong_type = client.post("/api/token/refresh", json={"refreshToken": data["accessToken"]})
    assert wrong_type.status_code == 401


def test_logout_lists_keys_to_clear(client):
    response = client.post("/api/logout")

    data = response.json()["data"]
    assert data["redirectUrl"] == "/"
    assert "currentUser" in data["clearKeys"]
    assert "targetRedirect" in data["clearKeys"]


# ==================== Redirect Endpoints ====================

@pytest.mark.parametrize("user,role,path", [
    ({"roleId": "1001"}, "client", "/client/dashboard"),
    ({"roleId": "YcKKrgriG70R2O9Qg4io"}, "admin", "/admin/dashboard"),
    ({"username": "ADMIN_USER"}, "admin", "/admin/dashboard"),
    ({"roleId": 9999}, "unknown", "/dashboard"),
])
def test_resolve(client, user, role, path):
    response = client.post("/api/redirect/resolve", json={"user": user})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["role"] == role
    assert data["dashboardPath"] == path


def test_resolve_keeps_raw_id_but_not_as_role(client):
    data = client.post("/api/redirect/resolve", json={"user": {"roleId": 9999}}).json()["data"]

    assert data["rawRoleId"] == 9999
    assert data["roleId"] is None


def test_resolve_without_user(client):
    data = client.post("/api/redirect/resolve", json={}).json()["data"]

    assert data["dashboardPath"] == "/dashboard"


def test_sniff_stored_target(client):
    response = client.post("/api/redirect/sniff", json={
        "url": "https://app.aditeke.com/login",
        "localStorage": {"isAuthenticated": "true", "targetRedirect": "/custom/path", "currentUser": "{bad"},
    })

    body = response.json()
    assert body["data"]["target"] == "/custom/path"
    assert body["data"]["navigations"] == ["/custom/path"]
    assert body["proofs"]["reason"] == "stored_target"


def test_sniff_malformed_user(client):
    response = client.post("/api/redirect/sniff", json={
        "url": "https://app.aditeke.com/login?login_success=true",
        "localStorage": {"currentUser": "{bad"},
    })

    body = response.json()
    assert body["data"]["target"] == "/dashboard"
    assert body["proofs"]["reason"] == "parse_error"


def test_sniff_resumes_failed_redirect(client):
    response = client.post("/api/redirect/sniff", json={
        "url": "https://app.aditeke.com/",
        "localStorage": {"fallbackRedirect": "/manager/dashboard"},
        "sessionStorage": {"failedRedirect": "/manager/dashboard"},
    })

    body = response.json()
    assert body["proofs"]["reason"] == "resumed_redirect"
    assert body["data"]["navigations"] == ["/manager/dashboard"]
    assert "fallbackRedirect" not in body["data"]["localStorage"]
    assert body["data"]["sessionStorage"] == {"pendingRedirect": "/manager/dashboard"}


def test_sniff_root_redirects_authenticated_user(client):
    response = client.post("/api/redirect/sniff", json={
        "url": "https://app.aditeke.com/",
        "localStorage": {"isAuthenticated": "true", "currentUser": json.dumps({"roleId": 1000})},
    })

    assert response.json()["data"]["target"] == "/manager/dashboard"


def test_sniff_no_redirect(client):
    response = client.post("/api/redirect/sniff", json={"url": "https://app.aditeke.com/about"})

    body = response.json()
    assert body["data"]["navigates"] is False
    assert body["data"]["navigations"] == []


def test_failure_report_without_collector(client):
    response = client.post("/api/redirect/failures", json={"url": "/admin/dashboard", "page": "/login"})

    assert response.status_code == 202
    assert response.json()["data"]["forwarded"] is False


def test_failure_report_forwarded(client, monkeypatch):
    from portal.tools import telemetry_client

    sent = []

    async def fake_report(url, page=None, reason=None, request_id=None, extra=None):
        sent.append((url, page, request_id))
        return True

    monkeypatch.setattr(telemetry_client, "report_redirect_failure", fake_report)

    response = client.post(
        "/api/redirect/failures",
        json={"url": "/client/dashboard"},
        headers={"x-request-id": "trace-42"}
    )

    assert response.json()["data"]["forwarded"] is True
    assert sent == [("/client/dashboard", None, "trace-42")]


def test_dashboard_redirect(client):
    data = login(client, "client")

    response = client.get(
        "/api/redirect/dashboard",
        headers={"Authorization": f"Bearer {data['accessToken']}"},
        follow_redirects=False
    )

    assert response.status_code == 303
    assert response.headers["location"] == "/client/dashboard"
    assert response.headers["cache-control"] == "private, no-store"


def test_dashboard_redirect_requires_auth(client):
    response = client.get("/api/redirect/dashboard", follow_redirects=False)

    assert response.status_code == 401


def test_role_redirect_script(client):
    response = client.get("/role-redirect.js")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/javascript")
    assert "/admin/dashboard" in response.text
    assert json.dumps("YcKKrgriG70R2O9Qg4io") in response.text
