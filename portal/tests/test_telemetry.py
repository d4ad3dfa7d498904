"""
Telemetry Client Tests

Uses httpx.MockTransport in place of the real collector.

Run: pytest portal/tests/test_telemetry.py -v
"""

import json

import httpx
import pytest


@pytest.fixture
def collector(monkeypatch):
    """Install a mock-transport client and capture what it receives."""
    from portal.tools import telemetry_client

    received = []
    status = {"code": 202}

    def handler(request):
        received.append(request)
        return httpx.Response(status["code"], json={"ok": True})

    monkeypatch.setenv("TELEMETRY_URL", "https://telemetry.example/events")
    monkeypatch.setattr(telemetry_client, "_client", httpx.AsyncClient(transport=httpx.MockTransport(handler)))
    return received, status


@pytest.mark.asyncio
async def test_report_is_posted(collector):
    from portal.tools.telemetry_client import aclose_client, report_redirect_failure

    received, _ = collector

    assert await report_redirect_failure("/admin/dashboard", page="/login", request_id="trace-1") is True

    request = received[0]
    assert str(request.url) == "https://telemetry.example/events"
    assert request.headers["x-request-id"] == "trace-1"
    assert json.loads(request.content) == {"event": "redirect_failed", "url": "/admin/dashboard", "page": "/login"}
    await aclose_client()


@pytest.mark.asyncio
async def test_rejected_report_returns_false(collector):
    from portal.tools.telemetry_client import aclose_client, report_redirect_failure

    _, status = collector
    status["code"] = 500

    assert await report_redirect_failure("/client/dashboard", reason="blocked") is False
    await aclose_client()


@pytest.mark.asyncio
async def test_unreachable_collector_returns_false(monkeypatch):
    from portal.tools import telemetry_client

    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    monkeypatch.setenv("TELEMETRY_URL", "https://telemetry.example/events")
    monkeypatch.setattr(telemetry_client, "_client", httpx.AsyncClient(transport=httpx.MockTransport(handler)))

    assert await telemetry_client.report_redirect_failure("/dashboard") is False
    await telemetry_client.aclose_client()


@pytest.mark.asyncio
async def test_no_collector_configured():
    from portal.tools.telemetry_client import report_redirect_failure

    assert await report_redirect_failure("/dashboard") is False
