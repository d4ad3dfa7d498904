"""
Telemetry HTTP Client

Forwards redirect failure reports to an external telemetry collector.

Reports are best-effort: when TELEMETRY_URL is unset they are only logged,
and delivery errors are logged rather than raised, since the browser that
sent the report has nothing useful to do with a failure.

Uses a module-level singleton AsyncClient; call aclose_client() at shutdown.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from portal.core.config import settings

logger = logging.getLogger(__name__)

EVENT_REDIRECT_FAILED = "redirect_failed"

# ============================================================================
# Module-level HTTP Client
# ============================================================================

_client: Optional[httpx.AsyncClient] = None


def get_client() -> httpx.AsyncClient:
    """Get or create the shared httpx.AsyncClient."""
    global _client

    if _client is None or _client.is_closed:
        _client = httpx.AsyncClient(
            timeout=settings.TELEMETRY_CLIENT_TIMEOUT,
            limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
            follow_redirects=False
        )
        logger.info("Initialized telemetry httpx.AsyncClient")

    return _client


async def aclose_client() -> None:
    """Close the shared client (FastAPI lifespan shutdown)."""
    global _client

    if _client is not None and not _client.is_closed:
        await _client.aclose()
        logger.info("Closed telemetry httpx.AsyncClient")
    _client = None


# ============================================================================
# Public API
# ============================================================================

def _build_headers(request_id: Optional[str]) -> Dict[str, str]:
    headers = {"Content-Type": "application/json", "Accept": "application/json"}
    if request_id:
        headers["x-request-id"] = request_id
    return headers


async def report_redirect_failure(
    url: str,
    page: Optional[str] = None,
    reason: Optional[str] = None,
    request_id: Optional[str] = None,
    extra: Optional[Dict[str, Any]] = None
) -> bool:
    """
    Send a redirect failure event to the telemetry collector.

    Args:
        url: Redirect target that could not be reached
        page: Page the browser was on when it reported
        reason: Free-form failure reason
        request_id: Trace id forwarded as x-request-id
        extra: Additional event fields

    Returns:
        True if the collector accepted the event, False otherwise
        (including when no collector is configured)
    """
    telemetry_url = settings.TELEMETRY_URL
    if not telemetry_url:
        logger.debug("TELEMETRY_URL not set - redirect failure only logged")
        return False

    payload: Dict[str, Any] = {"event": EVENT_REDIRECT_FAILED, "url": url}
    if page:
        payload["page"] = page
    if reason:
        payload["reason"] = reason
    if extra:
        payload.update(extra)

    try:
        response = await get_client().post(telemetry_url, json=payload, headers=_build_headers(request_id))
        response.raise_for_status()
        return True
    except httpx.HTTPStatusError as e:
        logger.error(f"Telemetry collector rejected event ({e.response.status_code})")
    except (httpx.ConnectError, httpx.TimeoutException, httpx.NetworkError) as e:
        logger.error(f"Telemetry collector unreachable: {type(e).__name__}: {e}")
    return False
