"""
Redirect API Endpoints

Endpoints:
- POST /redirect/resolve - User record -> role and dashboard path
- POST /redirect/sniff - Page snapshot -> page-load redirect decision
- POST /redirect/failures - Browser report of a failed navigation
- GET /redirect/dashboard - 303 to the bearer's dashboard
- GET /role-redirect.js - Standalone sniffer script (script_router, no /api prefix)
"""

import logging

from fastapi import APIRouter, Request, status
from fastapi.responses import RedirectResponse, Response

from portal.api.common import get_auth_header, get_trace_id, standard_response
from portal.core.errors import AppError, to_http_exception
from portal.core.security import require_auth, role_from_claims
from portal.redirect.dashboards import dashboard_path_for, get_dashboard_path
from portal.redirect.executor import RecordingNavigator
from portal.redirect.normalizer import normalize_role, resolve_role_id
from portal.redirect.script import render_role_redirect_script
from portal.schemas.base import ApiResponse
from portal.schemas.redirect import PageSnapshot, RedirectFailureReport, ResolveRequest
from portal.session.bootstrap import bootstrap_page
from portal.session.storage import MemoryStorage, PageContext
from portal.tools import telemetry_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/redirect", tags=["redirect"])
script_router = APIRouter(tags=["redirect"])

NO_STORE_HEADERS = {"Cache-Control": "private, no-store"}


@router.post("/resolve", response_model=ApiResponse)
async def resolve(body: ResolveRequest, request: Request):
    """
    Resolve a user record to its role and dashboard.

    Unrecognized roles are not an error: they resolve to "unknown" and the
    generic /dashboard.
    """
    role = normalize_role(body.user)
    path = get_dashboard_path(body.user)

    return standard_response(
        message=f"Dashboard for role {role.role_name}: {path}",
        data={
            "role": role.role_name,
            "roleId": int(role) if role.is_known else None,
            "rawRoleId": resolve_role_id(body.user),
            "dashboardPath": path,
        },
        proofs={"role": role.role_name},
        trace_id=get_trace_id(request)
    )


@router.post("/sniff", response_model=ApiResponse)
async def sniff(body: PageSnapshot, request: Request):
    """
    Run the page-load redirect checks against a snapshot of a browser page.

    Returns the decision, the navigations issued and the storage as it is
    after the run (resume counters and consumed markers included).
    """
    page = PageContext(
        url=body.url,
        local_storage=MemoryStorage(body.local_storage),
        session_storage=MemoryStorage(body.session_storage),
    )
    navigator = RecordingNavigator()
    decision = bootstrap_page(page, navigator)

    return standard_response(
        message=f"Navigate to {decision.target}" if decision.navigates else "No redirect",
        data={
            "target": decision.target,
            "navigates": decision.navigates,
            "navigations": [call.url for call in navigator.calls],
            "localStorage": page.local_storage.snapshot(),
            "sessionStorage": page.session_storage.snapshot(),
        },
        proofs={"reason": decision.reason},
        trace_id=get_trace_id(request)
    )


@router.post("/failures", response_model=ApiResponse, status_code=status.HTTP_202_ACCEPTED)
async def report_failure(body: RedirectFailureReport, request: Request):
    """
    Record a navigation that failed in the browser.

    Replaces the write-only fallbackRedirect marker with something that is
    actually observed: a server log line and, when configured, a telemetry
    event.
    """
    trace_id = get_trace_id(request)
    logger.warning(f"Browser reported failed redirect to {body.url} (page={body.page}, reason={body.reason})")

    forwarded = await telemetry_client.report_redirect_failure(
        body.url,
        page=body.page,
        reason=body.reason,
        request_id=trace_id
    )

    return standard_response(
        message="Redirect failure recorded",
        data={"forwarded": forwarded},
        trace_id=trace_id
    )


@router.get("/dashboard")
async def redirect_to_dashboard(request: Request):
    """303 to the dashboard of the authenticated caller."""
    try:
        claims = require_auth(get_auth_header(request))
    except AppError as e:
        raise to_http_exception(e)

    path = dashboard_path_for(role_from_claims(claims))
    return RedirectResponse(url=path, status_code=status.HTTP_303_SEE_OTHER, headers=NO_STORE_HEADERS)


@script_router.get("/role-redirect.js", include_in_schema=False)
async def role_redirect_script():
    return Response(
        content=render_role_redirect_script(),
        media_type="application/javascript",
        headers={"Cache-Control": "public, max-age=300"}
    )
