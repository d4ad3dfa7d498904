"""
FastAPI Application Entry Point

Portal service: login, role resolution and dashboard redirects.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from portal.api import API_VERSION, api_router, script_router
from portal.constants.constants import TRACE_HEADER_NAME, normalize_trace_id
from portal.core.config import is_production, settings
from portal.core.logging import clear_trace_id, set_trace_id, setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging on startup, close HTTP clients on shutdown."""
    setup_logging()
    logger.info(f"Portal service starting up (env={settings.APP_ENV})...")

    yield

    logger.info("Portal service shutting down...")

    try:
        from portal.tools import telemetry_client
        await telemetry_client.aclose_client()
    except Exception as e:
        logger.error(f"Error closing telemetry_client: {e}")

    logger.info("Portal service shutdown complete")


app = FastAPI(
    title="Portal Service",
    description="Login, role resolution and dashboard redirects",
    version=API_VERSION,
    docs_url=None if is_production() else "/docs",
    redoc_url=None if is_production() else "/redoc",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def trace_id_middleware(request: Request, call_next):
    """Bind a trace id to the request (x-request-id or a new uuid4) and echo it back."""
    trace_id = normalize_trace_id(request.headers.get(TRACE_HEADER_NAME))
    request.state.trace_id = trace_id
    set_trace_id(trace_id)
    try:
        response = await call_next(request)
    finally:
        clear_trace_id()
    response.headers[TRACE_HEADER_NAME] = trace_id
    return response


app.include_router(api_router, prefix="/api")
app.include_router(script_router)


@app.get("/")
async def root():
    """Health check endpoint."""
    return {
        "service": "Portal Service",
        "status": "running",
        "version": API_VERSION
    }


@app.get("/health")
async def health():
    """Detailed health check."""
    return {
        "status": "healthy",
        "service": "portal",
        "components": {
            "api": "ok",
            "telemetry": "configured" if settings.TELEMETRY_URL else "disabled"
        }
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
