"""
Central API Router

Aggregates the endpoint routers mounted under /api.
"""

import logging
from fastapi import APIRouter

from portal.api.auth import router as auth_router
from portal.api.redirect import router as redirect_router

logger = logging.getLogger(__name__)

api_router = APIRouter()

# (router, tags) - prefixes live on the routers themselves
ROUTERS = [
    (auth_router, ["Auth"]),
    (redirect_router, ["Redirect"]),
]

for router, tags in ROUTERS:
    api_router.include_router(router, tags=tags)

logger.info(f"API router initialized with {len(api_router.routes)} routes")
