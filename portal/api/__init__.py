"""
API Package - FastAPI Routers

- api_router: everything mounted under /api
- script_router: static-style assets served from the site root
"""

from portal.api.router import api_router
from portal.api.redirect import script_router

API_VERSION = "1.0.0"

__all__ = ["api_router", "script_router", "API_VERSION"]
