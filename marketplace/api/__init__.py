"""
API module - FastAPI routers and endpoint definitions.

Usage:
    from marketplace.api import api_router
    app.include_router(api_router, prefix="/api")
"""

from marketplace.api.routes import api_router, view_router

__all__ = ["api_router", "view_router"]
