"""
Routes registration for the FastAPI application.

Centralizes all router registrations for clean application setup.
"""

from fastapi import FastAPI

from oauth2_registry.api.v1.domain.router import router as domain_router
from oauth2_registry.api.v1.health.router import router as health_router
from oauth2_registry.api.v1.mobile.router import router as mobile_router
from oauth2_registry.api.v1.oauth2.router import router as oauth2_router


def register_routes(app: FastAPI) -> None:
    """
    Register all application routers.

    Args:
        app: FastAPI application instance
    """
    # Health check endpoints (no prefix, public)
    app.include_router(health_router)

    # OAuth2 client discovery (public) and registration management
    app.include_router(oauth2_router)

    # Domain management
    app.include_router(domain_router)

    # Mobile application management
    app.include_router(mobile_router)
