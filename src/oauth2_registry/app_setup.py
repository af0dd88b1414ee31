"""Setup shared by the uvicorn (``main``) and Lambda (``lambda_main``) entry points."""

from fastapi import FastAPI

from oauth2_registry import __version__
from oauth2_registry.application import create_app
from oauth2_registry.config import Settings, get_settings
from oauth2_registry.core.logging import intercept_standard_logging

CLIENT_DISCOVERY_PATH = "/oauth2-clients"


def add_root_endpoint(app: FastAPI) -> None:
    """Serve ``GET /`` describing the service and where to start."""
    settings = get_settings()
    info = {
        "message": settings.project_name,
        "version": __version__,
        "docs": "/docs" if settings.enable_docs else None,
        "discovery": CLIENT_DISCOVERY_PATH,
    }

    @app.get("/", include_in_schema=False)
    async def root() -> dict[str, str | None]:
        return info


def build_app(settings: Settings) -> FastAPI:
    """Create the served application, traced when ``otel_enabled`` is set."""
    if settings.otel_enabled:
        from oauth2_registry.core.telemetry import (
            configure_opentelemetry,
            instrument_fastapi,
            instrument_logging,
        )

        configure_opentelemetry(settings)
        # Must run before loguru takes over the standard loggers
        instrument_logging()

    intercept_standard_logging()
    application = create_app()
    if settings.otel_enabled:
        instrument_fastapi(application)
    add_root_endpoint(application)
    return application
