"""FastAPI application factory for the OAuth2 client registry."""

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException

from oauth2_registry import __version__
from oauth2_registry.config import Settings, get_settings
from oauth2_registry.core.logging import logger
from oauth2_registry.domain.exceptions import RegistryError
from oauth2_registry.exception_handlers import (
    general_exception_handler,
    http_exception_handler,
    registry_exception_handler,
    validation_exception_handler,
)
from oauth2_registry.lifespan import lifespan
from oauth2_registry.middleware import TRACE_ID_HEADER, TraceIDMiddleware
from oauth2_registry.openapi import configure_openapi
from oauth2_registry.routes import register_routes

# Every failure leaves the service as an RFC 7807 problem body.
EXCEPTION_HANDLERS = (
    (HTTPException, http_exception_handler),
    (RegistryError, registry_exception_handler),
    (RequestValidationError, validation_exception_handler),
    (Exception, general_exception_handler),
)


def docs_urls(settings: Settings) -> dict[str, str | None]:
    """Return the FastAPI docs arguments, all ``None`` when docs are disabled."""
    enabled = settings.enable_docs
    return {
        "docs_url": "/docs" if enabled else None,
        "redoc_url": "/redoc" if enabled else None,
        "openapi_url": "/openapi.json" if enabled else None,
    }


def create_app() -> FastAPI:
    """
    Build the registry application: routes, middleware and error handlers.

    Returns:
        Configured FastAPI application instance
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.project_name,
        description=settings.project_description,
        version=__version__,
        lifespan=lifespan,
        **docs_urls(settings),
    )

    for exception_class, handler in EXCEPTION_HANDLERS:
        app.add_exception_handler(exception_class, handler)

    # CORS is added last, so it is the outermost middleware
    app.add_middleware(TraceIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_allowed_origins(),
        allow_credentials=True,
        allow_methods=settings.get_cors_allowed_methods(),
        allow_headers=settings.get_cors_allowed_headers(),
        expose_headers=[TRACE_ID_HEADER],
    )

    register_routes(app)
    configure_openapi(app)

    logger.info(
        f"Registry application created (v{__version__}, "
        f"store={settings.infrastructure_provider}, "
        f"docs={'on' if settings.enable_docs else 'off'})"
    )
    logger.debug(f"CORS origins: {settings.get_allowed_origins()}")

    return app
