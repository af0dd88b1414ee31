"""
Uvicorn entry point: ``oauth2-registry`` or ``uvicorn oauth2_registry.main:app``.
"""

from oauth2_registry.app_setup import build_app
from oauth2_registry.config import get_settings

settings = get_settings()

app = build_app(settings)


def run() -> None:
    """Serve ``app`` with uvicorn, reloading on changes in debug mode."""
    import uvicorn

    uvicorn.run(
        "oauth2_registry.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="info" if settings.debug else "warning",
    )


if __name__ == "__main__":
    run()
