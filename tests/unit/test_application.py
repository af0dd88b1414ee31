"""Tests for the application factory."""

from oauth2_registry.application import EXCEPTION_HANDLERS, create_app, docs_urls
from oauth2_registry.config import Settings
from oauth2_registry.domain.exceptions import RegistryError


def test_docs_urls_disabled():
    assert docs_urls(Settings(enable_docs=False)) == {
        "docs_url": None,
        "redoc_url": None,
        "openapi_url": None,
    }


def test_docs_urls_enabled():
    urls = docs_urls(Settings(enable_docs=True))

    assert urls["docs_url"] == "/docs"
    assert urls["openapi_url"] == "/openapi.json"


def test_create_app_registers_exception_handlers():
    app = create_app()

    for exception_class, handler in EXCEPTION_HANDLERS:
        assert app.exception_handlers[exception_class] is handler
    assert RegistryError in app.exception_handlers


def test_cors_preflight_allows_configured_origin():
    from fastapi.testclient import TestClient

    origin = Settings().get_allowed_origins()[0]
    response = TestClient(create_app()).options(
        "/domain/infos",
        headers={
            "Origin": origin,
            "Access-Control-Request-Method": "GET",
        },
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == origin
