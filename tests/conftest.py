"""Global pytest configuration and fixtures for all tests."""

import os
import shutil
import tempfile
from pathlib import Path
from uuid import UUID, uuid4

import pytest

TEST_BASE_DIR = tempfile.mkdtemp(prefix="oauth2-registry-tests-")

TEST_ENV_VARS = {
    # Server configuration
    "SECRET_KEY": "test-secret-key-minimum-32-characters-long-for-testing",
    "ENABLE_DOCS": "false",  # Keep docs disabled in tests
    "ENVIRONMENT": "test",
    "OTEL_ENABLED": "false",
    # Infrastructure (use local for tests)
    "INFRASTRUCTURE_PROVIDER": "local",
    "INFRASTRUCTURE_BASE_DIR": TEST_BASE_DIR,
}

# Settings are read once when oauth2_registry.config is first imported,
# which happens while test modules are collected.
ORIGINAL_ENV = {key: os.environ.get(key) for key in TEST_ENV_VARS}
os.environ.update(TEST_ENV_VARS)


@pytest.fixture(scope="session", autouse=True)
def set_test_env_vars():
    """
    Set environment variables for testing.

    Keeps the test configuration in place for the whole session and removes
    the shared storage directory afterwards.
    """
    os.environ.update(TEST_ENV_VARS)

    yield

    for key, original_value in ORIGINAL_ENV.items():
        if original_value is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = original_value
    shutil.rmtree(TEST_BASE_DIR, ignore_errors=True)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for repository files."""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def tenant_id() -> UUID:
    return uuid4()


@pytest.fixture
def app(temp_dir):
    """Application wired to a fresh local registry store."""
    from oauth2_registry.application import create_app
    from oauth2_registry.di import get_infrastructure_factory
    from oauth2_registry.infrastructure import InfrastructureFactory

    application = create_app()
    application.dependency_overrides[get_infrastructure_factory] = (
        lambda: InfrastructureFactory(provider="local", base_dir=str(temp_dir))
    )
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app):
    """Create test client (lifespan is not run)."""
    from fastapi.testclient import TestClient

    return TestClient(app)


def auth_headers(user_id: str, tenant: UUID, authority: str) -> dict[str, str]:
    """Build an Authorization header for a signed access token."""
    from oauth2_registry.domain.services import Authority, SecurityUser
    from oauth2_registry.utils.security import issue_access_token

    token = issue_access_token(SecurityUser(user_id, tenant, Authority(authority)))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def sys_admin_headers() -> dict[str, str]:
    return auth_headers("sysadmin@example.com", uuid4(), "SYS_ADMIN")


@pytest.fixture
def tenant_admin_headers(tenant_id) -> dict[str, str]:
    return auth_headers("tenant@example.com", tenant_id, "TENANT_ADMIN")


@pytest.fixture
def registration_payload() -> dict:
    """Minimal valid OAuth2 client registration body."""
    return {
        "title": "Google",
        "provider_name": "Google",
        "platforms": [],
        "client_id": "google-client-id",
        "client_secret": "google-client-secret",
        "authorization_uri": "https://accounts.google.com/o/oauth2/v2/auth",
        "access_token_uri": "https://oauth2.googleapis.com/token",
        "scope": ["openid", "email", "profile"],
        "user_info_uri": "https://openidconnect.googleapis.com/v1/userinfo",
        "login_button_label": "Login with Google",
        "login_button_icon": "google-logo",
    }


@pytest.fixture
def other_tenant_admin_headers() -> dict[str, str]:
    return auth_headers("intruder@example.com", uuid4(), "TENANT_ADMIN")
