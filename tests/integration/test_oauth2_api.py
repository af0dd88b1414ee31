"""Integration tests for OAuth2 client discovery and management endpoints."""

from uuid import UUID, uuid4

import pytest
from fastapi import status

from oauth2_registry.config import get_settings


@pytest.fixture
def create_client(client, sys_admin_headers, registration_payload):
    """Create a registration as system administrator and return its body."""

    def _create(**overrides) -> dict:
        response = client.post(
            "/oauth2/client",
            json={**registration_payload, **overrides},
            headers=sys_admin_headers,
        )
        assert response.status_code == status.HTTP_200_OK
        return response.json()

    return _create


@pytest.fixture
def bound_domain(client, sys_admin_headers, create_client):
    """x.com offering Google (all platforms) then GitHub (Android only)."""
    google = create_client()
    github = create_client(
        title="GitHub",
        provider_name="GitHub",
        platforms=["ANDROID"],
        login_button_label="Login with GitHub",
        login_button_icon=None,
    )
    response = client.post(
        "/domain",
        params={"oauth2ClientIds": f"{google['id']},{github['id']}"},
        json={"name": "x.com"},
        headers=sys_admin_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    return google, github


class TestClientDiscovery:
    """Tests for POST /oauth2-clients"""

    def test_domain_clients(self, client, bound_domain):
        google, github = bound_domain

        response = client.post(
            "/oauth2-clients", headers={"host": "x.com", "x-forwarded-proto": "https"}
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == [
            {
                "name": "Login with Google",
                "icon": "google-logo",
                "provider": "Google",
                "url": f"/oauth2/authorization/{google['id']}",
            },
            {
                "name": "Login with GitHub",
                "icon": None,
                "provider": "GitHub",
                "url": f"/oauth2/authorization/{github['id']}",
            },
        ]

    def test_platform_filter(self, client, bound_domain):
        response = client.post(
            "/oauth2-clients", params={"platform": "WEB"}, headers={"host": "x.com"}
        )

        assert [c["provider"] for c in response.json()] == ["Google"]

    def test_unknown_platform_is_ignored(self, client, bound_domain):
        response = client.post(
            "/oauth2-clients", params={"platform": "BOGUS"}, headers={"host": "x.com"}
        )

        assert [c["provider"] for c in response.json()] == ["Google", "GitHub"]

    def test_forwarded_host(self, client, bound_domain):
        response = client.post(
            "/oauth2-clients",
            headers={
                "host": "internal-lb:8080",
                "x-forwarded-host": "x.com",
                "x-forwarded-proto": "https",
                "x-forwarded-port": "443",
            },
        )

        assert len(response.json()) == 2

    def test_non_default_port_is_a_different_domain(self, client, bound_domain):
        response = client.post("/oauth2-clients", headers={"host": "x.com:8080"})

        assert response.json() == []

    def test_unknown_domain(self, client, bound_domain):
        response = client.post("/oauth2-clients", headers={"host": "y.com"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == []

    def test_mobile_package(self, client, sys_admin_headers, bound_domain):
        google, _ = bound_domain
        client.post(
            "/mobile/app",
            params={"oauth2ClientIds": google["id"]},
            json={"pkg_name": "com.example.app"},
            headers=sys_admin_headers,
        )

        response = client.post(
            "/oauth2-clients",
            params={"pkgName": "com.example.app", "platform": "ANDROID"},
            headers={"host": "x.com"},
        )

        assert [c["provider"] for c in response.json()] == ["Google"]

    def test_unknown_package_does_not_fall_back(self, client, bound_domain):
        response = client.post(
            "/oauth2-clients",
            params={"pkgName": "com.unknown"},
            headers={"host": "x.com"},
        )

        assert response.json() == []

    def test_legacy_path(self, client, bound_domain):
        response = client.post("/noauth/oauth2Clients", headers={"host": "x.com"})

        assert len(response.json()) == 2

    def test_no_authentication_needed(self, client):
        response = client.post("/oauth2-clients")

        assert response.status_code == status.HTTP_200_OK


class TestClientManagement:
    """Tests for /oauth2/client endpoints"""

    def test_create_assigns_system_tenant(self, create_client):
        created = create_client()

        assert UUID(created["id"])
        assert created["tenant_id"] == get_settings().system_tenant_id
        assert created["created_time"] > 0

    def test_update(self, client, sys_admin_headers, create_client):
        created = create_client()

        response = client.post(
            "/oauth2/client",
            json={**created, "title": "Google Workspace"},
            headers=sys_admin_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["id"] == created["id"]
        assert response.json()["title"] == "Google Workspace"

    def test_update_unknown(self, client, sys_admin_headers, registration_payload):
        response = client.post(
            "/oauth2/client",
            json={**registration_payload, "id": str(uuid4())},
            headers=sys_admin_headers,
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_requires_authentication(self, client, registration_payload):
        response = client.post("/oauth2/client", json=registration_payload)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.headers["www-authenticate"] == "Bearer"
        assert response.json()["title"] == "Unauthorized"

    def test_invalid_token(self, client, registration_payload):
        response = client.post(
            "/oauth2/client",
            json=registration_payload,
            headers={"Authorization": "Bearer forged"},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_tenant_admin_cannot_write(
        self, client, tenant_admin_headers, registration_payload
    ):
        response = client.post(
            "/oauth2/client", json=registration_payload, headers=tenant_admin_headers
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["title"] == "Forbidden"

    def test_invalid_registration(
        self, client, sys_admin_headers, registration_payload
    ):
        response = client.post(
            "/oauth2/client",
            json={**registration_payload, "scope": []},
            headers=sys_admin_headers,
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "scope" in response.json()["detail"]

    def test_missing_field(self, client, sys_admin_headers, registration_payload):
        payload = dict(registration_payload)
        del payload["client_id"]

        response = client.post("/oauth2/client", json=payload, headers=sys_admin_headers)

        assert response.status_code == 422
        assert response.json()["errors"]

    def test_infos_and_get(self, client, sys_admin_headers, create_client):
        created = create_client()

        infos = client.get("/oauth2/client/infos", headers=sys_admin_headers).json()
        fetched = client.get(
            f"/oauth2/client/{created['id']}", headers=sys_admin_headers
        ).json()

        assert [info["id"] for info in infos] == [created["id"]]
        assert "client_secret" not in infos[0]
        assert fetched["client_secret"] == "google-client-secret"

    def test_tenant_admin_cannot_list_clients(
        self, client, tenant_admin_headers, create_client
    ):
        create_client()

        response = client.get("/oauth2/client/infos", headers=tenant_admin_headers)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_tenant_admin_cannot_read_system_client(
        self, client, tenant_admin_headers, create_client
    ):
        created = create_client()

        response = client.get(
            f"/oauth2/client/{created['id']}", headers=tenant_admin_headers
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_get_unknown(self, client, sys_admin_headers):
        response = client.get(f"/oauth2/client/{uuid4()}", headers=sys_admin_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["title"] == "Not Found"

    def test_delete_unbinds_from_domains(self, client, sys_admin_headers, bound_domain):
        google, github = bound_domain

        response = client.delete(
            f"/oauth2/client/{google['id']}", headers=sys_admin_headers
        )
        assert response.status_code == status.HTTP_200_OK

        remaining = client.post("/oauth2-clients", headers={"host": "x.com"}).json()
        assert [c["provider"] for c in remaining] == ["GitHub"]
        assert (
            client.get(
                f"/oauth2/client/{google['id']}", headers=sys_admin_headers
            ).status_code
            == status.HTTP_404_NOT_FOUND
        )

    def test_login_processing_url(self, client, sys_admin_headers):
        response = client.get("/oauth2/loginProcessingUrl", headers=sys_admin_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == "/login/oauth2/code/"

    def test_login_processing_url_requires_sys_admin(
        self, client, tenant_admin_headers
    ):
        response = client.get("/oauth2/loginProcessingUrl", headers=tenant_admin_headers)

        assert response.status_code == status.HTTP_403_FORBIDDEN
