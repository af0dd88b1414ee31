"""Unit tests for the local file-based repositories."""

from uuid import uuid4

import pytest

from oauth2_registry.domain.models import Domain, MobileApp, OAuth2Registration
from oauth2_registry.infrastructure.implementations.local import (
    LocalDomainRepository,
    LocalMobileAppRepository,
    LocalRegistrationRepository,
)


def make_registration(tenant_id, created_time=1, title="Google"):
    return OAuth2Registration(
        id=uuid4(),
        tenant_id=tenant_id,
        created_time=created_time,
        title=title,
        provider_name=title,
        client_id="client-id",
        client_secret="client-secret",
        authorization_uri="https://accounts.example.com/authorize",
        access_token_uri="https://accounts.example.com/token",
        scope=["openid", "email"],
        login_button_label=f"Login with {title}",
    )


@pytest.fixture
def registration_repository(temp_dir):
    return LocalRegistrationRepository(base_dir=str(temp_dir))


@pytest.fixture
def domain_repository(temp_dir):
    return LocalDomainRepository(base_dir=str(temp_dir))


@pytest.fixture
def mobile_app_repository(temp_dir):
    return LocalMobileAppRepository(base_dir=str(temp_dir))


class TestLocalRegistrationRepository:
    """Tests for LocalRegistrationRepository"""

    @pytest.mark.asyncio
    async def test_save_and_get(self, registration_repository, tenant_id, temp_dir):
        registration = make_registration(tenant_id)

        await registration_repository.save(registration)
        stored = await registration_repository.get(registration.id)

        assert stored == registration
        assert (
            temp_dir / "oauth2" / "registrations" / f"{registration.id}.json"
        ).exists()

    @pytest.mark.asyncio
    async def test_get_missing(self, registration_repository):
        assert await registration_repository.get(uuid4()) is None

    @pytest.mark.asyncio
    async def test_save_without_id(self, registration_repository, tenant_id):
        registration = make_registration(tenant_id).model_copy(update={"id": None})

        with pytest.raises(ValueError):
            await registration_repository.save(registration)

    @pytest.mark.asyncio
    async def test_delete(self, registration_repository, tenant_id):
        registration = await registration_repository.save(make_registration(tenant_id))

        assert await registration_repository.delete(registration.id) is True
        assert await registration_repository.delete(registration.id) is False
        assert await registration_repository.get(registration.id) is None

    @pytest.mark.asyncio
    async def test_find_by_tenant_id_ordered_by_creation(
        self, registration_repository, tenant_id
    ):
        newer = await registration_repository.save(
            make_registration(tenant_id, created_time=20, title="GitHub")
        )
        older = await registration_repository.save(
            make_registration(tenant_id, created_time=10, title="Google")
        )
        await registration_repository.save(make_registration(uuid4()))

        result = await registration_repository.find_by_tenant_id(tenant_id)

        assert result == [older, newer]

    @pytest.mark.asyncio
    async def test_find_by_ids_keeps_order_and_skips_unknown(
        self, registration_repository, tenant_id
    ):
        first = await registration_repository.save(make_registration(tenant_id))
        second = await registration_repository.save(make_registration(tenant_id))

        result = await registration_repository.find_by_ids(
            [second.id, uuid4(), first.id]
        )

        assert result == [second, first]

    @pytest.mark.asyncio
    async def test_delete_by_tenant_id(self, registration_repository, tenant_id):
        owned = await registration_repository.save(make_registration(tenant_id))
        other = await registration_repository.save(make_registration(uuid4()))

        deleted = await registration_repository.delete_by_tenant_id(tenant_id)

        assert deleted == [owned.id]
        assert await registration_repository.find_all() == [other]


class TestLocalDomainRepository:
    """Tests for LocalDomainRepository"""

    @pytest.mark.asyncio
    async def test_save_get_and_find_by_name(self, domain_repository, tenant_id):
        domain = Domain(id=uuid4(), tenant_id=tenant_id, created_time=1, name="x.com")

        await domain_repository.save(domain)

        assert await domain_repository.get(domain.id) == domain
        assert await domain_repository.find_by_name("X.COM") == [domain]
        assert await domain_repository.find_by_name("y.com") == []

    @pytest.mark.asyncio
    async def test_bindings_keep_position(self, domain_repository, tenant_id):
        domain = await domain_repository.save(
            Domain(id=uuid4(), tenant_id=tenant_id, created_time=1, name="x.com")
        )
        first, second = uuid4(), uuid4()

        stored = await domain_repository.save_registrations(domain.id, [second, first])

        assert [b.registration_id for b in stored] == [second, first]
        assert [b.position for b in stored] == [0, 1]
        assert await domain_repository.find_registrations_by_domain_id(domain.id) == stored
        assert await domain_repository.find_all_registrations() == stored

    @pytest.mark.asyncio
    async def test_save_registrations_replaces(self, domain_repository, tenant_id):
        domain_id = uuid4()
        await domain_repository.save_registrations(domain_id, [uuid4(), uuid4()])

        stored = await domain_repository.save_registrations(domain_id, [])

        assert stored == []

    @pytest.mark.asyncio
    async def test_delete_removes_bindings(self, domain_repository, tenant_id):
        domain = await domain_repository.save(
            Domain(id=uuid4(), tenant_id=tenant_id, created_time=1, name="x.com")
        )
        await domain_repository.save_registrations(domain.id, [uuid4()])

        assert await domain_repository.delete(domain.id) is True
        assert await domain_repository.find_registrations_by_domain_id(domain.id) == []
        assert await domain_repository.delete(domain.id) is False

    @pytest.mark.asyncio
    async def test_delete_registrations_by_registration_id(self, domain_repository):
        registration_id, kept = uuid4(), uuid4()
        first_domain, second_domain = uuid4(), uuid4()
        await domain_repository.save_registrations(first_domain, [registration_id, kept])
        await domain_repository.save_registrations(second_domain, [registration_id])

        removed = await domain_repository.delete_registrations_by_registration_id(
            registration_id
        )

        assert removed == 2
        remaining = await domain_repository.find_registrations_by_domain_id(
            first_domain
        )
        assert [(b.registration_id, b.position) for b in remaining] == [(kept, 0)]

    @pytest.mark.asyncio
    async def test_tenant_operations(self, domain_repository, tenant_id):
        enabled = await domain_repository.save(
            Domain(id=uuid4(), tenant_id=tenant_id, created_time=1, name="a.com")
        )
        await domain_repository.save(
            Domain(
                id=uuid4(),
                tenant_id=tenant_id,
                created_time=2,
                name="b.com",
                oauth2_enabled=False,
            )
        )
        other = await domain_repository.save(
            Domain(id=uuid4(), tenant_id=uuid4(), created_time=3, name="c.com")
        )

        assert (
            await domain_repository.count_by_tenant_id_and_oauth2_enabled(tenant_id, True)
            == 1
        )
        assert [d.id for d in await domain_repository.find_by_tenant_id(tenant_id)][
            0
        ] == enabled.id
        assert await domain_repository.delete_by_tenant_id(tenant_id) == 2
        assert await domain_repository.find_all() == [other]


class TestLocalMobileAppRepository:
    """Tests for LocalMobileAppRepository"""

    @pytest.mark.asyncio
    async def test_find_by_pkg_name_is_exact(self, mobile_app_repository, tenant_id):
        app = await mobile_app_repository.save(
            MobileApp(
                id=uuid4(),
                tenant_id=tenant_id,
                created_time=1,
                pkg_name="com.example.app",
                app_secret="s" * 16,
            )
        )

        assert await mobile_app_repository.find_by_pkg_name("com.example.app") == app
        assert await mobile_app_repository.find_by_pkg_name("COM.EXAMPLE.APP") is None

    @pytest.mark.asyncio
    async def test_bindings_and_cascade(self, mobile_app_repository, tenant_id):
        app = await mobile_app_repository.save(
            MobileApp(
                id=uuid4(), tenant_id=tenant_id, created_time=1, pkg_name="com.a"
            )
        )
        registration_id = uuid4()
        await mobile_app_repository.save_registrations(app.id, [registration_id])

        bindings = await mobile_app_repository.find_all_by_mobile_app_id(app.id)
        assert [b.registration_id for b in bindings] == [registration_id]

        removed = await mobile_app_repository.delete_registrations_by_registration_id(
            registration_id
        )
        assert removed == 1
        assert await mobile_app_repository.find_all_by_mobile_app_id(app.id) == []

    @pytest.mark.asyncio
    async def test_delete_by_tenant_id(self, mobile_app_repository, tenant_id):
        app = await mobile_app_repository.save(
            MobileApp(id=uuid4(), tenant_id=tenant_id, created_time=1, pkg_name="com.a")
        )
        await mobile_app_repository.save_registrations(app.id, [uuid4()])

        assert await mobile_app_repository.delete_by_tenant_id(tenant_id) == 1
        assert await mobile_app_repository.find_all() == []
        assert await mobile_app_repository.find_all_registrations() == []
