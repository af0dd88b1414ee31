"""Unit tests for MobileAppService."""

from uuid import UUID, uuid4

import pytest

from oauth2_registry.api.v1.mobile.services import (
    APP_SECRET_MIN_LENGTH,
    MobileAppService,
    generate_app_secret,
)
from oauth2_registry.config import SYS_TENANT_ID
from oauth2_registry.domain.exceptions import (
    AccessDeniedError,
    EntityNotFoundError,
    RegistryValidationError,
)
from oauth2_registry.domain.models import MobileApp, OAuth2Registration, PlatformType
from oauth2_registry.domain.services import Authority, SecurityUser
from oauth2_registry.infrastructure import InfrastructureFactory


@pytest.fixture
def service(temp_dir):
    factory = InfrastructureFactory(provider="local", base_dir=str(temp_dir))
    return MobileAppService(
        mobile_app_repository=factory.get_mobile_app_repository(),
        registration_repository=factory.get_registration_repository(),
        system_tenant_id=UUID(SYS_TENANT_ID),
    )


@pytest.fixture
def tenant_admin(tenant_id):
    return SecurityUser("admin@example.com", tenant_id, Authority.TENANT_ADMIN)


async def store_registration(service, tenant_id):
    return await service.registration_repository.save(
        OAuth2Registration(
            id=uuid4(),
            tenant_id=tenant_id,
            created_time=1,
            title="Apple",
            provider_name="Apple",
            client_id="client-id",
            client_secret="client-secret",
            authorization_uri="https://appleid.example.com/auth/authorize",
            access_token_uri="https://appleid.example.com/auth/token",
            scope=["email", "name"],
            login_button_label="Sign in with Apple",
        )
    )


def test_generate_app_secret():
    first, second = generate_app_secret(), generate_app_secret()

    assert len(first) >= APP_SECRET_MIN_LENGTH
    assert first != second


class TestSaveMobileApp:
    """Tests for MobileAppService.save_mobile_app"""

    @pytest.mark.asyncio
    async def test_create_generates_secret(self, service, tenant_admin):
        saved = await service.save_mobile_app(
            MobileApp(pkg_name=" com.example.app ", platform=PlatformType.ANDROID),
            None,
            tenant_admin,
        )

        assert saved.id is not None
        assert saved.pkg_name == "com.example.app"
        assert saved.tenant_id == tenant_admin.tenant_id
        assert len(saved.app_secret) >= APP_SECRET_MIN_LENGTH

    @pytest.mark.asyncio
    async def test_given_secret_is_kept(self, service, tenant_admin):
        secret = "s" * APP_SECRET_MIN_LENGTH

        saved = await service.save_mobile_app(
            MobileApp(pkg_name="com.example.app", app_secret=secret),
            None,
            tenant_admin,
        )

        assert saved.app_secret == secret

    @pytest.mark.asyncio
    async def test_short_secret(self, service, tenant_admin):
        with pytest.raises(RegistryValidationError):
            await service.save_mobile_app(
                MobileApp(pkg_name="com.example.app", app_secret="short"),
                None,
                tenant_admin,
            )

    @pytest.mark.asyncio
    async def test_blank_package_name(self, service, tenant_admin):
        with pytest.raises(RegistryValidationError):
            await service.save_mobile_app(MobileApp(pkg_name="  "), None, tenant_admin)

    @pytest.mark.asyncio
    async def test_duplicate_package_name(self, service, tenant_admin):
        await service.save_mobile_app(
            MobileApp(pkg_name="com.example.app"), None, tenant_admin
        )
        other_tenant = SecurityUser("other", uuid4(), Authority.TENANT_ADMIN)

        with pytest.raises(RegistryValidationError):
            await service.save_mobile_app(
                MobileApp(pkg_name="com.example.app"), None, other_tenant
            )

    @pytest.mark.asyncio
    async def test_update_keeps_package_ownership(self, service, tenant_admin):
        saved = await service.save_mobile_app(
            MobileApp(pkg_name="com.example.app"), None, tenant_admin
        )

        updated = await service.save_mobile_app(
            saved.model_copy(update={"platform": PlatformType.IOS}),
            None,
            tenant_admin,
        )

        assert updated.id == saved.id
        assert updated.platform is PlatformType.IOS
        assert updated.app_secret == saved.app_secret

    @pytest.mark.asyncio
    async def test_update_without_secret_keeps_stored_secret(
        self, service, tenant_admin
    ):
        saved = await service.save_mobile_app(
            MobileApp(pkg_name="com.example.app"), None, tenant_admin
        )

        updated = await service.save_mobile_app(
            MobileApp(
                id=saved.id, pkg_name="com.example.app", platform=PlatformType.IOS
            ),
            None,
            tenant_admin,
        )

        assert updated.app_secret == saved.app_secret
        stored = await service.mobile_app_repository.get(saved.id)
        assert stored.app_secret == saved.app_secret

    @pytest.mark.asyncio
    async def test_update_with_new_secret_replaces_it(self, service, tenant_admin):
        saved = await service.save_mobile_app(
            MobileApp(pkg_name="com.example.app"), None, tenant_admin
        )

        updated = await service.save_mobile_app(
            MobileApp(
                id=saved.id, pkg_name="com.example.app", app_secret="r" * 32
            ),
            None,
            tenant_admin,
        )

        assert updated.app_secret == "r" * 32

    @pytest.mark.asyncio
    async def test_update_missing(self, service, tenant_admin):
        with pytest.raises(EntityNotFoundError):
            await service.save_mobile_app(
                MobileApp(id=uuid4(), pkg_name="com.example.app"), None, tenant_admin
            )

    @pytest.mark.asyncio
    async def test_update_other_tenant(self, service, tenant_admin):
        saved = await service.save_mobile_app(
            MobileApp(pkg_name="com.example.app"), None, tenant_admin
        )
        intruder = SecurityUser("intruder", uuid4(), Authority.TENANT_ADMIN)

        with pytest.raises(AccessDeniedError):
            await service.save_mobile_app(saved, None, intruder)

    @pytest.mark.asyncio
    async def test_create_with_bindings(self, service, tenant_admin):
        registration = await store_registration(service, tenant_admin.tenant_id)

        saved = await service.save_mobile_app(
            MobileApp(pkg_name="com.example.app"), [registration.id], tenant_admin
        )

        info = await service.get_mobile_app_info(saved.id, tenant_admin)
        assert [i.id for i in info.oauth2_client_infos] == [registration.id]


class TestMobileAppOperations:
    """Tests for binding, reading and deleting mobile apps"""

    @pytest.mark.asyncio
    async def test_update_mobile_app_registrations(self, service, tenant_admin):
        registration = await store_registration(service, tenant_admin.tenant_id)
        saved = await service.save_mobile_app(
            MobileApp(pkg_name="com.example.app"), None, tenant_admin
        )

        await service.update_mobile_app_registrations(
            saved.id, [registration.id, registration.id], tenant_admin
        )

        bindings = await service.mobile_app_repository.find_all_by_mobile_app_id(
            saved.id
        )
        assert [b.registration_id for b in bindings] == [registration.id]

    @pytest.mark.asyncio
    async def test_update_registrations_unknown_id(self, service, tenant_admin):
        saved = await service.save_mobile_app(
            MobileApp(pkg_name="com.example.app"), None, tenant_admin
        )

        with pytest.raises(RegistryValidationError):
            await service.update_mobile_app_registrations(
                saved.id, [uuid4()], tenant_admin
            )

    @pytest.mark.asyncio
    async def test_find_mobile_app_infos(self, service, tenant_admin):
        saved = await service.save_mobile_app(
            MobileApp(pkg_name="com.example.app"), None, tenant_admin
        )

        infos = await service.find_mobile_app_infos(tenant_admin.tenant_id)

        assert [info.pkg_name for info in infos] == [saved.pkg_name]

    @pytest.mark.asyncio
    async def test_delete_mobile_app(self, service, tenant_admin):
        saved = await service.save_mobile_app(
            MobileApp(pkg_name="com.example.app"), None, tenant_admin
        )

        await service.delete_mobile_app(saved.id, tenant_admin)

        assert await service.mobile_app_repository.get(saved.id) is None

    @pytest.mark.asyncio
    async def test_customer_user_cannot_read(self, service, tenant_admin):
        saved = await service.save_mobile_app(
            MobileApp(pkg_name="com.example.app"), None, tenant_admin
        )
        customer = SecurityUser("user", tenant_admin.tenant_id, Authority.CUSTOMER_USER)

        with pytest.raises(AccessDeniedError):
            await service.get_mobile_app_info(saved.id, customer)
