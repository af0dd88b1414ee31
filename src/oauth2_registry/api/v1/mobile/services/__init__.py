"""Mobile Application Business Logic Services."""

import secrets
from uuid import UUID, uuid4

from oauth2_registry.api.v1.oauth2.services import load_bindable_registrations
from oauth2_registry.core.logging import logger
from oauth2_registry.domain.exceptions import (
    AccessDeniedError,
    EntityNotFoundError,
    RegistryValidationError,
)
from oauth2_registry.domain.models import MobileApp, MobileAppInfo, now_millis
from oauth2_registry.domain.services import (
    Operation,
    Resource,
    SecurityUser,
    check_permission,
)
from oauth2_registry.infrastructure.repositories import (
    MobileAppRepository,
    OAuth2RegistrationRepository,
)

ENTITY_TYPE = "Mobile app"

APP_SECRET_MIN_LENGTH = 16


def generate_app_secret() -> str:
    """
    Generate a mobile application secret.

    Returns:
        str: URL-safe random string (512 bits of entropy)
    """
    return secrets.token_urlsafe(64)


class MobileAppService:
    """Service class for mobile applications and their OAuth2 client bindings."""

    def __init__(
        self,
        mobile_app_repository: MobileAppRepository,
        registration_repository: OAuth2RegistrationRepository,
        system_tenant_id: UUID | None = None,
    ) -> None:
        self.mobile_app_repository = mobile_app_repository
        self.registration_repository = registration_repository
        self.system_tenant_id = system_tenant_id

    async def _get_owned(
        self, mobile_app_id: UUID, user: SecurityUser, operation: Operation
    ) -> MobileApp:
        mobile_app = await self.mobile_app_repository.get(mobile_app_id)
        if mobile_app is None:
            raise EntityNotFoundError(ENTITY_TYPE, mobile_app_id)

        check_permission(user, Resource.MOBILE_APP, operation, mobile_app.tenant_id)
        return mobile_app

    async def save_mobile_app(
        self,
        mobile_app: MobileApp,
        registration_ids: list[UUID] | None,
        user: SecurityUser,
    ) -> MobileApp:
        """
        Create or update a mobile app and optionally replace its bindings.

        A new app without a secret gets a generated one, and an update
        without a secret keeps the stored one. A given secret must be at
        least 16 characters long.

        Raises:
            EntityNotFoundError: If the updated app does not exist
            AccessDeniedError: If the updated app belongs to another tenant
            RegistryValidationError: If package name, secret or bindings are invalid
        """
        pkg_name = (mobile_app.pkg_name or "").strip()
        if not pkg_name:
            raise RegistryValidationError("Package name must not be blank")

        if mobile_app.id is None:
            app_secret = mobile_app.app_secret or generate_app_secret()
            saved = mobile_app.model_copy(
                update={
                    "id": uuid4(),
                    "tenant_id": user.tenant_id,
                    "created_time": now_millis(),
                    "pkg_name": pkg_name,
                    "app_secret": app_secret,
                }
            )
        else:
            existing = await self.mobile_app_repository.get(mobile_app.id)
            if existing is None:
                raise EntityNotFoundError(ENTITY_TYPE, mobile_app.id)
            if existing.tenant_id != user.tenant_id:
                raise AccessDeniedError()
            app_secret = mobile_app.app_secret or existing.app_secret
            saved = mobile_app.model_copy(
                update={
                    "tenant_id": existing.tenant_id,
                    "created_time": existing.created_time,
                    "pkg_name": pkg_name,
                    "app_secret": app_secret,
                }
            )

        if len(saved.app_secret or "") < APP_SECRET_MIN_LENGTH:
            raise RegistryValidationError(
                f"App secret must be at least {APP_SECRET_MIN_LENGTH} characters long"
            )

        other = await self.mobile_app_repository.find_by_pkg_name(pkg_name)
        if other is not None and other.id != saved.id:
            raise RegistryValidationError(
                f"Mobile app with package name [{pkg_name}] already exists"
            )

        bound_ids = None
        if registration_ids is not None:
            bound_ids = await load_bindable_registrations(
                self.registration_repository,
                registration_ids,
                saved.tenant_id,
                self.system_tenant_id,
            )

        await self.mobile_app_repository.save(saved)
        if bound_ids is not None:
            await self.mobile_app_repository.save_registrations(saved.id, bound_ids)

        logger.info(f"Saved mobile app {saved.id} ({saved.pkg_name})")
        return saved

    async def update_mobile_app_registrations(
        self, mobile_app_id: UUID, registration_ids: list[UUID], user: SecurityUser
    ) -> None:
        """Replace the bindings of a mobile app, keeping the given order."""
        mobile_app = await self._get_owned(mobile_app_id, user, Operation.WRITE)
        bound_ids = await load_bindable_registrations(
            self.registration_repository,
            registration_ids,
            mobile_app.tenant_id,
            self.system_tenant_id,
        )
        await self.mobile_app_repository.save_registrations(mobile_app_id, bound_ids)

        logger.info(
            f"Bound {len(bound_ids)} OAuth2 clients to mobile app {mobile_app_id}"
        )

    async def _to_info(self, mobile_app: MobileApp) -> MobileAppInfo:
        bindings = await self.mobile_app_repository.find_all_by_mobile_app_id(
            mobile_app.id
        )
        registrations = await self.registration_repository.find_by_ids(
            [binding.registration_id for binding in bindings]
        )
        return MobileAppInfo(
            **mobile_app.model_dump(),
            oauth2_client_infos=[
                registration.to_info() for registration in registrations
            ],
        )

    async def get_mobile_app_info(
        self, mobile_app_id: UUID, user: SecurityUser
    ) -> MobileAppInfo:
        mobile_app = await self._get_owned(mobile_app_id, user, Operation.READ)
        return await self._to_info(mobile_app)

    async def find_mobile_app_infos(self, tenant_id: UUID) -> list[MobileAppInfo]:
        return [
            await self._to_info(mobile_app)
            for mobile_app in await self.mobile_app_repository.find_by_tenant_id(
                tenant_id
            )
        ]

    async def delete_mobile_app(self, mobile_app_id: UUID, user: SecurityUser) -> None:
        await self._get_owned(mobile_app_id, user, Operation.DELETE)
        await self.mobile_app_repository.delete(mobile_app_id)

        logger.info(f"Deleted mobile app {mobile_app_id}")
