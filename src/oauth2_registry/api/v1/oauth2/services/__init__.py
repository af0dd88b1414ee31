"""OAuth2 Client Business Logic Services."""

from urllib.parse import urlparse
from uuid import UUID, uuid4

from oauth2_registry.config import Settings
from oauth2_registry.core.logging import logger
from oauth2_registry.domain.exceptions import (
    AccessDeniedError,
    EntityNotFoundError,
    RegistryValidationError,
)
from oauth2_registry.domain.models import (
    MapperType,
    OAuth2ClientInfo,
    OAuth2Registration,
    OAuth2RegistrationInfo,
    PlatformType,
    now_millis,
)
from oauth2_registry.domain.services import (
    OAuth2ClientResolver,
    Operation,
    RegistrationSnapshot,
    Resource,
    SecurityUser,
    check_permission,
)
from oauth2_registry.infrastructure.repositories import (
    DomainRepository,
    MobileAppRepository,
    OAuth2RegistrationRepository,
)

ENTITY_TYPE = "OAuth2 client"

_REQUIRED_TEXT_FIELDS = (
    "title",
    "provider_name",
    "client_id",
    "client_secret",
    "authorization_uri",
    "access_token_uri",
    "login_button_label",
)
_URI_FIELDS = ("authorization_uri", "access_token_uri", "user_info_uri", "jwk_set_uri")


def _is_http_uri(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def validate_registration(registration: OAuth2Registration) -> None:
    """
    Check the registration rules not expressed by the model types.

    Raises:
        RegistryValidationError: On the first violated rule
    """
    for field_name in _REQUIRED_TEXT_FIELDS:
        if not (getattr(registration, field_name) or "").strip():
            raise RegistryValidationError(f"{field_name} must not be blank")

    for field_name in _URI_FIELDS:
        value = getattr(registration, field_name)
        if value is not None and not _is_http_uri(value):
            raise RegistryValidationError(f"{field_name} must be an http(s) URI")

    if not registration.scope:
        raise RegistryValidationError("scope must contain at least one value")

    if len(set(registration.platforms)) != len(registration.platforms):
        raise RegistryValidationError("platforms must not contain duplicates")

    mapper = registration.mapper
    if mapper is not None and mapper.type is MapperType.CUSTOM and not mapper.url:
        raise RegistryValidationError("Custom mapper requires url")


class OAuth2ClientService:
    """Service class for OAuth2 client registrations and their discovery."""

    def __init__(
        self,
        settings: Settings,
        registration_repository: OAuth2RegistrationRepository,
        domain_repository: DomainRepository,
        mobile_app_repository: MobileAppRepository,
    ) -> None:
        """
        Initialize OAuth2 client service.

        Args:
            settings: Application settings
            registration_repository: Registration storage
            domain_repository: Domain and domain binding storage
            mobile_app_repository: Mobile app and mobile binding storage
        """
        self.settings = settings
        self.registration_repository = registration_repository
        self.domain_repository = domain_repository
        self.mobile_app_repository = mobile_app_repository

    async def load_snapshot(self) -> RegistrationSnapshot:
        """
        Read the whole registry into an immutable snapshot.

        Returns:
            Snapshot for one resolution pass
        """
        registrations = await self.registration_repository.find_all()
        return RegistrationSnapshot.build(
            registrations=[registration.to_info() for registration in registrations],
            domains=await self.domain_repository.find_all(),
            domain_registrations=await self.domain_repository.find_all_registrations(),
            mobile_apps=await self.mobile_app_repository.find_all(),
            mobile_app_registrations=(
                await self.mobile_app_repository.find_all_registrations()
            ),
        )

    def to_client_info(self, info: OAuth2RegistrationInfo) -> OAuth2ClientInfo:
        """Map a registration info to the login option shown to callers."""
        return OAuth2ClientInfo(
            name=info.login_button_label,
            icon=info.login_button_icon,
            provider=info.provider_name,
            url=self.settings.get_authorization_url(str(info.id)),
        )

    async def get_oauth2_clients(
        self,
        pkg_name: str | None,
        platform: str | None,
        domain_and_port: str,
        scheme: str | None = None,
    ) -> list[OAuth2ClientInfo]:
        """
        List the login options for an unauthenticated caller.

        Args:
            pkg_name: Mobile application package name, wins over the domain
            platform: Platform hint, ignored when not a known platform
            domain_and_port: Request domain key (``host`` or ``host:port``)
            scheme: Request scheme

        Returns:
            Ordered client infos, possibly empty
        """
        logger.debug(
            f"Resolving OAuth2 clients: pkg_name={pkg_name}, platform={platform}, "
            f"domain={domain_and_port}, scheme={scheme}"
        )

        resolver = OAuth2ClientResolver(await self.load_snapshot())
        infos = resolver.resolve(
            pkg_name=pkg_name,
            domain_and_port=domain_and_port,
            platform=PlatformType.parse(platform),
            scheme=scheme,
        )

        logger.debug(f"Resolved {len(infos)} OAuth2 clients")
        return [self.to_client_info(info) for info in infos]

    async def save_registration(
        self, registration: OAuth2Registration, user: SecurityUser
    ) -> OAuth2Registration:
        """
        Create or update a registration owned by the caller's tenant.

        Args:
            registration: Registration to save, with an id to update
            user: Authenticated caller

        Returns:
            Saved registration

        Raises:
            EntityNotFoundError: If the updated registration does not exist
            AccessDeniedError: If the updated registration belongs to another tenant
            RegistryValidationError: If the registration is invalid
        """
        validate_registration(registration)

        if registration.id is None:
            saved = registration.model_copy(
                update={
                    "id": uuid4(),
                    "tenant_id": user.tenant_id,
                    "created_time": now_millis(),
                }
            )
            action = "Created"
        else:
            existing = await self.registration_repository.get(registration.id)
            if existing is None:
                raise EntityNotFoundError(ENTITY_TYPE, registration.id)
            if existing.tenant_id != user.tenant_id:
                raise AccessDeniedError()
            saved = registration.model_copy(
                update={
                    "tenant_id": user.tenant_id,
                    "created_time": existing.created_time,
                }
            )
            action = "Updated"

        await self.registration_repository.save(saved)

        logger.info(f"{action} OAuth2 client {saved.id} ({saved.provider_name})")
        return saved

    async def find_registration_infos(
        self, tenant_id: UUID
    ) -> list[OAuth2RegistrationInfo]:
        """List the registrations of a tenant in creation order."""
        registrations = await self.registration_repository.find_by_tenant_id(tenant_id)
        return [registration.to_info() for registration in registrations]

    async def find_registration_infos_by_ids(
        self, registration_ids: list[UUID]
    ) -> list[OAuth2RegistrationInfo]:
        """List registrations by id, keeping the order of the ids."""
        registrations = await self.registration_repository.find_by_ids(
            registration_ids
        )
        return [registration.to_info() for registration in registrations]

    async def get_registration(
        self, registration_id: UUID, user: SecurityUser
    ) -> OAuth2Registration:
        """
        Get a registration visible to the caller.

        Raises:
            EntityNotFoundError: If it does not exist
            AccessDeniedError: If the caller may not read it
        """
        registration = await self.registration_repository.get(registration_id)
        if registration is None:
            raise EntityNotFoundError(ENTITY_TYPE, registration_id)

        check_permission(
            user, Resource.OAUTH2_CLIENT, Operation.READ, registration.tenant_id
        )
        return registration

    async def delete_registration(
        self, registration_id: UUID, user: SecurityUser
    ) -> None:
        """
        Delete a registration and every binding that references it.

        Raises:
            EntityNotFoundError: If it does not exist
            AccessDeniedError: If the caller may not delete it
        """
        registration = await self.registration_repository.get(registration_id)
        if registration is None:
            raise EntityNotFoundError(ENTITY_TYPE, registration_id)

        check_permission(
            user, Resource.OAUTH2_CLIENT, Operation.DELETE, registration.tenant_id
        )

        await self._unbind(registration_id)
        await self.registration_repository.delete(registration_id)

        logger.info(f"Deleted OAuth2 client {registration_id}")

    async def delete_by_tenant_id(self, tenant_id: UUID) -> None:
        """
        Remove everything a tenant owns from the registry.

        Domains and mobile apps of the tenant go with their bindings;
        the tenant's registrations are also unbound from any other owner.
        """
        domains = await self.domain_repository.delete_by_tenant_id(tenant_id)
        mobile_apps = await self.mobile_app_repository.delete_by_tenant_id(tenant_id)
        registration_ids = await self.registration_repository.delete_by_tenant_id(
            tenant_id
        )
        for registration_id in registration_ids:
            await self._unbind(registration_id)

        logger.info(
            f"Deleted tenant {tenant_id} registry data: {len(registration_ids)} "
            f"OAuth2 clients, {domains} domains, {mobile_apps} mobile apps"
        )

    def get_login_processing_url(self) -> str:
        """Path the identity providers redirect to after login."""
        return self.settings.login_processing_url

    async def _unbind(self, registration_id: UUID) -> None:
        await self.domain_repository.delete_registrations_by_registration_id(
            registration_id
        )
        await self.mobile_app_repository.delete_registrations_by_registration_id(
            registration_id
        )


async def load_bindable_registrations(
    registration_repository: OAuth2RegistrationRepository,
    registration_ids: list[UUID],
    tenant_id: UUID | None,
    system_tenant_id: UUID | None = None,
) -> list[UUID]:
    """
    Check registration ids about to be bound to a domain or mobile app.

    Registrations of the system tenant are shared with every tenant.

    Args:
        registration_repository: Registration storage
        registration_ids: Requested ids in display order
        tenant_id: Tenant owning the domain or app
        system_tenant_id: Tenant whose registrations anyone may bind

    Returns:
        Ids in display order, duplicates removed

    Raises:
        RegistryValidationError: If an id is unknown or owned by another tenant
    """
    unique_ids = list(dict.fromkeys(registration_ids))
    registrations = {
        registration.id: registration
        for registration in await registration_repository.find_by_ids(unique_ids)
    }
    for registration_id in unique_ids:
        registration = registrations.get(registration_id)
        if registration is None:
            raise RegistryValidationError(
                f"OAuth2 client [{registration_id}] does not exist"
            )
        if registration.tenant_id not in (tenant_id, system_tenant_id):
            raise RegistryValidationError(
                f"OAuth2 client [{registration_id}] belongs to another tenant"
            )
    return unique_ids
