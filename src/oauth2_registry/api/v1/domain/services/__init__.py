"""Domain Business Logic Services."""

import re
from uuid import UUID, uuid4

from oauth2_registry.api.v1.oauth2.services import load_bindable_registrations
from oauth2_registry.core.logging import logger
from oauth2_registry.domain.exceptions import (
    AccessDeniedError,
    EntityNotFoundError,
    RegistryValidationError,
)
from oauth2_registry.domain.models import Domain, DomainInfo, SchemeType, now_millis
from oauth2_registry.domain.services import (
    Operation,
    Resource,
    SecurityUser,
    check_permission,
)
from oauth2_registry.utils.request import DEFAULT_PORTS
from oauth2_registry.infrastructure.repositories import (
    DomainRepository,
    OAuth2RegistrationRepository,
)

ENTITY_TYPE = "Domain"

_HOST_LABEL = r"[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?"
_HOST_PATTERN = re.compile(rf"^{_HOST_LABEL}(?:\.{_HOST_LABEL})*$")


def normalize_domain_name(name: str, scheme: SchemeType | None = None) -> str:
    """
    Validate and normalize a domain key.

    Requests on a default port are keyed by host alone, so the default port
    of an HTTP or HTTPS domain is dropped.

    Args:
        name: ``host`` or ``host:port``
        scheme: Scheme of the domain

    Returns:
        Lower-cased, stripped name

    Raises:
        RegistryValidationError: If host or port is invalid
    """
    normalized = (name or "").strip().lower()
    if not normalized:
        raise RegistryValidationError("Domain name must not be blank")

    host, separator, port = normalized.partition(":")
    if not _HOST_PATTERN.match(host) or len(host) > 253:
        raise RegistryValidationError(f"Invalid domain name [{name}]")

    if separator:
        if not port.isdigit() or not 1 <= int(port) <= 65535:
            raise RegistryValidationError(f"Invalid port in domain name [{name}]")
        if scheme is not None and DEFAULT_PORTS.get(scheme.value.lower()) == int(port):
            return host

    return normalized


class DomainService:
    """Service class for domains and their OAuth2 client bindings."""

    def __init__(
        self,
        domain_repository: DomainRepository,
        registration_repository: OAuth2RegistrationRepository,
        system_tenant_id: UUID | None = None,
    ) -> None:
        self.domain_repository = domain_repository
        self.registration_repository = registration_repository
        self.system_tenant_id = system_tenant_id

    async def _get_owned(
        self, domain_id: UUID, user: SecurityUser, operation: Operation
    ) -> Domain:
        domain = await self.domain_repository.get(domain_id)
        if domain is None:
            raise EntityNotFoundError(ENTITY_TYPE, domain_id)

        check_permission(user, Resource.DOMAIN, operation, domain.tenant_id)
        return domain

    async def save_domain(
        self,
        domain: Domain,
        registration_ids: list[UUID] | None,
        user: SecurityUser,
    ) -> Domain:
        """
        Create or update a domain and optionally replace its bindings.

        Args:
            domain: Domain to save, with an id to update
            registration_ids: Registrations to bind in display order, None to
                keep the current bindings
            user: Authenticated caller

        Returns:
            Saved domain

        Raises:
            EntityNotFoundError: If the updated domain does not exist
            AccessDeniedError: If the updated domain belongs to another tenant
            RegistryValidationError: If name or bindings are invalid
        """
        name = normalize_domain_name(domain.name, domain.scheme)

        if domain.id is None:
            saved = domain.model_copy(
                update={
                    "id": uuid4(),
                    "tenant_id": user.tenant_id,
                    "created_time": now_millis(),
                    "name": name,
                }
            )
        else:
            existing = await self.domain_repository.get(domain.id)
            if existing is None:
                raise EntityNotFoundError(ENTITY_TYPE, domain.id)
            if existing.tenant_id != user.tenant_id:
                raise AccessDeniedError()
            saved = domain.model_copy(
                update={
                    "tenant_id": existing.tenant_id,
                    "created_time": existing.created_time,
                    "name": name,
                }
            )

        for other in await self.domain_repository.find_by_name(name):
            if other.id != saved.id and other.scheme == saved.scheme:
                raise RegistryValidationError(
                    f"Domain [{name}] with scheme {saved.scheme.value} already exists"
                )

        bound_ids = None
        if registration_ids is not None:
            bound_ids = await load_bindable_registrations(
                self.registration_repository,
                registration_ids,
                saved.tenant_id,
                self.system_tenant_id,
            )

        await self.domain_repository.save(saved)
        if bound_ids is not None:
            await self.domain_repository.save_registrations(saved.id, bound_ids)

        logger.info(f"Saved domain {saved.id} ({saved.name})")
        return saved

    async def update_domain_registrations(
        self, domain_id: UUID, registration_ids: list[UUID], user: SecurityUser
    ) -> None:
        """Replace the bindings of a domain, keeping the given order."""
        domain = await self._get_owned(domain_id, user, Operation.WRITE)
        bound_ids = await load_bindable_registrations(
            self.registration_repository,
            registration_ids,
            domain.tenant_id,
            self.system_tenant_id,
        )
        await self.domain_repository.save_registrations(domain_id, bound_ids)

        logger.info(f"Bound {len(bound_ids)} OAuth2 clients to domain {domain_id}")

    async def _to_info(self, domain: Domain) -> DomainInfo:
        bindings = await self.domain_repository.find_registrations_by_domain_id(
            domain.id
        )
        registrations = await self.registration_repository.find_by_ids(
            [binding.registration_id for binding in bindings]
        )
        return DomainInfo(
            **domain.model_dump(),
            oauth2_client_infos=[
                registration.to_info() for registration in registrations
            ],
        )

    async def get_domain_info(self, domain_id: UUID, user: SecurityUser) -> DomainInfo:
        """Get a domain with its ordered registration infos."""
        domain = await self._get_owned(domain_id, user, Operation.READ)
        return await self._to_info(domain)

    async def find_domain_infos(self, tenant_id: UUID) -> list[DomainInfo]:
        """List the domains of a tenant with their registration infos."""
        return [
            await self._to_info(domain)
            for domain in await self.domain_repository.find_by_tenant_id(tenant_id)
        ]

    async def delete_domain(self, domain_id: UUID, user: SecurityUser) -> None:
        """Delete a domain and its bindings."""
        await self._get_owned(domain_id, user, Operation.DELETE)
        await self.domain_repository.delete(domain_id)

        logger.info(f"Deleted domain {domain_id}")

    async def count_oauth2_enabled_domains(self, tenant_id: UUID) -> int:
        """Count the domains of a tenant that offer OAuth2 login."""
        return await self.domain_repository.count_by_tenant_id_and_oauth2_enabled(
            tenant_id, True
        )
