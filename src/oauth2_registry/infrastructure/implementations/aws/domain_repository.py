"""
AWS DynamoDB implementation for domain storage using PynamoDB ORM.
"""

from uuid import UUID

from oauth2_registry.core.logging import logger
from oauth2_registry.domain.models import Domain, DomainOAuth2Registration
from oauth2_registry.infrastructure.implementations.aws.models import (
    DomainModel,
    DomainRegistrationModel,
    configure_table,
)
from oauth2_registry.infrastructure.repositories.domain_repository import (
    DomainRepository,
)


class AWSDomainRepository(DomainRepository):
    """AWS DynamoDB implementation of DomainRepository.

    Tables:
    - domains: id (partition key); DomainTenantIndex, DomainNameIndex
    - domain registrations: domain_id (partition) + registration_id (sort);
      RegistrationIndex for cascading registration deletes
    """

    def __init__(
        self,
        table_name: str = "oauth2-domains",
        bindings_table_name: str = "oauth2-domain-registrations",
        region_name: str = "eu-west-1",
        auto_create_table: bool = False,
    ):
        configure_table(DomainModel, table_name, region_name, auto_create_table)
        configure_table(
            DomainRegistrationModel, bindings_table_name, region_name, auto_create_table
        )

        self.table_name = table_name
        self.bindings_table_name = bindings_table_name
        self.region_name = region_name

        logger.info(
            f"Initialized AWSDomainRepository (PynamoDB) with tables={table_name},"
            f"{bindings_table_name}, region={region_name}"
        )

    @staticmethod
    def _to_domain(model: DomainModel) -> Domain:
        return Domain.model_validate_json(model.document)

    @staticmethod
    def _to_binding(model: DomainRegistrationModel) -> DomainOAuth2Registration:
        return DomainOAuth2Registration(
            domain_id=UUID(model.domain_id),
            registration_id=UUID(model.registration_id),
            position=int(model.position),
        )

    @staticmethod
    def _sorted(domains: list[Domain]) -> list[Domain]:
        return sorted(domains, key=lambda d: (d.created_time or 0, str(d.id)))

    def _delete_bindings(self, domain_id: UUID) -> None:
        for binding in DomainRegistrationModel.query(str(domain_id)):
            binding.delete()

    async def save(self, domain: Domain) -> Domain:
        """Save domain to DynamoDB."""
        if domain.id is None or domain.tenant_id is None:
            raise ValueError("Domain id and tenant_id must be set before saving")

        try:
            DomainModel(
                id=str(domain.id),
                tenant_id=str(domain.tenant_id),
                name=domain.name.lower(),
                created_time=domain.created_time or 0,
                document=domain.model_dump_json(),
            ).save()

            logger.debug(f"Saved domain: id={domain.id}, name={domain.name}")
            return domain

        except Exception as e:
            logger.error(f"Failed to save domain {domain.id}: {e}")
            raise

    async def get(self, domain_id: UUID) -> Domain | None:
        try:
            return self._to_domain(DomainModel.get(str(domain_id)))
        except DomainModel.DoesNotExist:
            return None

    async def delete(self, domain_id: UUID) -> bool:
        """Delete domain and its bindings."""
        try:
            model = DomainModel.get(str(domain_id))
        except DomainModel.DoesNotExist:
            return False

        self._delete_bindings(domain_id)
        model.delete()

        logger.debug(f"Deleted domain: id={domain_id}")
        return True

    async def find_by_tenant_id(self, tenant_id: UUID) -> list[Domain]:
        return self._sorted(
            [
                self._to_domain(model)
                for model in DomainModel.tenant_index.query(str(tenant_id))
            ]
        )

    async def find_by_name(self, name: str) -> list[Domain]:
        return self._sorted(
            [
                self._to_domain(model)
                for model in DomainModel.name_index.query(name.strip().lower())
            ]
        )

    async def find_all(self) -> list[Domain]:
        try:
            return self._sorted([self._to_domain(model) for model in DomainModel.scan()])
        except Exception as e:
            logger.error(f"Failed to list domains: {e}")
            raise

    async def delete_by_tenant_id(self, tenant_id: UUID) -> int:
        """Delete the domains of a tenant and their bindings."""
        deleted = 0
        for model in DomainModel.tenant_index.query(str(tenant_id)):
            self._delete_bindings(UUID(model.id))
            model.delete()
            deleted += 1

        logger.info(f"Deleted {deleted} domains of tenant {tenant_id}")
        return deleted

    async def count_by_tenant_id_and_oauth2_enabled(
        self, tenant_id: UUID, oauth2_enabled: bool
    ) -> int:
        return sum(
            1
            for domain in await self.find_by_tenant_id(tenant_id)
            if domain.oauth2_enabled == oauth2_enabled
        )

    async def save_registrations(
        self, domain_id: UUID, registration_ids: list[UUID]
    ) -> list[DomainOAuth2Registration]:
        """Replace the bindings of a domain."""
        try:
            self._delete_bindings(domain_id)
            for position, registration_id in enumerate(registration_ids):
                DomainRegistrationModel(
                    domain_id=str(domain_id),
                    registration_id=str(registration_id),
                    position=position,
                ).save()
        except Exception as e:
            logger.error(f"Failed to bind registrations to domain {domain_id}: {e}")
            raise

        return await self.find_registrations_by_domain_id(domain_id)

    async def find_registrations_by_domain_id(
        self, domain_id: UUID
    ) -> list[DomainOAuth2Registration]:
        bindings = [
            self._to_binding(model)
            for model in DomainRegistrationModel.query(str(domain_id))
        ]
        return sorted(bindings, key=lambda binding: binding.position)

    async def find_all_registrations(self) -> list[DomainOAuth2Registration]:
        return [self._to_binding(model) for model in DomainRegistrationModel.scan()]

    async def delete_registrations_by_registration_id(
        self, registration_id: UUID
    ) -> int:
        removed = 0
        for model in DomainRegistrationModel.registration_index.query(
            str(registration_id)
        ):
            model.delete()
            removed += 1
        return removed
