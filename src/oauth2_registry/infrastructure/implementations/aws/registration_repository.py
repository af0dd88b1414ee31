"""
AWS DynamoDB implementation for registration storage using PynamoDB ORM.
"""

from uuid import UUID

from oauth2_registry.core.logging import logger
from oauth2_registry.domain.models import OAuth2Registration
from oauth2_registry.infrastructure.implementations.aws.models import (
    RegistrationModel,
    configure_table,
)
from oauth2_registry.infrastructure.repositories.registration_repository import (
    OAuth2RegistrationRepository,
)


class AWSRegistrationRepository(OAuth2RegistrationRepository):
    """AWS DynamoDB implementation of OAuth2RegistrationRepository.

    DynamoDB Table Schema:
    - Partition Key: id (string)
    - Attributes: tenant_id, created_time, document (registration JSON)

    Global Secondary Indexes:
    - RegistrationTenantIndex: tenant_id (partition key)
    """

    def __init__(
        self,
        table_name: str = "oauth2-registrations",
        region_name: str = "eu-west-1",
        auto_create_table: bool = False,
    ):
        """Configure the PynamoDB model.

        Args:
            table_name: DynamoDB table name (from settings.aws_registrations_table)
            region_name: AWS region (from settings.aws_region)
            auto_create_table: If True, create table if it doesn't exist
        """
        configure_table(RegistrationModel, table_name, region_name, auto_create_table)

        self.table_name = table_name
        self.region_name = region_name

        logger.info(
            f"Initialized AWSRegistrationRepository (PynamoDB) with table={table_name}, region={region_name}"
        )

    @staticmethod
    def _to_registration(model: RegistrationModel) -> OAuth2Registration:
        return OAuth2Registration.model_validate_json(model.document)

    @staticmethod
    def _sorted(registrations: list[OAuth2Registration]) -> list[OAuth2Registration]:
        return sorted(registrations, key=lambda r: (r.created_time or 0, str(r.id)))

    async def save(self, registration: OAuth2Registration) -> OAuth2Registration:
        """Save registration to DynamoDB."""
        if registration.id is None or registration.tenant_id is None:
            raise ValueError("Registration id and tenant_id must be set before saving")

        try:
            RegistrationModel(
                id=str(registration.id),
                tenant_id=str(registration.tenant_id),
                created_time=registration.created_time or 0,
                document=registration.model_dump_json(),
            ).save()

            logger.debug(f"Saved registration: id={registration.id}")
            return registration

        except Exception as e:
            logger.error(f"Failed to save registration {registration.id}: {e}")
            raise

    async def get(self, registration_id: UUID) -> OAuth2Registration | None:
        """Get a registration by id."""
        try:
            return self._to_registration(RegistrationModel.get(str(registration_id)))
        except RegistrationModel.DoesNotExist:
            return None

    async def delete(self, registration_id: UUID) -> bool:
        """Delete a registration by id."""
        try:
            model = RegistrationModel.get(str(registration_id))
        except RegistrationModel.DoesNotExist:
            return False

        model.delete()
        logger.debug(f"Deleted registration: id={registration_id}")
        return True

    async def find_by_tenant_id(self, tenant_id: UUID) -> list[OAuth2Registration]:
        """Query the tenant index."""
        try:
            return self._sorted(
                [
                    self._to_registration(model)
                    for model in RegistrationModel.tenant_index.query(str(tenant_id))
                ]
            )
        except Exception as e:
            logger.error(f"Failed to list registrations of tenant {tenant_id}: {e}")
            raise

    async def find_by_ids(
        self, registration_ids: list[UUID]
    ) -> list[OAuth2Registration]:
        """Get several registrations, preserving the order of the ids."""
        registrations = []
        for registration_id in registration_ids:
            registration = await self.get(registration_id)
            if registration is not None:
                registrations.append(registration)
        return registrations

    async def find_all(self) -> list[OAuth2Registration]:
        """Scan every registration.

        Note: Scanning is not efficient for large tables; registries hold
        a handful of identity providers.
        """
        try:
            return self._sorted(
                [self._to_registration(model) for model in RegistrationModel.scan()]
            )
        except Exception as e:
            logger.error(f"Failed to list registrations: {e}")
            raise

    async def delete_by_tenant_id(self, tenant_id: UUID) -> list[UUID]:
        """Delete the registrations of a tenant."""
        deleted = []
        for model in RegistrationModel.tenant_index.query(str(tenant_id)):
            model.delete()
            deleted.append(UUID(model.id))

        logger.info(f"Deleted {len(deleted)} registrations of tenant {tenant_id}")
        return deleted
