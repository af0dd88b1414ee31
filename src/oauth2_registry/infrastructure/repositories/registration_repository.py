"""
Abstract interface for OAuth2 client registration storage.

Registrations are keyed by id and indexed by tenant id.
"""

from abc import ABC, abstractmethod
from uuid import UUID

from oauth2_registry.domain.models import OAuth2Registration


class OAuth2RegistrationRepository(ABC):
    """
    Abstract interface for registration storage operations.

    List operations return registrations ordered by creation time.
    """

    @abstractmethod
    async def save(self, registration: OAuth2Registration) -> OAuth2Registration:
        """
        Insert or replace a registration.

        Args:
            registration: Registration with id, tenant_id and created_time set

        Returns:
            The stored registration
        """
        pass

    @abstractmethod
    async def get(self, registration_id: UUID) -> OAuth2Registration | None:
        """
        Retrieve a registration by id.

        Returns:
            Registration if found, None otherwise
        """
        pass

    @abstractmethod
    async def delete(self, registration_id: UUID) -> bool:
        """
        Delete a registration.

        Returns:
            True if deleted, False if not found
        """
        pass

    @abstractmethod
    async def find_by_tenant_id(self, tenant_id: UUID) -> list[OAuth2Registration]:
        """List registrations owned by a tenant."""
        pass

    @abstractmethod
    async def find_by_ids(
        self, registration_ids: list[UUID]
    ) -> list[OAuth2Registration]:
        """
        Retrieve several registrations.

        Unknown ids are skipped; the result follows the order of the ids.
        """
        pass

    @abstractmethod
    async def find_all(self) -> list[OAuth2Registration]:
        """List every registration."""
        pass

    @abstractmethod
    async def delete_by_tenant_id(self, tenant_id: UUID) -> list[UUID]:
        """
        Delete every registration of a tenant.

        Returns:
            Ids of the deleted registrations
        """
        pass
