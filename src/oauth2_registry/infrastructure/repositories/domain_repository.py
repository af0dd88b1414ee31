"""
Abstract interface for domain storage and domain-to-registration bindings.

Bindings form an association table keyed by (domain_id, registration_id)
with a position giving the display order.
"""

from abc import ABC, abstractmethod
from uuid import UUID

from oauth2_registry.domain.models import Domain, DomainOAuth2Registration


class DomainRepository(ABC):
    """Abstract interface for domain storage operations."""

    @abstractmethod
    async def save(self, domain: Domain) -> Domain:
        """Insert or replace a domain."""
        pass

    @abstractmethod
    async def get(self, domain_id: UUID) -> Domain | None:
        """Retrieve a domain by id."""
        pass

    @abstractmethod
    async def delete(self, domain_id: UUID) -> bool:
        """
        Delete a domain together with its bindings.

        Returns:
            True if deleted, False if not found
        """
        pass

    @abstractmethod
    async def find_by_tenant_id(self, tenant_id: UUID) -> list[Domain]:
        """List the domains of a tenant ordered by creation time."""
        pass

    @abstractmethod
    async def find_by_name(self, name: str) -> list[Domain]:
        """List domains with the given name (case-insensitive), any scheme."""
        pass

    @abstractmethod
    async def find_all(self) -> list[Domain]:
        """List every domain ordered by creation time."""
        pass

    @abstractmethod
    async def delete_by_tenant_id(self, tenant_id: UUID) -> int:
        """
        Delete every domain of a tenant, cascading to their bindings.

        Returns:
            Number of deleted domains
        """
        pass

    @abstractmethod
    async def count_by_tenant_id_and_oauth2_enabled(
        self, tenant_id: UUID, oauth2_enabled: bool
    ) -> int:
        """Count the tenant's domains with the given OAuth2 flag."""
        pass

    @abstractmethod
    async def save_registrations(
        self, domain_id: UUID, registration_ids: list[UUID]
    ) -> list[DomainOAuth2Registration]:
        """
        Replace the bindings of a domain.

        Args:
            domain_id: Domain to bind
            registration_ids: Registrations in display order

        Returns:
            The stored bindings
        """
        pass

    @abstractmethod
    async def find_registrations_by_domain_id(
        self, domain_id: UUID
    ) -> list[DomainOAuth2Registration]:
        """List the bindings of a domain ordered by position."""
        pass

    @abstractmethod
    async def find_all_registrations(self) -> list[DomainOAuth2Registration]:
        """List every domain binding."""
        pass

    @abstractmethod
    async def delete_registrations_by_registration_id(
        self, registration_id: UUID
    ) -> int:
        """
        Remove a registration from every domain.

        Returns:
            Number of removed bindings
        """
        pass
