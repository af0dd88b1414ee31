"""
Abstract interface for mobile application storage and their bindings.
"""

from abc import ABC, abstractmethod
from uuid import UUID

from oauth2_registry.domain.models import MobileApp, MobileAppOAuth2Registration


class MobileAppRepository(ABC):
    """Abstract interface for mobile application storage operations."""

    @abstractmethod
    async def save(self, mobile_app: MobileApp) -> MobileApp:
        """Insert or replace a mobile application."""
        pass

    @abstractmethod
    async def get(self, mobile_app_id: UUID) -> MobileApp | None:
        """Retrieve a mobile application by id."""
        pass

    @abstractmethod
    async def delete(self, mobile_app_id: UUID) -> bool:
        """
        Delete a mobile application together with its bindings.

        Returns:
            True if deleted, False if not found
        """
        pass

    @abstractmethod
    async def find_by_tenant_id(self, tenant_id: UUID) -> list[MobileApp]:
        """List the applications of a tenant ordered by creation time."""
        pass

    @abstractmethod
    async def find_by_pkg_name(self, pkg_name: str) -> MobileApp | None:
        """Retrieve the application with an exact package name."""
        pass

    @abstractmethod
    async def find_all(self) -> list[MobileApp]:
        """List every application ordered by creation time."""
        pass

    @abstractmethod
    async def delete_by_tenant_id(self, tenant_id: UUID) -> int:
        """
        Delete every application of a tenant, cascading to their bindings.

        Returns:
            Number of deleted applications
        """
        pass

    @abstractmethod
    async def save_registrations(
        self, mobile_app_id: UUID, registration_ids: list[UUID]
    ) -> list[MobileAppOAuth2Registration]:
        """Replace the bindings of an application, in display order."""
        pass

    @abstractmethod
    async def find_all_by_mobile_app_id(
        self, mobile_app_id: UUID
    ) -> list[MobileAppOAuth2Registration]:
        """List the bindings of an application ordered by position."""
        pass

    @abstractmethod
    async def find_all_registrations(self) -> list[MobileAppOAuth2Registration]:
        """List every mobile application binding."""
        pass

    @abstractmethod
    async def delete_registrations_by_registration_id(
        self, registration_id: UUID
    ) -> int:
        """
        Remove a registration from every application.

        Returns:
            Number of removed bindings
        """
        pass
