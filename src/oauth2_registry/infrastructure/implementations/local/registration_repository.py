"""
Local file-based registration repository implementation.

Stores registrations as JSON files in a local directory structure:
    {base_dir}/
        oauth2/
            registrations/
                {registration_id}.json
"""

from pathlib import Path
from uuid import UUID

from loguru import logger

from oauth2_registry.domain.models import OAuth2Registration
from oauth2_registry.infrastructure.repositories.registration_repository import (
    OAuth2RegistrationRepository,
)


def _creation_order(registration: OAuth2Registration) -> tuple[int, str]:
    return (registration.created_time or 0, str(registration.id))


class LocalRegistrationRepository(OAuth2RegistrationRepository):
    """
    File-based registration storage for local development.

    One JSON document per registration.
    """

    def __init__(self, base_dir: str = "./.registry"):
        """
        Initialize local registration repository.

        Args:
            base_dir: Base directory for registry storage
        """
        self.base_dir = Path(base_dir)
        self.registrations_dir = self.base_dir / "oauth2" / "registrations"

        self.registrations_dir.mkdir(parents=True, exist_ok=True)

        logger.info(f"Initialized LocalRegistrationRepository at {self.base_dir}")

    def _registration_path(self, registration_id: UUID) -> Path:
        """Get path to registration file."""
        return self.registrations_dir / f"{registration_id}.json"

    def _load_all(self) -> list[OAuth2Registration]:
        registrations = [
            OAuth2Registration.model_validate_json(path.read_text())
            for path in self.registrations_dir.glob("*.json")
        ]
        return sorted(registrations, key=_creation_order)

    async def save(self, registration: OAuth2Registration) -> OAuth2Registration:
        """Store registration to file."""
        if registration.id is None:
            raise ValueError("Registration id must be set before saving")

        path = self._registration_path(registration.id)
        path.write_text(registration.model_dump_json(indent=2))

        logger.debug(f"Saved registration {registration.id} ({registration.title})")
        return registration

    async def get(self, registration_id: UUID) -> OAuth2Registration | None:
        """Retrieve registration by id."""
        path = self._registration_path(registration_id)

        if not path.exists():
            return None

        return OAuth2Registration.model_validate_json(path.read_text())

    async def delete(self, registration_id: UUID) -> bool:
        """Delete registration file."""
        path = self._registration_path(registration_id)

        if not path.exists():
            return False

        path.unlink()
        logger.debug(f"Deleted registration {registration_id}")
        return True

    async def find_by_tenant_id(self, tenant_id: UUID) -> list[OAuth2Registration]:
        """List registrations of a tenant."""
        return [
            registration
            for registration in self._load_all()
            if registration.tenant_id == tenant_id
        ]

    async def find_by_ids(
        self, registration_ids: list[UUID]
    ) -> list[OAuth2Registration]:
        """Retrieve several registrations, preserving the order of the ids."""
        registrations = []
        for registration_id in registration_ids:
            registration = await self.get(registration_id)
            if registration is not None:
                registrations.append(registration)
        return registrations

    async def find_all(self) -> list[OAuth2Registration]:
        """List every registration."""
        return self._load_all()

    async def delete_by_tenant_id(self, tenant_id: UUID) -> list[UUID]:
        """Delete the registrations of a tenant."""
        deleted = []
        for registration in await self.find_by_tenant_id(tenant_id):
            if await self.delete(registration.id):
                deleted.append(registration.id)

        logger.info(f"Deleted {len(deleted)} registrations of tenant {tenant_id}")
        return deleted
