"""
Local file-based domain repository implementation.

Stores domains and their bindings as JSON files:
    {base_dir}/
        oauth2/
            domains/
                {domain_id}.json
            domain_registrations/
                {domain_id}.json (ordered list of bound registration ids)
"""

import json
from pathlib import Path
from uuid import UUID

from loguru import logger

from oauth2_registry.domain.models import Domain, DomainOAuth2Registration
from oauth2_registry.infrastructure.repositories.domain_repository import (
    DomainRepository,
)


class LocalDomainRepository(DomainRepository):
    """File-based domain storage for local development."""

    def __init__(self, base_dir: str = "./.registry"):
        """
        Initialize local domain repository.

        Args:
            base_dir: Base directory for registry storage
        """
        self.base_dir = Path(base_dir)
        self.domains_dir = self.base_dir / "oauth2" / "domains"
        self.bindings_dir = self.base_dir / "oauth2" / "domain_registrations"

        self.domains_dir.mkdir(parents=True, exist_ok=True)
        self.bindings_dir.mkdir(parents=True, exist_ok=True)

        logger.info(f"Initialized LocalDomainRepository at {self.base_dir}")

    def _domain_path(self, domain_id: UUID) -> Path:
        """Get path to domain file."""
        return self.domains_dir / f"{domain_id}.json"

    def _bindings_path(self, domain_id: UUID) -> Path:
        """Get path to the binding list of a domain."""
        return self.bindings_dir / f"{domain_id}.json"

    def _load_all(self) -> list[Domain]:
        domains = [
            Domain.model_validate_json(path.read_text())
            for path in self.domains_dir.glob("*.json")
        ]
        return sorted(domains, key=lambda d: (d.created_time or 0, str(d.id)))

    def _read_bindings(self, domain_id: UUID) -> list[DomainOAuth2Registration]:
        path = self._bindings_path(domain_id)
        if not path.exists():
            return []

        registration_ids = json.loads(path.read_text())
        return [
            DomainOAuth2Registration(
                domain_id=domain_id,
                registration_id=UUID(registration_id),
                position=position,
            )
            for position, registration_id in enumerate(registration_ids)
        ]

    def _write_bindings(self, domain_id: UUID, registration_ids: list[UUID]) -> None:
        self._bindings_path(domain_id).write_text(
            json.dumps([str(registration_id) for registration_id in registration_ids])
        )

    async def save(self, domain: Domain) -> Domain:
        """Store domain to file."""
        if domain.id is None:
            raise ValueError("Domain id must be set before saving")

        self._domain_path(domain.id).write_text(domain.model_dump_json(indent=2))

        logger.debug(f"Saved domain {domain.id} ({domain.name})")
        return domain

    async def get(self, domain_id: UUID) -> Domain | None:
        """Retrieve domain by id."""
        path = self._domain_path(domain_id)

        if not path.exists():
            return None

        return Domain.model_validate_json(path.read_text())

    async def delete(self, domain_id: UUID) -> bool:
        """Delete domain file and its bindings."""
        path = self._domain_path(domain_id)

        if not path.exists():
            return False

        path.unlink()
        self._bindings_path(domain_id).unlink(missing_ok=True)

        logger.debug(f"Deleted domain {domain_id}")
        return True

    async def find_by_tenant_id(self, tenant_id: UUID) -> list[Domain]:
        """List the domains of a tenant."""
        return [domain for domain in self._load_all() if domain.tenant_id == tenant_id]

    async def find_by_name(self, name: str) -> list[Domain]:
        """List domains by name, ignoring case."""
        wanted = name.strip().lower()
        return [
            domain for domain in self._load_all() if domain.name.lower() == wanted
        ]

    async def find_all(self) -> list[Domain]:
        """List every domain."""
        return self._load_all()

    async def delete_by_tenant_id(self, tenant_id: UUID) -> int:
        """Delete the domains of a tenant and their bindings."""
        deleted = 0
        for domain in await self.find_by_tenant_id(tenant_id):
            if await self.delete(domain.id):
                deleted += 1

        logger.info(f"Deleted {deleted} domains of tenant {tenant_id}")
        return deleted

    async def count_by_tenant_id_and_oauth2_enabled(
        self, tenant_id: UUID, oauth2_enabled: bool
    ) -> int:
        """Count domains of a tenant by OAuth2 flag."""
        return sum(
            1
            for domain in await self.find_by_tenant_id(tenant_id)
            if domain.oauth2_enabled == oauth2_enabled
        )

    async def save_registrations(
        self, domain_id: UUID, registration_ids: list[UUID]
    ) -> list[DomainOAuth2Registration]:
        """Replace the bindings of a domain."""
        self._write_bindings(domain_id, registration_ids)

        logger.debug(
            f"Bound {len(registration_ids)} registrations to domain {domain_id}"
        )
        return self._read_bindings(domain_id)

    async def find_registrations_by_domain_id(
        self, domain_id: UUID
    ) -> list[DomainOAuth2Registration]:
        """List the bindings of a domain."""
        return self._read_bindings(domain_id)

    async def find_all_registrations(self) -> list[DomainOAuth2Registration]:
        """List every domain binding."""
        bindings = []
        for path in self.bindings_dir.glob("*.json"):
            bindings.extend(self._read_bindings(UUID(path.stem)))
        return bindings

    async def delete_registrations_by_registration_id(
        self, registration_id: UUID
    ) -> int:
        """Remove a registration from every domain binding list."""
        removed = 0
        for path in self.bindings_dir.glob("*.json"):
            domain_id = UUID(path.stem)
            bindings = self._read_bindings(domain_id)
            remaining = [
                binding.registration_id
                for binding in bindings
                if binding.registration_id != registration_id
            ]
            if len(remaining) != len(bindings):
                removed += len(bindings) - len(remaining)
                self._write_bindings(domain_id, remaining)
        return removed
