"""
Local file-based mobile application repository implementation.

Stores applications and their bindings as JSON files:
    {base_dir}/
        oauth2/
            mobile_apps/
                {mobile_app_id}.json
            mobile_app_registrations/
                {mobile_app_id}.json (ordered list of bound registration ids)
"""

import json
from pathlib import Path
from uuid import UUID

from loguru import logger

from oauth2_registry.domain.models import MobileApp, MobileAppOAuth2Registration
from oauth2_registry.infrastructure.repositories.mobile_app_repository import (
    MobileAppRepository,
)


class LocalMobileAppRepository(MobileAppRepository):
    """File-based mobile application storage for local development."""

    def __init__(self, base_dir: str = "./.registry"):
        """
        Initialize local mobile application repository.

        Args:
            base_dir: Base directory for registry storage
        """
        self.base_dir = Path(base_dir)
        self.apps_dir = self.base_dir / "oauth2" / "mobile_apps"
        self.bindings_dir = self.base_dir / "oauth2" / "mobile_app_registrations"

        self.apps_dir.mkdir(parents=True, exist_ok=True)
        self.bindings_dir.mkdir(parents=True, exist_ok=True)

        logger.info(f"Initialized LocalMobileAppRepository at {self.base_dir}")

    def _app_path(self, mobile_app_id: UUID) -> Path:
        return self.apps_dir / f"{mobile_app_id}.json"

    def _bindings_path(self, mobile_app_id: UUID) -> Path:
        return self.bindings_dir / f"{mobile_app_id}.json"

    def _load_all(self) -> list[MobileApp]:
        apps = [
            MobileApp.model_validate_json(path.read_text())
            for path in self.apps_dir.glob("*.json")
        ]
        return sorted(apps, key=lambda a: (a.created_time or 0, str(a.id)))

    def _read_bindings(self, mobile_app_id: UUID) -> list[MobileAppOAuth2Registration]:
        path = self._bindings_path(mobile_app_id)
        if not path.exists():
            return []

        return [
            MobileAppOAuth2Registration(
                mobile_app_id=mobile_app_id,
                registration_id=UUID(registration_id),
                position=position,
            )
            for position, registration_id in enumerate(json.loads(path.read_text()))
        ]

    def _write_bindings(
        self, mobile_app_id: UUID, registration_ids: list[UUID]
    ) -> None:
        self._bindings_path(mobile_app_id).write_text(
            json.dumps([str(registration_id) for registration_id in registration_ids])
        )

    async def save(self, mobile_app: MobileApp) -> MobileApp:
        """Store application to file."""
        if mobile_app.id is None:
            raise ValueError("Mobile app id must be set before saving")

        self._app_path(mobile_app.id).write_text(mobile_app.model_dump_json(indent=2))

        logger.debug(f"Saved mobile app {mobile_app.id} ({mobile_app.pkg_name})")
        return mobile_app

    async def get(self, mobile_app_id: UUID) -> MobileApp | None:
        """Retrieve application by id."""
        path = self._app_path(mobile_app_id)

        if not path.exists():
            return None

        return MobileApp.model_validate_json(path.read_text())

    async def delete(self, mobile_app_id: UUID) -> bool:
        """Delete application file and its bindings."""
        path = self._app_path(mobile_app_id)

        if not path.exists():
            return False

        path.unlink()
        self._bindings_path(mobile_app_id).unlink(missing_ok=True)

        logger.debug(f"Deleted mobile app {mobile_app_id}")
        return True

    async def find_by_tenant_id(self, tenant_id: UUID) -> list[MobileApp]:
        return [app for app in self._load_all() if app.tenant_id == tenant_id]

    async def find_by_pkg_name(self, pkg_name: str) -> MobileApp | None:
        for app in self._load_all():
            if app.pkg_name == pkg_name:
                return app
        return None

    async def find_all(self) -> list[MobileApp]:
        return self._load_all()

    async def delete_by_tenant_id(self, tenant_id: UUID) -> int:
        """Delete the applications of a tenant and their bindings."""
        deleted = 0
        for app in await self.find_by_tenant_id(tenant_id):
            if await self.delete(app.id):
                deleted += 1

        logger.info(f"Deleted {deleted} mobile apps of tenant {tenant_id}")
        return deleted

    async def save_registrations(
        self, mobile_app_id: UUID, registration_ids: list[UUID]
    ) -> list[MobileAppOAuth2Registration]:
        self._write_bindings(mobile_app_id, registration_ids)
        return self._read_bindings(mobile_app_id)

    async def find_all_by_mobile_app_id(
        self, mobile_app_id: UUID
    ) -> list[MobileAppOAuth2Registration]:
        return self._read_bindings(mobile_app_id)

    async def find_all_registrations(self) -> list[MobileAppOAuth2Registration]:
        bindings = []
        for path in self.bindings_dir.glob("*.json"):
            bindings.extend(self._read_bindings(UUID(path.stem)))
        return bindings

    async def delete_registrations_by_registration_id(
        self, registration_id: UUID
    ) -> int:
        """Remove a registration from every application binding list."""
        removed = 0
        for path in self.bindings_dir.glob("*.json"):
            mobile_app_id = UUID(path.stem)
            bindings = self._read_bindings(mobile_app_id)
            remaining = [
                binding.registration_id
                for binding in bindings
                if binding.registration_id != registration_id
            ]
            if len(remaining) != len(bindings):
                removed += len(bindings) - len(remaining)
                self._write_bindings(mobile_app_id, remaining)
        return removed
