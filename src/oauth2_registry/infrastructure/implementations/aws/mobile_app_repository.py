"""
AWS DynamoDB implementation for mobile application storage using PynamoDB ORM.
"""

from uuid import UUID

from oauth2_registry.core.logging import logger
from oauth2_registry.domain.models import MobileApp, MobileAppOAuth2Registration
from oauth2_registry.infrastructure.implementations.aws.models import (
    MobileAppModel,
    MobileAppRegistrationModel,
    configure_table,
)
from oauth2_registry.infrastructure.repositories.mobile_app_repository import (
    MobileAppRepository,
)


class AWSMobileAppRepository(MobileAppRepository):
    """AWS DynamoDB implementation of MobileAppRepository.

    Tables:
    - mobile apps: id (partition key); MobileAppTenantIndex, PkgNameIndex
    - mobile app registrations: mobile_app_id (partition) + registration_id (sort)
    """

    def __init__(
        self,
        table_name: str = "oauth2-mobile-apps",
        bindings_table_name: str = "oauth2-mobile-app-registrations",
        region_name: str = "eu-west-1",
        auto_create_table: bool = False,
    ):
        configure_table(MobileAppModel, table_name, region_name, auto_create_table)
        configure_table(
            MobileAppRegistrationModel,
            bindings_table_name,
            region_name,
            auto_create_table,
        )

        self.table_name = table_name
        self.bindings_table_name = bindings_table_name
        self.region_name = region_name

        logger.info(
            f"Initialized AWSMobileAppRepository (PynamoDB) with tables={table_name},"
            f"{bindings_table_name}, region={region_name}"
        )

    @staticmethod
    def _to_app(model: MobileAppModel) -> MobileApp:
        return MobileApp.model_validate_json(model.document)

    @staticmethod
    def _to_binding(model: MobileAppRegistrationModel) -> MobileAppOAuth2Registration:
        return MobileAppOAuth2Registration(
            mobile_app_id=UUID(model.mobile_app_id),
            registration_id=UUID(model.registration_id),
            position=int(model.position),
        )

    @staticmethod
    def _sorted(apps: list[MobileApp]) -> list[MobileApp]:
        return sorted(apps, key=lambda a: (a.created_time or 0, str(a.id)))

    def _delete_bindings(self, mobile_app_id: UUID) -> None:
        for binding in MobileAppRegistrationModel.query(str(mobile_app_id)):
            binding.delete()

    async def save(self, mobile_app: MobileApp) -> MobileApp:
        """Save mobile application to DynamoDB."""
        if mobile_app.id is None or mobile_app.tenant_id is None:
            raise ValueError("Mobile app id and tenant_id must be set before saving")

        try:
            MobileAppModel(
                id=str(mobile_app.id),
                tenant_id=str(mobile_app.tenant_id),
                pkg_name=mobile_app.pkg_name,
                created_time=mobile_app.created_time or 0,
                document=mobile_app.model_dump_json(),
            ).save()

            logger.debug(f"Saved mobile app: id={mobile_app.id}")
            return mobile_app

        except Exception as e:
            logger.error(f"Failed to save mobile app {mobile_app.id}: {e}")
            raise

    async def get(self, mobile_app_id: UUID) -> MobileApp | None:
        try:
            return self._to_app(MobileAppModel.get(str(mobile_app_id)))
        except MobileAppModel.DoesNotExist:
            return None

    async def delete(self, mobile_app_id: UUID) -> bool:
        try:
            model = MobileAppModel.get(str(mobile_app_id))
        except MobileAppModel.DoesNotExist:
            return False

        self._delete_bindings(mobile_app_id)
        model.delete()

        logger.debug(f"Deleted mobile app: id={mobile_app_id}")
        return True

    async def find_by_tenant_id(self, tenant_id: UUID) -> list[MobileApp]:
        return self._sorted(
            [
                self._to_app(model)
                for model in MobileAppModel.tenant_index.query(str(tenant_id))
            ]
        )

    async def find_by_pkg_name(self, pkg_name: str) -> MobileApp | None:
        for model in MobileAppModel.pkg_name_index.query(pkg_name, limit=1):
            return self._to_app(model)
        return None

    async def find_all(self) -> list[MobileApp]:
        try:
            return self._sorted([self._to_app(model) for model in MobileAppModel.scan()])
        except Exception as e:
            logger.error(f"Failed to list mobile apps: {e}")
            raise

    async def delete_by_tenant_id(self, tenant_id: UUID) -> int:
        deleted = 0
        for model in MobileAppModel.tenant_index.query(str(tenant_id)):
            self._delete_bindings(UUID(model.id))
            model.delete()
            deleted += 1

        logger.info(f"Deleted {deleted} mobile apps of tenant {tenant_id}")
        return deleted

    async def save_registrations(
        self, mobile_app_id: UUID, registration_ids: list[UUID]
    ) -> list[MobileAppOAuth2Registration]:
        try:
            self._delete_bindings(mobile_app_id)
            for position, registration_id in enumerate(registration_ids):
                MobileAppRegistrationModel(
                    mobile_app_id=str(mobile_app_id),
                    registration_id=str(registration_id),
                    position=position,
                ).save()
        except Exception as e:
            logger.error(
                f"Failed to bind registrations to mobile app {mobile_app_id}: {e}"
            )
            raise

        return await self.find_all_by_mobile_app_id(mobile_app_id)

    async def find_all_by_mobile_app_id(
        self, mobile_app_id: UUID
    ) -> list[MobileAppOAuth2Registration]:
        bindings = [
            self._to_binding(model)
            for model in MobileAppRegistrationModel.query(str(mobile_app_id))
        ]
        return sorted(bindings, key=lambda binding: binding.position)

    async def find_all_registrations(self) -> list[MobileAppOAuth2Registration]:
        return [self._to_binding(model) for model in MobileAppRegistrationModel.scan()]

    async def delete_registrations_by_registration_id(
        self, registration_id: UUID
    ) -> int:
        removed = 0
        for model in MobileAppRegistrationModel.registration_index.query(
            str(registration_id)
        ):
            model.delete()
            removed += 1
        return removed
