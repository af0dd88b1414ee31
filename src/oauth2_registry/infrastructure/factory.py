"""
Infrastructure factory for provider selection.

Selects appropriate repository implementations based on configuration:
- local: File-based storage for development
- aws: DynamoDB tables

Usage:
    from oauth2_registry.infrastructure import InfrastructureFactory
    from oauth2_registry.config import get_settings

    # Option 1: From settings
    settings = get_settings()
    factory = InfrastructureFactory.from_settings(settings)

    # Option 2: Manual configuration
    factory = InfrastructureFactory(provider="local", base_dir="/tmp/registry")

    # Get repositories
    registration_repo = factory.get_registration_repository()
    domain_repo = factory.get_domain_repository()
    mobile_app_repo = factory.get_mobile_app_repository()
"""

from typing import TYPE_CHECKING, Literal

from loguru import logger

from oauth2_registry.infrastructure.repositories import (
    DomainRepository,
    MobileAppRepository,
    OAuth2RegistrationRepository,
)

if TYPE_CHECKING:
    from oauth2_registry.config import Settings

InfrastructureProvider = Literal["local", "aws"]

DEFAULT_BASE_DIR = "./.registry"
DEFAULT_AWS_REGION = "eu-west-1"


class InfrastructureFactory:
    """
    Factory for creating infrastructure repository instances.

    Repositories are created lazily and cached, so every caller sharing
    a factory also shares the same repository objects.
    """

    def __init__(self, provider: InfrastructureProvider | None = None, **config):
        """
        Initialize infrastructure factory.

        Args:
            provider: Infrastructure provider ("local", "aws").
                     If None, uses "local" as default.
            **config: Provider-specific configuration options

        Raises:
            ValueError: If provider is not supported
        """
        if provider is None:
            provider = "local"

        if provider not in ("local", "aws"):
            raise ValueError(f"Unsupported provider: {provider}")

        self.provider = provider
        self.config = config
        self._registration_repository: OAuth2RegistrationRepository | None = None
        self._domain_repository: DomainRepository | None = None
        self._mobile_app_repository: MobileAppRepository | None = None

        logger.info(f"Initialized InfrastructureFactory with provider: {provider}")

    @classmethod
    def from_settings(cls, settings: "Settings") -> "InfrastructureFactory":
        """
        Create factory from Settings object.

        Args:
            settings: Application settings from config.py

        Returns:
            InfrastructureFactory configured from settings
        """
        config = {
            "base_dir": settings.infrastructure_base_dir,
            "aws_region": settings.aws_region,
            "registrations_table": settings.aws_registrations_table,
            "domains_table": settings.aws_domains_table,
            "domain_registrations_table": settings.aws_domain_registrations_table,
            "mobile_apps_table": settings.aws_mobile_apps_table,
            "mobile_app_registrations_table": settings.aws_mobile_app_registrations_table,
            "auto_create_resources": settings.auto_create_resources,
        }

        return cls(provider=settings.infrastructure_provider, **config)

    def get_registration_repository(self) -> OAuth2RegistrationRepository:
        """
        Get OAuth2 registration repository for configured provider.

        Returns:
            OAuth2RegistrationRepository implementation
        """
        if self._registration_repository is not None:
            return self._registration_repository

        if self.provider == "local":
            from oauth2_registry.infrastructure.implementations.local import (
                LocalRegistrationRepository,
            )

            self._registration_repository = LocalRegistrationRepository(
                base_dir=self.config.get("base_dir", DEFAULT_BASE_DIR)
            )

        else:
            from oauth2_registry.infrastructure.implementations.aws import (
                AWSRegistrationRepository,
            )

            self._registration_repository = AWSRegistrationRepository(
                table_name=self.config.get(
                    "registrations_table", "oauth2-registrations"
                ),
                region_name=self.config.get("aws_region", DEFAULT_AWS_REGION),
                auto_create_table=self.config.get("auto_create_resources", False),
            )

        return self._registration_repository

    def get_domain_repository(self) -> DomainRepository:
        """
        Get domain repository for configured provider.

        Returns:
            DomainRepository implementation
        """
        if self._domain_repository is not None:
            return self._domain_repository

        if self.provider == "local":
            from oauth2_registry.infrastructure.implementations.local import (
                LocalDomainRepository,
            )

            self._domain_repository = LocalDomainRepository(
                base_dir=self.config.get("base_dir", DEFAULT_BASE_DIR)
            )

        else:
            from oauth2_registry.infrastructure.implementations.aws import (
                AWSDomainRepository,
            )

            self._domain_repository = AWSDomainRepository(
                table_name=self.config.get("domains_table", "oauth2-domains"),
                bindings_table_name=self.config.get(
                    "domain_registrations_table", "oauth2-domain-registrations"
                ),
                region_name=self.config.get("aws_region", DEFAULT_AWS_REGION),
                auto_create_table=self.config.get("auto_create_resources", False),
            )

        return self._domain_repository

    def get_mobile_app_repository(self) -> MobileAppRepository:
        """
        Get mobile application repository for configured provider.

        Returns:
            MobileAppRepository implementation
        """
        if self._mobile_app_repository is not None:
            return self._mobile_app_repository

        if self.provider == "local":
            from oauth2_registry.infrastructure.implementations.local import (
                LocalMobileAppRepository,
            )

            self._mobile_app_repository = LocalMobileAppRepository(
                base_dir=self.config.get("base_dir", DEFAULT_BASE_DIR)
            )

        else:
            from oauth2_registry.infrastructure.implementations.aws import (
                AWSMobileAppRepository,
            )

            self._mobile_app_repository = AWSMobileAppRepository(
                table_name=self.config.get("mobile_apps_table", "oauth2-mobile-apps"),
                bindings_table_name=self.config.get(
                    "mobile_app_registrations_table",
                    "oauth2-mobile-app-registrations",
                ),
                region_name=self.config.get("aws_region", DEFAULT_AWS_REGION),
                auto_create_table=self.config.get("auto_create_resources", False),
            )

        return self._mobile_app_repository
