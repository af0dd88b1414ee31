"""Abstract repository interfaces for the registry store."""

from oauth2_registry.infrastructure.repositories.domain_repository import (
    DomainRepository,
)
from oauth2_registry.infrastructure.repositories.mobile_app_repository import (
    MobileAppRepository,
)
from oauth2_registry.infrastructure.repositories.registration_repository import (
    OAuth2RegistrationRepository,
)

__all__ = [
    "DomainRepository",
    "MobileAppRepository",
    "OAuth2RegistrationRepository",
]
