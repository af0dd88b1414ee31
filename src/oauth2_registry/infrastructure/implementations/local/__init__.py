"""Local file-based infrastructure implementations for development."""

from oauth2_registry.infrastructure.implementations.local.domain_repository import (
    LocalDomainRepository,
)
from oauth2_registry.infrastructure.implementations.local.mobile_app_repository import (
    LocalMobileAppRepository,
)
from oauth2_registry.infrastructure.implementations.local.registration_repository import (
    LocalRegistrationRepository,
)

__all__ = [
    "LocalDomainRepository",
    "LocalMobileAppRepository",
    "LocalRegistrationRepository",
]
