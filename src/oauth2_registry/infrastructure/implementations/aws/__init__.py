"""AWS infrastructure implementations package."""

from oauth2_registry.infrastructure.implementations.aws.domain_repository import (
    AWSDomainRepository,
)
from oauth2_registry.infrastructure.implementations.aws.mobile_app_repository import (
    AWSMobileAppRepository,
)
from oauth2_registry.infrastructure.implementations.aws.registration_repository import (
    AWSRegistrationRepository,
)

__all__ = [
    "AWSDomainRepository",
    "AWSMobileAppRepository",
    "AWSRegistrationRepository",
]
