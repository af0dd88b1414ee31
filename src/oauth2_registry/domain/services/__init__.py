"""
Domain services - business logic and use cases.

Contains the OAuth2 client resolver and the access-control policy.
"""

from oauth2_registry.domain.services.access_control import (
    Authority,
    Operation,
    Resource,
    SecurityUser,
    check_permission,
)
from oauth2_registry.domain.services.client_resolver import (
    OAuth2ClientResolver,
    RegistrationSnapshot,
)

__all__ = [
    "Authority",
    "OAuth2ClientResolver",
    "Operation",
    "RegistrationSnapshot",
    "Resource",
    "SecurityUser",
    "check_permission",
]
