"""
Explicit access-control policy for administrative operations.

HTTP adapters authenticate the caller and then call ``check_permission``
before invoking any service operation that reads or mutates the registry.
"""

from dataclasses import dataclass
from enum import Enum
from uuid import UUID

from oauth2_registry.domain.exceptions import AccessDeniedError


class Authority(str, Enum):
    SYS_ADMIN = "SYS_ADMIN"
    TENANT_ADMIN = "TENANT_ADMIN"
    CUSTOMER_USER = "CUSTOMER_USER"


class Resource(str, Enum):
    OAUTH2_CLIENT = "OAUTH2_CLIENT"
    DOMAIN = "DOMAIN"
    MOBILE_APP = "MOBILE_APP"


class Operation(str, Enum):
    READ = "READ"
    WRITE = "WRITE"
    DELETE = "DELETE"


@dataclass(frozen=True)
class SecurityUser:
    """
    Authenticated caller.

    Attributes:
        user_id: Caller identifier
        tenant_id: Tenant the caller acts for
        authority: Granted authority
    """

    user_id: str
    tenant_id: UUID
    authority: Authority


# OAuth2 clients are managed by system administrators only; tenants bind the
# system tenant's clients to their own domains and apps.
_TENANT_ADMIN_PERMISSIONS: dict[Resource, set[Operation]] = {
    Resource.DOMAIN: {Operation.READ, Operation.WRITE, Operation.DELETE},
    Resource.MOBILE_APP: {Operation.READ, Operation.WRITE, Operation.DELETE},
}


def has_permission(
    user: SecurityUser,
    resource: Resource,
    operation: Operation,
    owner_tenant_id: UUID | None = None,
) -> bool:
    """
    Evaluate the policy without raising.

    Args:
        user: Authenticated caller
        resource: Resource type being accessed
        operation: Requested operation
        owner_tenant_id: Tenant owning the entity, when one is involved

    Returns:
        True if the operation is allowed
    """
    if user.authority is Authority.SYS_ADMIN:
        return True
    if user.authority is not Authority.TENANT_ADMIN:
        return False
    if operation not in _TENANT_ADMIN_PERMISSIONS.get(resource, set()):
        return False
    return owner_tenant_id is None or owner_tenant_id == user.tenant_id


def check_permission(
    user: SecurityUser,
    resource: Resource,
    operation: Operation,
    owner_tenant_id: UUID | None = None,
) -> None:
    """
    Enforce the policy.

    Raises:
        AccessDeniedError: If the operation is not allowed
    """
    if not has_permission(user, resource, operation, owner_tenant_id):
        raise AccessDeniedError()
