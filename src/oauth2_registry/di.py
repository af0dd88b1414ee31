"""
Dependency injection container for the OAuth2 client registry.

This module provides centralized dependency injection using FastAPI's Depends
with typing.Annotated for clean type hints throughout the application.
"""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from oauth2_registry.api.v1.domain.services import DomainService
from oauth2_registry.api.v1.mobile.services import MobileAppService
from oauth2_registry.api.v1.oauth2.services import OAuth2ClientService
from oauth2_registry.config import Settings, get_settings
from oauth2_registry.core.logging import logger
from oauth2_registry.domain.services import Authority, SecurityUser
from oauth2_registry.infrastructure import InfrastructureFactory
from oauth2_registry.utils.security import verify_access_token

# ============================================================================
# Settings Dependencies
# ============================================================================

SettingsDep = Annotated[Settings, Depends(get_settings)]
"""Injected Settings instance (cached via lru_cache)."""


# ============================================================================
# Infrastructure Dependencies
# ============================================================================


def get_infrastructure_factory(
    settings: SettingsDep,
) -> InfrastructureFactory:
    """
    Get infrastructure factory from settings.

    Args:
        settings: Application settings (injected)

    Returns:
        Configured infrastructure factory
    """
    return InfrastructureFactory.from_settings(settings)


InfrastructureFactoryDep = Annotated[
    InfrastructureFactory, Depends(get_infrastructure_factory)
]
"""Injected InfrastructureFactory instance."""


# ============================================================================
# Authentication Dependencies
# ============================================================================

bearer_scheme = HTTPBearer(
    auto_error=False,
    scheme_name="BearerAuth",
    description="Signed administrative access token",
)


def get_current_user(
    settings: SettingsDep,
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ],
) -> SecurityUser:
    """
    Authenticate the caller from its bearer token.

    System administrators always act for the system tenant.

    Args:
        settings: Application settings (injected)
        credentials: Bearer credentials (injected)

    Returns:
        Authenticated caller

    Raises:
        HTTPException: 401 if the token is missing, malformed or invalid
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = verify_access_token(credentials.credentials)
    if user is None:
        logger.warning("Rejected invalid or expired access token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired access token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if user.authority is Authority.SYS_ADMIN:
        return SecurityUser(
            user_id=user.user_id,
            tenant_id=UUID(settings.system_tenant_id),
            authority=user.authority,
        )
    return user


CurrentUserDep = Annotated[SecurityUser, Depends(get_current_user)]
"""Injected authenticated caller."""


# ============================================================================
# Service Dependencies
# ============================================================================


def get_oauth2_client_service(
    settings: SettingsDep,
    factory: InfrastructureFactoryDep,
) -> OAuth2ClientService:
    """
    Get OAuth2 client service.

    Args:
        settings: Application settings (injected)
        factory: Infrastructure factory (injected)

    Returns:
        OAuth2 client service
    """
    return OAuth2ClientService(
        settings=settings,
        registration_repository=factory.get_registration_repository(),
        domain_repository=factory.get_domain_repository(),
        mobile_app_repository=factory.get_mobile_app_repository(),
    )


OAuth2ClientServiceDep = Annotated[
    OAuth2ClientService, Depends(get_oauth2_client_service)
]
"""Injected OAuth2ClientService."""


def get_domain_service(
    settings: SettingsDep, factory: InfrastructureFactoryDep
) -> DomainService:
    return DomainService(
        domain_repository=factory.get_domain_repository(),
        registration_repository=factory.get_registration_repository(),
        system_tenant_id=UUID(settings.system_tenant_id),
    )


DomainServiceDep = Annotated[DomainService, Depends(get_domain_service)]
"""Injected DomainService."""


def get_mobile_app_service(
    settings: SettingsDep, factory: InfrastructureFactoryDep
) -> MobileAppService:
    return MobileAppService(
        mobile_app_repository=factory.get_mobile_app_repository(),
        registration_repository=factory.get_registration_repository(),
        system_tenant_id=UUID(settings.system_tenant_id),
    )


MobileAppServiceDep = Annotated[MobileAppService, Depends(get_mobile_app_service)]
"""Injected MobileAppService."""
