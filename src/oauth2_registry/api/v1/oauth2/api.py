"""
OAuth2 client endpoints.

Public discovery of the login options available to a caller, and the
administrative management of OAuth2 client registrations.
"""

from uuid import UUID

from fastapi import APIRouter, Query, Request

from oauth2_registry.api.v1.oauth2.request import OAuth2RegistrationRequest
from oauth2_registry.core.logging import logger
from oauth2_registry.di import CurrentUserDep, OAuth2ClientServiceDep
from oauth2_registry.domain.models import (
    OAuth2ClientInfo,
    OAuth2Registration,
    OAuth2RegistrationInfo,
)
from oauth2_registry.domain.services import Operation, Resource, check_permission
from oauth2_registry.models import ProblemDetail
from oauth2_registry.utils.request import get_domain_name_and_port, get_scheme

public_router = APIRouter()
router = APIRouter()

ADMIN_RESPONSES: dict[int | str, dict] = {
    401: {"model": ProblemDetail},
    403: {"model": ProblemDetail},
    404: {"model": ProblemDetail},
}


@public_router.post(
    "/oauth2-clients",
    response_model=list[OAuth2ClientInfo],
)
@public_router.post(
    "/noauth/oauth2Clients",
    response_model=list[OAuth2ClientInfo],
    include_in_schema=False,
)
async def get_oauth2_clients(
    request: Request,
    service: OAuth2ClientServiceDep,
    pkg_name: str | None = Query(
        None,
        alias="pkgName",
        description="Mobile application package name; when set the domain is ignored",
    ),
    platform: str | None = Query(
        None,
        description="Platform to filter clients by (WEB, ANDROID, IOS); "
        "other values are ignored",
    ),
) -> list[OAuth2ClientInfo]:
    """
    Lists the OAuth2 clients a caller can log in with.

    The domain and port come from the forwarded headers or the request URL;
    the port is left out when it is the default one for the scheme.

    Args:
        request: Incoming request
        service: OAuth2 client service
        pkg_name: Mobile application package name
        platform: Platform hint

    Returns:
        Ordered login options, possibly empty
    """
    scheme = get_scheme(request)
    domain_and_port = get_domain_name_and_port(request)

    logger.debug(
        f"Executing get_oauth2_clients: [{scheme}][{domain_and_port}]"
        f"[{request.url.port}]"
    )
    for header, value in request.headers.items():
        if header != "authorization":
            logger.debug(f"Header: {header} {value}")

    return await service.get_oauth2_clients(
        pkg_name=pkg_name,
        platform=platform,
        domain_and_port=domain_and_port,
        scheme=scheme,
    )


@router.post("/client", response_model=OAuth2Registration, responses=ADMIN_RESPONSES)
async def save_oauth2_client(
    registration: OAuth2RegistrationRequest,
    user: CurrentUserDep,
    service: OAuth2ClientServiceDep,
) -> OAuth2Registration:
    """
    Creates a registration, or updates it when the body carries an id.

    The registration always belongs to the caller's tenant.
    """
    check_permission(user, Resource.OAUTH2_CLIENT, Operation.WRITE)
    return await service.save_registration(registration.to_registration(), user)


@router.get(
    "/client/infos",
    response_model=list[OAuth2RegistrationInfo],
    responses=ADMIN_RESPONSES,
)
async def find_tenant_oauth2_client_infos(
    user: CurrentUserDep,
    service: OAuth2ClientServiceDep,
) -> list[OAuth2RegistrationInfo]:
    """Lists the registrations of the caller's tenant."""
    check_permission(user, Resource.OAUTH2_CLIENT, Operation.READ)
    return await service.find_registration_infos(user.tenant_id)


@router.get(
    "/client/{registration_id}",
    response_model=OAuth2Registration,
    responses=ADMIN_RESPONSES,
)
async def get_oauth2_client_by_id(
    registration_id: UUID,
    user: CurrentUserDep,
    service: OAuth2ClientServiceDep,
) -> OAuth2Registration:
    """Gets a registration by id."""
    check_permission(user, Resource.OAUTH2_CLIENT, Operation.READ)
    return await service.get_registration(registration_id, user)


@router.delete("/client/{registration_id}", responses=ADMIN_RESPONSES)
async def delete_oauth2_client(
    registration_id: UUID,
    user: CurrentUserDep,
    service: OAuth2ClientServiceDep,
) -> None:
    """Deletes a registration and removes it from every domain and mobile app."""
    check_permission(user, Resource.OAUTH2_CLIENT, Operation.DELETE)
    await service.delete_registration(registration_id, user)


@router.get("/loginProcessingUrl", response_model=str, responses=ADMIN_RESPONSES)
async def get_login_processing_url(
    user: CurrentUserDep,
    service: OAuth2ClientServiceDep,
) -> str:
    """Returns the path identity providers redirect to after a login."""
    check_permission(user, Resource.OAUTH2_CLIENT, Operation.READ)
    return service.get_login_processing_url()
