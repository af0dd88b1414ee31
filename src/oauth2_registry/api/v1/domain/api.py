"""
Domain endpoints.

Manages the domains web logins come from and the ordered OAuth2 clients
offered on each of them.
"""

from uuid import UUID

from fastapi import APIRouter, Body, Query

from oauth2_registry.api.v1.domain.request import DomainRequest
from oauth2_registry.di import CurrentUserDep, DomainServiceDep
from oauth2_registry.domain.models import Domain, DomainInfo
from oauth2_registry.domain.services import Operation, Resource, check_permission
from oauth2_registry.models import ProblemDetail
from oauth2_registry.utils.request import parse_id_list

router = APIRouter()

ADMIN_RESPONSES: dict[int | str, dict] = {
    400: {"model": ProblemDetail},
    401: {"model": ProblemDetail},
    403: {"model": ProblemDetail},
    404: {"model": ProblemDetail},
}


@router.post("", response_model=Domain, responses=ADMIN_RESPONSES)
async def save_domain(
    domain: DomainRequest,
    user: CurrentUserDep,
    service: DomainServiceDep,
    oauth2_client_ids: str | None = Query(
        None,
        alias="oauth2ClientIds",
        description="Comma-separated OAuth2 client ids to bind, in display order",
    ),
) -> Domain:
    """
    Creates a domain, or updates it when the body carries an id.

    When ``oauth2ClientIds`` is given the bindings of the domain are replaced.
    """
    check_permission(user, Resource.DOMAIN, Operation.WRITE)
    return await service.save_domain(
        domain.to_domain(), parse_id_list(oauth2_client_ids), user
    )


@router.get("/infos", response_model=list[DomainInfo], responses=ADMIN_RESPONSES)
async def get_tenant_domain_infos(
    user: CurrentUserDep,
    service: DomainServiceDep,
) -> list[DomainInfo]:
    """Lists the domains of the caller's tenant with their OAuth2 clients."""
    check_permission(user, Resource.DOMAIN, Operation.READ)
    return await service.find_domain_infos(user.tenant_id)


@router.get("/info/{domain_id}", response_model=DomainInfo, responses=ADMIN_RESPONSES)
async def get_domain_info_by_id(
    domain_id: UUID,
    user: CurrentUserDep,
    service: DomainServiceDep,
) -> DomainInfo:
    """Gets a domain with its OAuth2 clients."""
    check_permission(user, Resource.DOMAIN, Operation.READ)
    return await service.get_domain_info(domain_id, user)


@router.put("/{domain_id}/oauth2Clients", responses=ADMIN_RESPONSES)
async def update_domain_oauth2_clients(
    domain_id: UUID,
    user: CurrentUserDep,
    service: DomainServiceDep,
    oauth2_client_ids: list[UUID] = Body(
        ..., description="OAuth2 client ids in display order"
    ),
) -> None:
    """Replaces the OAuth2 clients bound to a domain."""
    check_permission(user, Resource.DOMAIN, Operation.WRITE)
    await service.update_domain_registrations(domain_id, oauth2_client_ids, user)


@router.delete("/{domain_id}", responses=ADMIN_RESPONSES)
async def delete_domain(
    domain_id: UUID,
    user: CurrentUserDep,
    service: DomainServiceDep,
) -> None:
    """Deletes a domain and its bindings."""
    check_permission(user, Resource.DOMAIN, Operation.DELETE)
    await service.delete_domain(domain_id, user)
