"""
Mobile application endpoints.

Manages the mobile applications logins come from and the ordered OAuth2
clients offered to each of them.
"""

from uuid import UUID

from fastapi import APIRouter, Body, Query

from oauth2_registry.api.v1.mobile.request import MobileAppRequest
from oauth2_registry.di import CurrentUserDep, MobileAppServiceDep
from oauth2_registry.domain.models import MobileApp, MobileAppInfo
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


@router.post("", response_model=MobileApp, responses=ADMIN_RESPONSES)
async def save_mobile_app(
    mobile_app: MobileAppRequest,
    user: CurrentUserDep,
    service: MobileAppServiceDep,
    oauth2_client_ids: str | None = Query(
        None,
        alias="oauth2ClientIds",
        description="Comma-separated OAuth2 client ids to bind, in display order",
    ),
) -> MobileApp:
    """
    Creates a mobile app, or updates it when the body carries an id.

    The app secret is generated when the body does not carry one.
    """
    check_permission(user, Resource.MOBILE_APP, Operation.WRITE)
    return await service.save_mobile_app(
        mobile_app.to_mobile_app(), parse_id_list(oauth2_client_ids), user
    )


@router.get("/infos", response_model=list[MobileAppInfo], responses=ADMIN_RESPONSES)
async def get_tenant_mobile_app_infos(
    user: CurrentUserDep,
    service: MobileAppServiceDep,
) -> list[MobileAppInfo]:
    check_permission(user, Resource.MOBILE_APP, Operation.READ)
    return await service.find_mobile_app_infos(user.tenant_id)


@router.get(
    "/info/{mobile_app_id}", response_model=MobileAppInfo, responses=ADMIN_RESPONSES
)
async def get_mobile_app_info_by_id(
    mobile_app_id: UUID,
    user: CurrentUserDep,
    service: MobileAppServiceDep,
) -> MobileAppInfo:
    check_permission(user, Resource.MOBILE_APP, Operation.READ)
    return await service.get_mobile_app_info(mobile_app_id, user)


@router.put("/{mobile_app_id}/oauth2Clients", responses=ADMIN_RESPONSES)
async def update_mobile_app_oauth2_clients(
    mobile_app_id: UUID,
    user: CurrentUserDep,
    service: MobileAppServiceDep,
    oauth2_client_ids: list[UUID] = Body(
        ..., description="OAuth2 client ids in display order"
    ),
) -> None:
    """Replaces the OAuth2 clients bound to a mobile app."""
    check_permission(user, Resource.MOBILE_APP, Operation.WRITE)
    await service.update_mobile_app_registrations(
        mobile_app_id, oauth2_client_ids, user
    )


@router.delete("/{mobile_app_id}", responses=ADMIN_RESPONSES)
async def delete_mobile_app(
    mobile_app_id: UUID,
    user: CurrentUserDep,
    service: MobileAppServiceDep,
) -> None:
    check_permission(user, Resource.MOBILE_APP, Operation.DELETE)
    await service.delete_mobile_app(mobile_app_id, user)
