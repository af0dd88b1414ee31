"""Liveness probe used by load balancers and container orchestrators."""

from fastapi import APIRouter

from oauth2_registry import __version__
from oauth2_registry.config import get_settings
from oauth2_registry.models import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Report that the process is serving requests.

    The registry store is not contacted, so a slow DynamoDB table never
    fails the probe.
    """
    return HealthResponse(
        version=__version__, provider=get_settings().infrastructure_provider
    )
