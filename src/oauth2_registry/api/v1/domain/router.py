"""Domain API Routes - Route registration only."""

from fastapi import APIRouter

from oauth2_registry.api.v1 import DOMAIN_PREFIX
from oauth2_registry.api.v1.domain import api

router = APIRouter()
router.include_router(api.router, prefix=DOMAIN_PREFIX, tags=["Domains"])
