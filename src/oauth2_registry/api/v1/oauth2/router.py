"""OAuth2 Client API Routes - Route registration only."""

from fastapi import APIRouter

from oauth2_registry.api.v1 import OAUTH2_PREFIX
from oauth2_registry.api.v1.oauth2 import api

router = APIRouter()
router.include_router(api.public_router, tags=["OAuth2 Discovery"])
router.include_router(api.router, prefix=OAUTH2_PREFIX, tags=["OAuth2 Clients"])
