"""Mobile Application API Routes - Route registration only."""

from fastapi import APIRouter

from oauth2_registry.api.v1 import MOBILE_APP_PREFIX
from oauth2_registry.api.v1.mobile import api

router = APIRouter()
router.include_router(api.router, prefix=MOBILE_APP_PREFIX, tags=["Mobile Apps"])
