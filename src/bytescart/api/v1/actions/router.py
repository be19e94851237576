"""Actions API Routes - Route registration only."""

from fastapi import APIRouter

from bytescart.api.v1 import ACTIONS_PREFIX
from bytescart.api.v1.actions import api

router = APIRouter()
router.include_router(api.router, prefix=ACTIONS_PREFIX, tags=["Actions"])
