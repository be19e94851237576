"""Auth API Routes - Route registration only."""

from fastapi import APIRouter

from bytescart.api.v1 import AUTH_PREFIX
from bytescart.api.v1.auth import api

router = APIRouter()
router.include_router(api.router, prefix=AUTH_PREFIX, tags=["Auth"])
