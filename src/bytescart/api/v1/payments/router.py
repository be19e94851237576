"""Payments API Routes - Route registration only."""

from fastapi import APIRouter

from bytescart.api.v1 import PAYMENTS_PREFIX
from bytescart.api.v1.payments import api

router = APIRouter()
router.include_router(api.router, prefix=PAYMENTS_PREFIX, tags=["Payments"])
