"""Stripe API Routes - Route registration only."""

from fastapi import APIRouter

from bytescart.api.v1 import STRIPE_PREFIX
from bytescart.api.v1.stripe import api

router = APIRouter()
router.include_router(api.router, prefix=STRIPE_PREFIX, tags=["Stripe"])
