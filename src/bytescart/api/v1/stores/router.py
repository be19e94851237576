"""Stores API Routes - Route registration only."""

from fastapi import APIRouter

from bytescart.api.v1 import STORES_PREFIX
from bytescart.api.v1.stores import api

router = APIRouter()
router.include_router(api.router, prefix=STORES_PREFIX, tags=["Stores"])
