"""Skeletons API Routes - Route registration only."""

from fastapi import APIRouter

from bytescart.api.v1 import SKELETONS_PREFIX
from bytescart.api.v1.skeletons import api

router = APIRouter()
router.include_router(api.router, prefix=SKELETONS_PREFIX, tags=["Skeletons"])
