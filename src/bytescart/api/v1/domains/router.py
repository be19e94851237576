"""Domains API Routes - Route registration only."""

from fastapi import APIRouter

from bytescart.api.v1 import API_V1_PREFIX, DOMAINS_PREFIX
from bytescart.api.v1.domains import api

router = APIRouter()
router.include_router(api.router, prefix=DOMAINS_PREFIX, tags=["Domains"])
router.include_router(api.lookup_router, prefix=API_V1_PREFIX, tags=["Domains"])
