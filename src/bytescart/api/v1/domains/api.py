"""
Custom domain endpoints.

``check-status`` is polled by the dashboard while a domain is being set up.
``domain-lookup`` is called by the storefront edge to map an incoming host
to a store slug, and must never fail loudly.
"""

import asyncio

from fastapi import APIRouter, BackgroundTasks, Query
from fastapi.responses import JSONResponse

from bytescart.api.v1.domains.response import DomainCheckResponse, DomainLookupResponse
from bytescart.api.v1.domains.services import DomainVerificationService
from bytescart.core.logging import logger
from bytescart.di import (
    CurrentUserDep,
    DomainProbeDep,
    HostingProviderDep,
    SettingsDep,
    StoreRepositoryDep,
    TagCacheDep,
)
from bytescart.domain.domains import DnsTargets, lookup_candidates, normalize_domain
from bytescart.exception_handlers import RouteError
from bytescart.infrastructure.cache import CacheTags
from bytescart.models import ErrorResponse, StoreIdRequest

router = APIRouter()
lookup_router = APIRouter()


@router.post(
    "/check-status",
    response_model=DomainCheckResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def check_status(
    background_tasks: BackgroundTasks,
    settings: SettingsDep,
    user: CurrentUserDep,
    stores: StoreRepositoryDep,
    hosting: HostingProviderDep,
    probe: DomainProbeDep,
    cache: TagCacheDep,
    body: StoreIdRequest | None = None,
) -> DomainCheckResponse:
    """
    Verify DNS for a store's custom domain and advance its status.

    Hosting registration, when due, runs as a background task after the
    response is sent.
    """
    if user is None:
        raise RouteError(401, "Not authenticated")

    store_id = body.store_id if body else None
    if not store_id:
        raise RouteError(400, "Store ID is required")

    try:
        store = await stores.get_owned(store_id, user.id)
        if store is None:
            raise RouteError(404, "Store not found or unauthorized")
        if not store.domain:
            raise RouteError(400, "No domain configured for this store")

        service = DomainVerificationService(
            stores, hosting, probe, cache, DnsTargets.from_settings(settings)
        )
        outcome = await service.check(store)
    except RouteError:
        raise
    except Exception as e:
        logger.exception(f"Error checking domain status for store {store_id}: {e}")
        raise RouteError(500, "Failed to check domain status") from e

    if outcome.register:
        background_tasks.add_task(
            service.register, store.id, store.domain, outcome.promote_on_register
        )
    return outcome.response


@lookup_router.get(
    "/domain-lookup",
    response_model=DomainLookupResponse,
    responses={400: {"model": DomainLookupResponse}},
)
async def domain_lookup(
    settings: SettingsDep,
    stores: StoreRepositoryDep,
    cache: TagCacheDep,
    hostname: str | None = Query(None),
) -> DomainLookupResponse | JSONResponse:
    """
    Map a request host to the slug of the store serving it.

    Returns ``{"slug": null}`` when nothing matches, when the lookup takes
    too long, or when it fails.
    """
    if not hostname:
        return JSONResponse(status_code=400, content={"slug": None})

    candidates = lookup_candidates(hostname)

    try:
        store = await asyncio.wait_for(
            cache.get_or_load(
                f"by-domain:{'|'.join(candidates)}",
                [CacheTags.domain(normalize_domain(hostname))],
                lambda: stores.find_live_by_domain(candidates),
            ),
            timeout=settings.domain_lookup_timeout_seconds,
        )
    except TimeoutError:
        logger.warning(f"Domain lookup for {hostname} timed out")
        return DomainLookupResponse(slug=None)
    except Exception as e:
        logger.error(f"Domain lookup for {hostname} failed: {e}")
        return DomainLookupResponse(slug=None)

    return DomainLookupResponse(slug=store.subdomain_slug if store else None)
