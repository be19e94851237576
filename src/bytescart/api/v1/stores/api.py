"""
Public store lookups used by the storefront.

These endpoints are unauthenticated and read through the tag cache.
"""

from fastapi import APIRouter, Query

from bytescart.api.v1.stores.response import (
    DomainStore,
    ShippingLocationItem,
    ShippingLocationsResponse,
    StoreByDomainResponse,
)
from bytescart.di import ShippingLocationRepositoryDep, StoreRepositoryDep, TagCacheDep
from bytescart.domain.domains import lookup_candidates, normalize_domain
from bytescart.exception_handlers import RouteError
from bytescart.infrastructure.cache import CacheTags
from bytescart.models import ErrorResponse

router = APIRouter()


@router.get(
    "/shipping-locations",
    response_model=ShippingLocationsResponse,
    responses={400: {"model": ErrorResponse}},
)
async def shipping_locations(
    locations: ShippingLocationRepositoryDep,
    cache: TagCacheDep,
    store_id: str | None = Query(None, alias="storeId"),
) -> ShippingLocationsResponse:
    """
    List where a store ships to.

    Returns:
        Countries and cities ordered by the owner's sort order
    """
    if not store_id:
        raise RouteError(400, "Missing storeId")

    async def load() -> list[ShippingLocationItem]:
        rows = await locations.list_for_store(store_id)
        return [ShippingLocationItem(country=row.country, cities=row.cities) for row in rows]

    items = await cache.get_or_load(
        f"shipping-locations:{store_id}",
        [CacheTags.shipping_locations(store_id)],
        load,
    )
    return ShippingLocationsResponse(locations=items)


@router.get(
    "/by-domain",
    response_model=StoreByDomainResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def store_by_domain(
    stores: StoreRepositoryDep,
    cache: TagCacheDep,
    domain: str | None = Query(None),
) -> StoreByDomainResponse:
    """
    Resolve a custom domain to its store.

    Only stores whose domain is Live are returned.
    """
    if not domain:
        raise RouteError(400, "Domain parameter is required")

    candidates = lookup_candidates(domain)
    store = await cache.get_or_load(
        f"by-domain:{'|'.join(candidates)}",
        [CacheTags.domain(normalize_domain(domain))],
        lambda: stores.find_live_by_domain(candidates),
    )
    if store is None:
        raise RouteError(404, "Store not found for this domain")

    return StoreByDomainResponse(
        store=DomainStore(
            id=store.id,
            subdomain_slug=store.subdomain_slug,
            store_name=store.store_name,
            domain=store.domain,
            domain_status=store.domain_status,
        )
    )
