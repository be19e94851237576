"""
Server actions called by the store dashboard.

All actions require a signed-in user. Mutations answer with an
``ActionResult``; store creation redirects to the dashboard instead.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import RedirectResponse

from bytescart.api.v1.actions.request import (
    CreateStoreRequest,
    ProductRequest,
    ReorderShippingLocationsRequest,
    ShippingLocationRequest,
    UpdateDomainRequest,
    UpdateStoreSettingsRequest,
)
from bytescart.api.v1.actions.response import OrdersResponse, OrderStatsResponse
from bytescart.api.v1.actions.services import (
    ActionContext,
    OrderQueries,
    OrderRange,
    ProductActions,
    ShippingActions,
    StoreActions,
    StripeActions,
    require_user,
)
from bytescart.di import (
    AuditLoggerDep,
    CurrentUserDep,
    HostingProviderDep,
    OrderRepositoryDep,
    PaymentProcessorDep,
    ProductRepositoryDep,
    SettingsDep,
    ShippingLocationRepositoryDep,
    StoreRepositoryDep,
    TagCacheDep,
)
from bytescart.domain.domains import DnsTargets
from bytescart.models import ActionResult, ErrorResponse
from bytescart.services.audit import get_request_ip

router = APIRouter()

_ERRORS = {
    401: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
}


# ============================================================================
# Action dependencies
# ============================================================================


def get_action_context(request: Request, user: CurrentUserDep) -> ActionContext:
    """Authenticated caller of an action (401 when signed out)."""
    return ActionContext(user=require_user(user), ip_address=get_request_ip(request))


ActionContextDep = Annotated[ActionContext, Depends(get_action_context)]


def get_store_actions(
    settings: SettingsDep,
    stores: StoreRepositoryDep,
    hosting: HostingProviderDep,
    audit: AuditLoggerDep,
    cache: TagCacheDep,
) -> StoreActions:
    return StoreActions(stores, hosting, audit, cache, DnsTargets.from_settings(settings))


def get_shipping_actions(
    stores: StoreRepositoryDep,
    locations: ShippingLocationRepositoryDep,
    audit: AuditLoggerDep,
    cache: TagCacheDep,
) -> ShippingActions:
    return ShippingActions(stores, locations, audit, cache)


def get_product_actions(
    stores: StoreRepositoryDep,
    products: ProductRepositoryDep,
    audit: AuditLoggerDep,
    cache: TagCacheDep,
) -> ProductActions:
    return ProductActions(stores, products, audit, cache)


def get_stripe_actions(
    stores: StoreRepositoryDep,
    payments: PaymentProcessorDep,
    audit: AuditLoggerDep,
    cache: TagCacheDep,
) -> StripeActions:
    return StripeActions(stores, payments, audit, cache)


def get_order_queries(
    stores: StoreRepositoryDep,
    orders: OrderRepositoryDep,
    cache: TagCacheDep,
) -> OrderQueries:
    return OrderQueries(stores, orders, cache)


StoreActionsDep = Annotated[StoreActions, Depends(get_store_actions)]
ShippingActionsDep = Annotated[ShippingActions, Depends(get_shipping_actions)]
ProductActionsDep = Annotated[ProductActions, Depends(get_product_actions)]
StripeActionsDep = Annotated[StripeActions, Depends(get_stripe_actions)]
OrderQueriesDep = Annotated[OrderQueries, Depends(get_order_queries)]


# ============================================================================
# Stores
# ============================================================================


@router.post(
    "/stores",
    status_code=status.HTTP_303_SEE_OTHER,
    responses={401: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def create_store(
    data: CreateStoreRequest,
    ctx: ActionContextDep,
    settings: SettingsDep,
    actions: StoreActionsDep,
) -> RedirectResponse:
    """Create the user's store and continue to the dashboard."""
    await actions.create_store(ctx, data)
    return RedirectResponse(
        url=f"{settings.app_url.rstrip('/')}/dashboard",
        status_code=status.HTTP_303_SEE_OTHER,
    )


@router.post("/stores/{store_id}/settings", response_model=ActionResult, responses=_ERRORS)
async def update_store_settings(
    store_id: str,
    data: UpdateStoreSettingsRequest,
    ctx: ActionContextDep,
    actions: StoreActionsDep,
) -> ActionResult:
    return await actions.update_settings(ctx, store_id, data)


@router.post(
    "/stores/{store_id}/domain",
    response_model=ActionResult,
    responses={**_ERRORS, 400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def update_store_domain(
    store_id: str,
    data: UpdateDomainRequest,
    ctx: ActionContextDep,
    actions: StoreActionsDep,
) -> ActionResult:
    """
    Set or remove the store's custom domain.

    Returns:
        The normalized domain, its status and the DNS records to create
    """
    return await actions.update_domain(ctx, store_id, data)


# ============================================================================
# Shipping locations
# ============================================================================


@router.post(
    "/stores/{store_id}/shipping-locations",
    response_model=ActionResult,
    responses=_ERRORS,
)
async def create_shipping_location(
    store_id: str,
    data: ShippingLocationRequest,
    ctx: ActionContextDep,
    actions: ShippingActionsDep,
) -> ActionResult:
    return await actions.create(ctx, store_id, data)


@router.post(
    "/stores/{store_id}/shipping-locations/reorder",
    response_model=ActionResult,
    responses=_ERRORS,
)
async def reorder_shipping_locations(
    store_id: str,
    data: ReorderShippingLocationsRequest,
    ctx: ActionContextDep,
    actions: ShippingActionsDep,
) -> ActionResult:
    return await actions.reorder(ctx, store_id, data.location_ids)


@router.post("/shipping-locations/{location_id}", response_model=ActionResult, responses=_ERRORS)
async def update_shipping_location(
    location_id: str,
    data: ShippingLocationRequest,
    ctx: ActionContextDep,
    actions: ShippingActionsDep,
) -> ActionResult:
    return await actions.update(ctx, location_id, data)


@router.post(
    "/shipping-locations/{location_id}/delete",
    response_model=ActionResult,
    responses=_ERRORS,
)
async def delete_shipping_location(
    location_id: str,
    ctx: ActionContextDep,
    actions: ShippingActionsDep,
) -> ActionResult:
    return await actions.delete(ctx, location_id)


# ============================================================================
# Products
# ============================================================================


@router.post("/stores/{store_id}/products", response_model=ActionResult, responses=_ERRORS)
async def create_product(
    store_id: str,
    data: ProductRequest,
    ctx: ActionContextDep,
    actions: ProductActionsDep,
) -> ActionResult:
    return await actions.create(ctx, store_id, data)


@router.post("/products/{product_id}", response_model=ActionResult, responses=_ERRORS)
async def update_product(
    product_id: str,
    data: ProductRequest,
    ctx: ActionContextDep,
    actions: ProductActionsDep,
) -> ActionResult:
    return await actions.update(ctx, product_id, data)


@router.post("/products/{product_id}/delete", response_model=ActionResult, responses=_ERRORS)
async def delete_product(
    product_id: str,
    ctx: ActionContextDep,
    actions: ProductActionsDep,
) -> ActionResult:
    return await actions.delete(ctx, product_id)


# ============================================================================
# Payments
# ============================================================================


@router.post("/stripe/disconnect", response_model=ActionResult, responses=_ERRORS)
async def disconnect_stripe(
    ctx: ActionContextDep,
    actions: StripeActionsDep,
) -> ActionResult:
    """Unlink the Stripe account from the user's store."""
    return await actions.disconnect(ctx)


# ============================================================================
# Orders
# ============================================================================


@router.get("/orders", response_model=OrdersResponse, responses=_ERRORS)
async def list_orders(
    ctx: ActionContextDep,
    queries: OrderQueriesDep,
    date_range: OrderRange = Query("30days", alias="range"),
    limit: int = Query(50, ge=1, le=100),
) -> OrdersResponse:
    """Recent orders of the user's store, newest first."""
    return await queries.list_orders(ctx.user, date_range, limit)


@router.get("/orders/stats", response_model=OrderStatsResponse, responses=_ERRORS)
async def order_stats(
    ctx: ActionContextDep,
    queries: OrderQueriesDep,
) -> OrderStatsResponse:
    return await queries.stats(ctx.user)
