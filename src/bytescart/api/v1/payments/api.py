"""
Stripe Connect onboarding and storefront checkout endpoints.

The dashboard starts onboarding with ``/connect/initiate`` and Stripe sends
the browser back to ``/connect/callback``, which always ends on the payments
dashboard page with either ``success=true`` or an ``error`` message.

Storefronts open a hosted checkout with ``/checkout``. Paid sessions become
orders through the signed ``/webhook`` or through ``/verify-session`` after
the customer is redirected back.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Header, Query, Request
from fastapi.responses import RedirectResponse

from bytescart.api.v1.payments.request import CheckoutRequest, VerifySessionRequest
from bytescart.api.v1.payments.response import (
    CheckoutResponse,
    ConnectInitiateResponse,
    VerifySessionResponse,
    WebhookResponse,
)
from bytescart.api.v1.payments.services import ConnectService
from bytescart.api.v1.payments.services.checkout import CheckoutService
from bytescart.core.logging import logger
from bytescart.di import (
    AuditLoggerDep,
    CurrentUserDep,
    OrderRepositoryDep,
    PaymentProcessorDep,
    ProductRepositoryDep,
    SettingsDep,
    StoreRepositoryDep,
    TagCacheDep,
)
from bytescart.domain.services.payment_base import PaymentProviderError
from bytescart.exception_handlers import RouteError
from bytescart.models import ErrorResponse, StoreIdRequest
from bytescart.services.audit import get_request_ip

router = APIRouter()


@router.post(
    "/connect/initiate",
    response_model=ConnectInitiateResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def connect_initiate(
    settings: SettingsDep,
    user: CurrentUserDep,
    stores: StoreRepositoryDep,
    payments: PaymentProcessorDep,
    audit: AuditLoggerDep,
    cache: TagCacheDep,
    body: StoreIdRequest | None = None,
) -> ConnectInitiateResponse:
    """
    Start Stripe Connect onboarding for a store the user owns.

    Returns:
        Authorization URL the dashboard navigates to
    """
    if user is None:
        raise RouteError(401, "Not authenticated")

    store_id = body.store_id if body else None
    if not store_id:
        raise RouteError(400, "Store ID is required")

    store = await stores.get_owned(store_id, user.id)
    if store is None:
        raise RouteError(403, "Store not found or unauthorized")

    service = ConnectService(settings, stores, payments, audit, cache)
    try:
        url = service.create_authorize_url(store.id, user.id)
    except PaymentProviderError as e:
        logger.error(f"Error initiating Stripe Connect for store {store.id}: {e}")
        raise RouteError(500, "Failed to initiate Stripe Connect") from e

    return ConnectInitiateResponse(url=url)


@router.get("/connect/callback")
async def connect_callback(
    request: Request,
    settings: SettingsDep,
    stores: StoreRepositoryDep,
    payments: PaymentProcessorDep,
    audit: AuditLoggerDep,
    cache: TagCacheDep,
    code: str | None = Query(None, description="Authorization code"),
    state: str | None = Query(None, description="Signed state"),
    error: str | None = Query(None, description="Error reported by Stripe"),
    error_description: str | None = Query(None, description="Error details"),
) -> RedirectResponse:
    """
    Connect callback called by Stripe.

    Redirects to the payments dashboard in every case.
    """
    service = ConnectService(settings, stores, payments, audit, cache)

    if error:
        logger.warning(f"Stripe Connect returned an error: {error}")
        return RedirectResponse(url=service.redirect_url(error=error_description or error))

    url = await service.complete(code, state, get_request_ip(request))
    return RedirectResponse(url=url)


# ============================================================================
# Storefront checkout
# ============================================================================


def get_checkout_service(
    settings: SettingsDep,
    stores: StoreRepositoryDep,
    products: ProductRepositoryDep,
    orders: OrderRepositoryDep,
    payments: PaymentProcessorDep,
    cache: TagCacheDep,
) -> CheckoutService:
    return CheckoutService(settings, stores, products, orders, payments, cache)


CheckoutServiceDep = Annotated[CheckoutService, Depends(get_checkout_service)]

_CHECKOUT_ERRORS = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.post("/checkout", response_model=CheckoutResponse, responses=_CHECKOUT_ERRORS)
async def create_checkout(
    service: CheckoutServiceDep,
    body: CheckoutRequest | None = None,
) -> CheckoutResponse:
    """
    Open a Stripe checkout session for a storefront cart.

    No sign-in is needed; prices are taken from the store's catalog.
    """
    try:
        session = await service.create_session(body or CheckoutRequest())
    except RouteError:
        raise
    except Exception as e:
        logger.exception(f"Error creating checkout session: {e}")
        raise RouteError(500, "Failed to create checkout session") from e

    return CheckoutResponse(url=session.url)


@router.post(
    "/webhook",
    response_model=WebhookResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def stripe_webhook(
    request: Request,
    service: CheckoutServiceDep,
    stripe_signature: str | None = Header(None, alias="stripe-signature"),
) -> WebhookResponse:
    """
    Receive Stripe events for connected accounts.

    The signature is checked against the raw body before anything is read
    from it. Handler failures answer 500 so Stripe retries the delivery.
    """
    event = service.parse_event(await request.body(), stripe_signature)

    try:
        await service.handle_event(event)
    except Exception as e:
        logger.exception(f"Error processing Stripe event {event.get('id')}: {e}")
        raise RouteError(500, "Webhook handler failed") from e

    return WebhookResponse(received=True)


@router.post(
    "/verify-session", response_model=VerifySessionResponse, responses=_CHECKOUT_ERRORS
)
async def verify_session(
    service: CheckoutServiceDep,
    body: VerifySessionRequest | None = None,
) -> VerifySessionResponse:
    """Make sure the order of a paid checkout session exists."""
    try:
        return await service.verify_session(body or VerifySessionRequest())
    except RouteError:
        raise
    except Exception as e:
        logger.exception(f"Error verifying checkout session: {e}")
        raise RouteError(500, "Failed to verify session") from e
