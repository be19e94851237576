"""Stripe Connect account status for the payments dashboard."""

import math
from typing import Any

from fastapi import APIRouter, Request

from bytescart.di import CurrentUserDep, RateLimiterDep, SettingsDep, StripeAccountServiceDep
from bytescart.exception_handlers import RouteError
from bytescart.models import ErrorResponse
from bytescart.services.audit import get_request_ip
from bytescart.services.stripe_account import StripeAccountStatusError

router = APIRouter()


@router.get(
    "/account",
    responses={
        404: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def stripe_account(
    request: Request,
    settings: SettingsDep,
    user: CurrentUserDep,
    limiter: RateLimiterDep,
    service: StripeAccountServiceDep,
) -> dict[str, Any]:
    """
    Connected account, balance and recent payouts of the user's store.

    Rate limited per client IP because each call fans out to Stripe.
    """
    ip = get_request_ip(request)
    decision = limiter.check(
        f"stripe-account:{ip}",
        settings.stripe_account_rate_limit,
        settings.stripe_account_rate_window_seconds,
    )
    if not decision.allowed:
        raise RouteError(
            429,
            "Too many requests. Please try again later.",
            headers={"Retry-After": str(max(1, math.ceil(decision.reset_in)))},
        )

    try:
        status = await service.get_status(user)
    except StripeAccountStatusError as e:
        raise RouteError(500, "Failed to get Stripe account status") from e

    if status is None:
        raise RouteError(404, "Store not found or not authenticated")
    return status
