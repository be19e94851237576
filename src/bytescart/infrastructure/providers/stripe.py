"""
Payment processor client for Stripe (REST API).

Implements the connected-account reads and the Connect OAuth endpoints used
by store onboarding, plus the Checkout Sessions API for storefront payments.
Request bodies are form encoded, with nested fields flattened to Stripe's
``line_items[0][price_data][currency]`` form.
"""

from typing import Any
from urllib.parse import urlencode

import httpx
from loguru import logger

from bytescart.domain.services.payment_base import (
    CheckoutLineItem,
    CheckoutSession,
    ConnectedAccountGrant,
    PaymentProcessorBase,
    PaymentProviderError,
)


class StripePaymentProcessor(PaymentProcessorBase):
    """Stripe over HTTP, authenticated with the platform secret key."""

    def __init__(
        self,
        secret_key: str,
        connect_client_id: str,
        api_base: str = "https://api.stripe.com",
        connect_base: str = "https://connect.stripe.com",
        timeout: float = 10.0,
    ):
        self.secret_key = secret_key
        self.connect_client_id = connect_client_id
        self.api_base = api_base.rstrip("/")
        self.connect_base = connect_base.rstrip("/")
        self.timeout = timeout

    def _headers(self, account_id: str | None = None) -> dict[str, str]:
        headers = {"Authorization": f"Bearer {self.secret_key}"}
        if account_id:
            headers["Stripe-Account"] = account_id
        return headers

    async def _request(
        self,
        method: str,
        url: str,
        account_id: str | None = None,
        params: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        if not self.secret_key:
            raise PaymentProviderError("Stripe is not configured")

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.request(
                    method,
                    url,
                    params=params,
                    data=data,
                    headers=self._headers(account_id),
                )
        except httpx.HTTPError as e:
            raise PaymentProviderError(f"Stripe request failed: {type(e).__name__}") from e

        if response.is_error:
            raise PaymentProviderError(
                _error_message(response), status_code=response.status_code
            )
        try:
            return response.json()
        except ValueError as e:
            raise PaymentProviderError(
                "Stripe returned a non-JSON response", status_code=response.status_code
            ) from e

    async def get_account(self, account_id: str) -> dict[str, Any]:
        return await self._request("GET", f"{self.api_base}/v1/accounts/{account_id}")

    async def get_balance(self, account_id: str) -> dict[str, Any]:
        return await self._request(
            "GET", f"{self.api_base}/v1/balance", account_id=account_id
        )

    async def list_payouts(self, account_id: str, limit: int = 10) -> list[dict[str, Any]]:
        body = await self._request(
            "GET",
            f"{self.api_base}/v1/payouts",
            account_id=account_id,
            params={"limit": limit},
        )
        return list(body.get("data", []))

    def get_connect_authorize_url(self, state: str, redirect_uri: str) -> str:
        """
        Generates the Connect OAuth authorization URL.

        Args:
            state: Signed state identifying the store being connected
            redirect_uri: Callback URL registered with Stripe

        Returns:
            Authorization URL to redirect the store owner to

        Raises:
            PaymentProviderError: If the Connect client id is not configured
        """
        if not self.connect_client_id:
            raise PaymentProviderError("Stripe Connect client id is not configured")

        params = {
            "response_type": "code",
            "client_id": self.connect_client_id,
            "scope": "read_write",
            "redirect_uri": redirect_uri,
            "state": state,
        }
        return f"{self.connect_base}/oauth/authorize?{urlencode(params)}"

    async def exchange_connect_code(self, code: str) -> ConnectedAccountGrant:
        body = await self._request(
            "POST",
            f"{self.connect_base}/oauth/token",
            data={"grant_type": "authorization_code", "code": code},
        )
        account_id = body.get("stripe_user_id")
        if not account_id:
            raise PaymentProviderError("Failed to get Stripe account ID")

        return ConnectedAccountGrant(
            account_id=account_id,
            access_token=body.get("access_token") or "",
            refresh_token=body.get("refresh_token") or "",
        )

    async def deauthorize(self, account_id: str) -> bool:
        try:
            await self._request(
                "POST",
                f"{self.connect_base}/oauth/deauthorize",
                data={"client_id": self.connect_client_id, "stripe_user_id": account_id},
            )
        except PaymentProviderError as e:
            logger.warning(f"Stripe deauthorize failed for {account_id}: {e}")
            return False
        return True

    async def create_checkout_session(
        self,
        account_id: str,
        line_items: list[CheckoutLineItem],
        success_url: str,
        cancel_url: str,
        currency: str = "usd",
        customer_email: str | None = None,
        metadata: dict[str, str] | None = None,
    ) -> CheckoutSession:
        data: dict[str, Any] = {
            "mode": "payment",
            "payment_method_types": ["card"],
            "success_url": success_url,
            "cancel_url": cancel_url,
            "line_items": [
                {
                    "price_data": {
                        "currency": currency,
                        "product_data": {"name": item.name},
                        "unit_amount": item.unit_amount,
                    },
                    "quantity": item.quantity,
                }
                for item in line_items
            ],
            "metadata": metadata or {},
        }
        if customer_email:
            data["customer_email"] = customer_email

        body = await self._request(
            "POST",
            f"{self.api_base}/v1/checkout/sessions",
            account_id=account_id,
            data=flatten_form(data),
        )
        if not body.get("id"):
            raise PaymentProviderError("Stripe returned no checkout session id")
        return CheckoutSession(id=body["id"], url=body.get("url"))

    async def retrieve_checkout_session(
        self, account_id: str, session_id: str
    ) -> dict[str, Any]:
        return await self._request(
            "GET",
            f"{self.api_base}/v1/checkout/sessions/{session_id}",
            account_id=account_id,
        )


def flatten_form(data: dict[str, Any], prefix: str = "") -> dict[str, Any]:
    """
    Flatten nested dicts and lists into Stripe's bracketed form keys.

    >>> flatten_form({"metadata": {"storeId": "s1"}, "payment_method_types": ["card"]})
    {'metadata[storeId]': 's1', 'payment_method_types[0]': 'card'}
    """
    flat: dict[str, Any] = {}
    for key, value in data.items():
        name = f"{prefix}[{key}]" if prefix else str(key)
        if isinstance(value, dict):
            flat.update(flatten_form(value, name))
        elif isinstance(value, list):
            flat.update(flatten_form({str(i): item for i, item in enumerate(value)}, name))
        elif value is not None:
            flat[name] = value
    return flat


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"Stripe returned HTTP {response.status_code}"

    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    if isinstance(body, dict) and body.get("error_description"):
        return str(body["error_description"])
    return f"Stripe returned HTTP {response.status_code}"
