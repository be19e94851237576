"""
Abstract base class for the payment processor.

Stores accept payments through connected accounts. The platform reads a
connected account's state and runs the Connect OAuth flow that links an
account to a store.

Storefront customers pay through checkout sessions opened on the store's
connected account.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


class PaymentProviderError(Exception):
    """Raised when the payment processor rejects a call or cannot be reached."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class ConnectedAccountGrant:
    """Result of exchanging a Connect authorization code."""

    account_id: str
    access_token: str = ""
    refresh_token: str = ""


@dataclass(frozen=True)
class CheckoutLineItem:
    """One product line of a checkout session; ``unit_amount`` is in cents."""

    name: str
    unit_amount: int
    quantity: int


@dataclass(frozen=True)
class CheckoutSession:
    id: str
    url: str | None = None


class PaymentProcessorBase(ABC):
    """Contract for payment processor clients."""

    @abstractmethod
    async def get_account(self, account_id: str) -> dict[str, Any]:
        """
        Retrieve a connected account.

        Raises:
            PaymentProviderError: If the call fails
        """
        pass

    @abstractmethod
    async def get_balance(self, account_id: str) -> dict[str, Any]:
        """
        Retrieve a connected account's balance.

        Raises:
            PaymentProviderError: If the call fails
        """
        pass

    @abstractmethod
    async def list_payouts(self, account_id: str, limit: int = 10) -> list[dict[str, Any]]:
        """
        List a connected account's most recent payouts.

        Raises:
            PaymentProviderError: If the call fails
        """
        pass

    @abstractmethod
    def get_connect_authorize_url(self, state: str, redirect_uri: str) -> str:
        """
        Build the URL that starts Connect onboarding.

        Args:
            state: Signed state parameter identifying the store
            redirect_uri: Callback URL registered with the processor
        """
        pass

    @abstractmethod
    async def exchange_connect_code(self, code: str) -> ConnectedAccountGrant:
        """
        Exchange a Connect authorization code for the connected account id.

        Raises:
            PaymentProviderError: If the exchange fails or returns no account
        """
        pass

    @abstractmethod
    async def deauthorize(self, account_id: str) -> bool:
        """
        Revoke the platform's access to a connected account.

        Returns:
            True if the processor confirmed the revocation
        """
        pass

    @abstractmethod
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
        """
        Open a hosted checkout session charged to a connected account.

        Raises:
            PaymentProviderError: If the session cannot be created
        """
        pass

    @abstractmethod
    async def retrieve_checkout_session(
        self, account_id: str, session_id: str
    ) -> dict[str, Any]:
        """
        Retrieve a checkout session created on a connected account.

        Raises:
            PaymentProviderError: If the call fails
        """
        pass
