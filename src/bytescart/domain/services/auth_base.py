"""
Abstract base class for the hosted authentication provider.

The backend never handles passwords. It receives the provider's access token
(bearer header or session cookie) and asks the provider who it belongs to.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class AuthUser:
    """Authenticated user as reported by the auth provider."""

    id: str
    email: str | None = None


class AuthProviderBase(ABC):
    """Contract for auth provider clients."""

    @abstractmethod
    async def get_user(self, access_token: str) -> AuthUser | None:
        """
        Resolve an access token to a user.

        Args:
            access_token: Token issued by the auth provider

        Returns:
            The user, or None when the token is invalid, expired or the
            provider is unreachable
        """
        pass

    @abstractmethod
    async def sign_out(self, access_token: str) -> bool:
        """
        Revoke the session behind an access token.

        Returns:
            True if the provider accepted the sign-out, False otherwise
        """
        pass
