"""
Auth provider client for Supabase Auth (GoTrue REST API).

Only the two calls the backend needs are implemented: resolving an access
token to a user and revoking a session.
"""

import httpx
from loguru import logger

from bytescart.domain.services.auth_base import AuthProviderBase, AuthUser


class SupabaseAuthProvider(AuthProviderBase):
    """Supabase Auth over HTTP."""

    def __init__(self, base_url: str, anon_key: str, timeout: float = 5.0):
        """
        Initializes the auth client.

        Args:
            base_url: Supabase project URL (https://<project>.supabase.co)
            anon_key: Project anon key, sent as the ``apikey`` header
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.anon_key = anon_key
        self.timeout = timeout

    def _headers(self, access_token: str) -> dict[str, str]:
        return {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {access_token}",
        }

    async def get_user(self, access_token: str) -> AuthUser | None:
        if not self.base_url or not access_token:
            return None

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(
                    f"{self.base_url}/auth/v1/user",
                    headers=self._headers(access_token),
                )
        except httpx.HTTPError as e:
            logger.warning(f"Auth provider unreachable: {type(e).__name__}")
            return None

        if response.status_code != 200:
            logger.debug(f"Access token rejected by auth provider ({response.status_code})")
            return None

        data = response.json()
        user_id = data.get("id")
        if not user_id:
            return None
        return AuthUser(id=user_id, email=data.get("email"))

    async def sign_out(self, access_token: str) -> bool:
        if not self.base_url or not access_token:
            return False

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.base_url}/auth/v1/logout",
                    headers=self._headers(access_token),
                )
        except httpx.HTTPError as e:
            logger.warning(f"Auth provider sign-out failed: {type(e).__name__}")
            return False

        return response.status_code in (200, 204)
