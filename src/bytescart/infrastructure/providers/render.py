"""
Hosting provider client for Render custom domains.

Registering a domain on the storefront service makes Render issue its TLS
certificate. Every call reports failures in the result instead of raising.
"""

from typing import Any
from urllib.parse import quote

import httpx
from loguru import logger

from bytescart.domain.services.hosting_base import HostingProviderBase, HostingResult

NOT_CONFIGURED = "Render API not configured"


class RenderHostingProvider(HostingProviderBase):
    def __init__(
        self,
        api_key: str,
        service_id: str,
        api_base: str = "https://api.render.com/v1",
        timeout: float = 10.0,
    ):
        self.api_key = api_key
        self.service_id = service_id
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self.api_key and self.service_id)

    def _domains_url(self, domain: str | None = None) -> str:
        url = f"{self.api_base}/services/{self.service_id}/custom-domains"
        if domain:
            url = f"{url}/{quote(domain, safe='')}"
        return url

    def _headers(self) -> dict[str, str]:
        return {
            "Accept": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

    async def _call(
        self, method: str, url: str, json: dict[str, Any] | None = None
    ) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.request(method, url, json=json, headers=self._headers())

    async def add_domain(self, domain: str) -> HostingResult:
        if not self.configured:
            logger.error("RENDER_API_KEY or RENDER_SERVICE_ID is not set")
            return HostingResult(success=False, error=NOT_CONFIGURED)

        logger.info(f"Adding domain {domain} to Render service {self.service_id}")
        try:
            response = await self._call("POST", self._domains_url(), json={"name": domain})
        except httpx.HTTPError as e:
            logger.error(f"Render add domain failed: {type(e).__name__}")
            return HostingResult(success=False, error=str(e) or type(e).__name__)

        if response.is_error:
            message = _error_message(response, "Failed to add domain")
            logger.error(f"Render rejected domain {domain}: {message}")
            return HostingResult(success=False, error=message)

        data = response.json()
        # Render answers with a list of created domains
        if isinstance(data, list):
            data = data[0] if data else {}
        return HostingResult(success=True, data=data)

    async def get_domain(self, domain: str) -> HostingResult:
        if not self.configured:
            return HostingResult(success=False, error=NOT_CONFIGURED)

        try:
            response = await self._call("GET", self._domains_url(domain))
        except httpx.HTTPError as e:
            return HostingResult(success=False, error=str(e) or type(e).__name__)

        if response.status_code == 404:
            return HostingResult(success=False, error="Domain not found on Render")
        if response.is_error:
            return HostingResult(
                success=False, error=_error_message(response, "Failed to get domain")
            )
        return HostingResult(success=True, data=response.json())

    async def remove_domain(self, domain: str) -> HostingResult:
        if not self.configured:
            return HostingResult(success=False, error=NOT_CONFIGURED)

        logger.info(f"Removing domain {domain} from Render")
        try:
            response = await self._call("DELETE", self._domains_url(domain))
        except httpx.HTTPError as e:
            return HostingResult(success=False, error=str(e) or type(e).__name__)

        if response.is_error and response.status_code != 404:
            return HostingResult(
                success=False, error=_error_message(response, "Failed to remove domain")
            )
        return HostingResult(success=True)


def _error_message(response: httpx.Response, fallback: str) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return f"{fallback} ({response.status_code})"
