"""DNS and HTTPS reachability checks for custom domains."""

import asyncio
import socket

import httpx
from loguru import logger

from bytescart.domain.services.hosting_base import DomainProbeBase


class NetworkDomainProbe(DomainProbeBase):
    def __init__(self, timeout: float = 10.0):
        self.timeout = timeout

    async def resolve_ipv4(self, domain: str) -> list[str]:
        """IPv4 addresses of ``domain``; empty when resolution fails."""
        loop = asyncio.get_running_loop()
        try:
            infos = await loop.getaddrinfo(
                domain, None, family=socket.AF_INET, type=socket.SOCK_STREAM
            )
        except (socket.gaierror, UnicodeError) as e:
            logger.info(f"DNS lookup failed for {domain}: {e}")
            return []
        return sorted({info[4][0] for info in infos})

    async def points_to(self, domain: str, ip_address: str) -> bool:
        addresses = await self.resolve_ipv4(domain)
        if ip_address in addresses:
            logger.info(f"Domain {domain} points to {ip_address}")
            return True
        logger.info(
            f"Domain {domain} does not point to {ip_address} (got {', '.join(addresses) or 'nothing'})"
        )
        return False

    async def is_accessible(self, domain: str) -> bool:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, follow_redirects=True
            ) as client:
                response = await client.head(f"https://{domain}")
        except httpx.HTTPError as e:
            logger.info(f"Domain {domain} is not accessible: {type(e).__name__}")
            return False

        accessible = 200 <= response.status_code < 400
        logger.info(f"Domain {domain} answered HTTP {response.status_code}")
        return accessible
