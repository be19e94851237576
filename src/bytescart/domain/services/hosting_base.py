"""
Abstract base classes for custom domain hosting.

Once a custom domain points at the platform, it is registered with the
hosting provider, which then issues the TLS certificate.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class HostingResult:
    """Outcome of a hosting provider call. Failures carry a message, never raise."""

    success: bool
    data: dict[str, Any] = field(default_factory=dict)
    error: str | None = None


class HostingProviderBase(ABC):
    """Contract for hosting provider clients."""

    @abstractmethod
    async def add_domain(self, domain: str) -> HostingResult:
        """Register a custom domain and start certificate issuance."""
        pass

    @abstractmethod
    async def get_domain(self, domain: str) -> HostingResult:
        """Fetch a registered domain's verification state."""
        pass

    @abstractmethod
    async def remove_domain(self, domain: str) -> HostingResult:
        """Unregister a custom domain. Unknown domains count as removed."""
        pass


class DomainProbeBase(ABC):
    """Checks whether a custom domain resolves to, and is served by, the platform."""

    @abstractmethod
    async def points_to(self, domain: str, ip_address: str) -> bool:
        """Whether any IPv4 address of ``domain`` equals ``ip_address``."""
        pass

    @abstractmethod
    async def is_accessible(self, domain: str) -> bool:
        """Whether ``https://{domain}`` answers with a 2xx or 3xx status."""
        pass
