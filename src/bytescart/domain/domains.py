"""
Custom domain rules for storefronts.

Store owners can serve their storefront from their own domain. Whatever the
owner types in the dashboard is normalized to a canonical host name and
checked against a hostname policy before it is saved. Both functions are
total: they accept any input and never raise.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from bytescart.config import Settings


class DomainStatus(str, Enum):
    """Lifecycle of a custom domain, from submission to serving traffic."""

    PENDING = "Pending"
    VERIFYING = "Verifying"
    SECURING = "Securing"
    LIVE = "Live"


STATUS_MESSAGES: dict[DomainStatus, str] = {
    DomainStatus.PENDING: (
        "Domain added. Please add the DNS records below to your domain registrar."
    ),
    DomainStatus.VERIFYING: (
        "We're checking if your DNS records have propagated. "
        "This can take 15-60 minutes."
    ),
    DomainStatus.SECURING: (
        "DNS verified! We're generating your SSL certificate. "
        "Your store will be live in 2-5 minutes."
    ),
    DomainStatus.LIVE: "Your custom domain is live and secured with SSL!",
}

MIN_DOMAIN_LENGTH = 4
MAX_DOMAIN_LENGTH = 253

ERROR_REQUIRED = "Domain is required"
ERROR_CONSECUTIVE_DOTS = "Domain cannot have consecutive dots"
ERROR_IDN = "Invalid internationalized domain name"
ERROR_TOO_SHORT = "Domain is too short"
ERROR_TOO_LONG = "Domain is too long (max 253 characters)"
ERROR_FORMAT = "Invalid domain format. Use format like: example.com or my-store.co.uk"
ERROR_HYPHEN = "Domain labels cannot start or end with hyphens"

_SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.\-]*://")
_PATH_RE = re.compile(r"[/?#]")
_DOMAIN_RE = re.compile(
    r"^(?!-)[a-z0-9-]{1,63}(?<!-)"
    r"(\.[a-z0-9-]{1,63})*"
    r"\.([a-z]{2,63}|xn--[a-z0-9-]{1,59})$"
)


@dataclass(frozen=True)
class DomainValidation:
    """Outcome of validate_domain_format."""

    valid: bool
    error: str | None = None


@dataclass(frozen=True)
class DnsTargets:
    """DNS records an owner must create for their custom domain."""

    a_record_ip: str
    cname_target: str

    @classmethod
    def from_settings(cls, settings: "Settings") -> "DnsTargets":
        return cls(
            a_record_ip=settings.render_ip_address,
            cname_target=f"{settings.render_service_id}.onrender.com",
        )


def _normalize_once(value: str) -> str:
    value = value.strip().lower()
    value = _SCHEME_RE.sub("", value)
    value = _PATH_RE.split(value, maxsplit=1)[0]
    value = value.split(":", 1)[0]
    value = value.strip().rstrip(".")
    while value.startswith("www."):
        value = value[4:]
    return value


def normalize_domain(domain: object) -> str:
    """
    Canonicalize a user-supplied domain.

    Lowercases and trims the input, then removes any URL scheme, path, query,
    fragment, port, trailing root dot and leading ``www.`` labels. The steps
    are repeated until nothing changes, so the result is a fixed point:
    ``normalize_domain(normalize_domain(s)) == normalize_domain(s)``.

    Args:
        domain: Raw input, usually a string typed by the store owner

    Returns:
        Canonical host name, or "" for non-string input
    """
    if not isinstance(domain, str):
        return ""

    normalized = _normalize_once(domain)
    while True:
        again = _normalize_once(normalized)
        if again == normalized:
            return normalized
        normalized = again


def to_ascii_domain(domain: str) -> str | None:
    """
    Convert an internationalized domain to its IDNA (punycode) form.

    Returns:
        ASCII domain, or None when a label cannot be encoded
    """
    if domain.isascii():
        return domain
    try:
        return domain.encode("idna").decode("ascii")
    except UnicodeError:
        return None


def validate_domain_format(domain: object) -> DomainValidation:
    """
    Validate a domain against the custom domain policy.

    The domain is normalized first, so ``https://Shop.Example.com/`` is
    accepted. Internationalized names are validated on their punycode form.

    Args:
        domain: Raw input, usually a string typed by the store owner

    Returns:
        DomainValidation with ``valid`` and, when invalid, a user-facing error
    """
    if not isinstance(domain, str) or not domain.strip():
        return DomainValidation(valid=False, error=ERROR_REQUIRED)

    clean = normalize_domain(domain)
    if not clean:
        return DomainValidation(valid=False, error=ERROR_REQUIRED)

    if ".." in clean:
        return DomainValidation(valid=False, error=ERROR_CONSECUTIVE_DOTS)

    ascii_domain = to_ascii_domain(clean)
    if ascii_domain is None:
        return DomainValidation(valid=False, error=ERROR_IDN)

    if len(ascii_domain) < MIN_DOMAIN_LENGTH:
        return DomainValidation(valid=False, error=ERROR_TOO_SHORT)

    if len(ascii_domain) > MAX_DOMAIN_LENGTH:
        return DomainValidation(valid=False, error=ERROR_TOO_LONG)

    if not _DOMAIN_RE.match(ascii_domain):
        return DomainValidation(valid=False, error=ERROR_FORMAT)

    for label in ascii_domain.split("."):
        if label.startswith("-") or label.endswith("-"):
            return DomainValidation(valid=False, error=ERROR_HYPHEN)

    return DomainValidation(valid=True)


def get_status_message(status: DomainStatus | str) -> str:
    """User-friendly message for a domain status."""
    try:
        return STATUS_MESSAGES[DomainStatus(status)]
    except ValueError:
        return "Unknown status"


def lookup_candidates(raw: str) -> list[str]:
    """
    Stored domain values that may match a requested host.

    Stores may have saved either the bare or the ``www.`` form, and older
    rows may hold the raw value, so all three are tried.
    """
    normalized = normalize_domain(raw)
    candidates = [normalized, f"www.{normalized}", raw.strip()]
    return list(dict.fromkeys(c for c in candidates if c))
