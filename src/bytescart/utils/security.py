"""
Security utilities for input sanitization and signed state.

Provides:
- HTML escaping and sanitization of theme values (colors, fonts, URLs)
- Random tokens and identifier validation
- Signing data with timestamps for tamper detection (OAuth state)
- Verifying Stripe webhook signatures
"""

import hashlib
import hmac
import re
import secrets
import time
import uuid
from html import escape
from typing import Any
from urllib.parse import urlparse

from itsdangerous import BadSignature, URLSafeTimedSerializer

from bytescart.config import get_settings

DEFAULT_HEX_COLOR = "#1A1A1A"
DEFAULT_FONT_FAMILY = "var(--font-inter), sans-serif"
SAFE_URL_SCHEMES = ("https", "http", "mailto")
EXTERNAL_URL_SCHEMES = ("https", "http")
DEFAULT_MAX_STRING_LENGTH = 1000
OAUTH_STATE_MAX_AGE = 600
WEBHOOK_TOLERANCE_SECONDS = 300

_HEX_COLOR_RE = re.compile(r"^#(?:[0-9A-Fa-f]{3}|[0-9A-Fa-f]{6})$")
_FONT_FAMILY_RE = re.compile(r"^[a-zA-Z0-9\s,'\"()\-]+$")
_FONT_FAMILY_BLOCKLIST_RE = re.compile(r"[{};]|url\s*\(", re.IGNORECASE)
_CUID_RE = re.compile(r"^c[a-z0-9]{24,}$")
_CUID2_RE = re.compile(r"^[a-z0-9]{20,}$")


def escape_html(value: str) -> str:
    """Escape ``& < > " '`` so the value is safe inside HTML text or attributes."""
    return escape(value, quote=True)


def sanitize_hex_color(color: str | None) -> str:
    """
    Validate a hex color (``#RGB`` or ``#RRGGBB``).

    Returns:
        The color itself when valid, otherwise the default theme color
    """
    if color and _HEX_COLOR_RE.match(color):
        return color
    return DEFAULT_HEX_COLOR


def sanitize_font_family(font: str | None) -> str:
    """
    Validate a CSS font-family value.

    Only letters, digits, whitespace, commas, quotes, parentheses and hyphens
    are accepted, and anything that could close a declaration or load a
    resource (``{``, ``}``, ``;``, ``url(``) is rejected.

    Returns:
        The font family when safe, otherwise the default font stack
    """
    if not font:
        return DEFAULT_FONT_FAMILY
    if _FONT_FAMILY_BLOCKLIST_RE.search(font):
        return DEFAULT_FONT_FAMILY
    if not _FONT_FAMILY_RE.match(font):
        return DEFAULT_FONT_FAMILY
    return font


def sanitize_url(url: str | None) -> str | None:
    """
    Allow only http, https and mailto URLs.

    Returns:
        The URL when its scheme is allowed, otherwise None
    """
    if not url:
        return None
    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return None
    if parsed.scheme.lower() not in SAFE_URL_SCHEMES:
        return None
    if parsed.scheme.lower() != "mailto" and not parsed.netloc:
        return None
    return url


def is_valid_external_url(url: str | None) -> bool:
    """Check that a URL is an absolute http(s) URL with a host."""
    if not url:
        return False
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme.lower() in EXTERNAL_URL_SCHEMES and bool(parsed.netloc)


def generate_secure_token(length: int = 32) -> str:
    """
    Generate a cryptographically secure random token.

    Args:
        length: Number of random bytes (the hex string is twice as long)

    Returns:
        str: Hex encoded token
    """
    return secrets.token_hex(length)


def generate_state() -> str:
    """Random nonce for the OAuth ``state`` parameter (32 bytes, URL-safe)."""
    return secrets.token_urlsafe(32)


def sanitize_string(value: str | None, max_length: int = DEFAULT_MAX_STRING_LENGTH) -> str:
    """Remove null bytes, trim whitespace and cap the length of user input."""
    if not value:
        return ""
    return value.replace("\x00", "").strip()[:max_length]


def is_valid_id(value: str | None) -> bool:
    """Check that a value looks like a database id (UUID, CUID or CUID2)."""
    if not value:
        return False
    try:
        uuid.UUID(value)
        return True
    except ValueError:
        pass
    return bool(_CUID_RE.match(value) or _CUID2_RE.match(value))


def create_serializer() -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(get_settings().secret_key)


def sign_data(data: dict[str, Any]) -> str:
    """Serialize ``data`` into a timestamped token signed with ``SECRET_KEY``."""
    return create_serializer().dumps(data)


def verify_signed_data(token: str, max_age: int = OAUTH_STATE_MAX_AGE) -> dict[str, Any] | None:
    """
    Load a token produced by sign_data().

    Returns:
        The signed payload, or None when the signature does not match or the
        token is older than ``max_age`` seconds
    """
    try:
        payload: dict[str, Any] = create_serializer().loads(token, max_age=max_age)
    except BadSignature:
        return None
    return payload


def create_oauth_state(data: dict[str, Any]) -> str:
    """Create a signed OAuth ``state`` parameter carrying ``data`` and a nonce."""
    return sign_data({**data, "nonce": generate_state()})


def verify_oauth_state(
    state: str | None, max_age: int = OAUTH_STATE_MAX_AGE
) -> dict[str, Any] | None:
    """
    Verify an OAuth ``state`` parameter.

    Returns:
        The data passed to create_oauth_state (without the nonce), or None
        when the state is missing, tampered with or expired
    """
    if not state:
        return None
    data = verify_signed_data(state, max_age=max_age)
    if data is None:
        return None
    data.pop("nonce", None)
    return data


def compute_webhook_signature(payload: bytes, timestamp: int | str, secret: str) -> str:
    """Hex HMAC-SHA256 of ``"{timestamp}.{payload}"``, as Stripe signs events."""
    signed = f"{timestamp}.".encode() + payload
    return hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()


def verify_webhook_signature(
    payload: bytes,
    header: str,
    secret: str,
    tolerance: int = WEBHOOK_TOLERANCE_SECONDS,
    now: float | None = None,
) -> bool:
    """
    Check a ``Stripe-Signature`` header against the raw request body.

    The header looks like ``t=1700000000,v1=<hex>,v1=<hex>``; any ``v1``
    entry may match. Signatures older than ``tolerance`` seconds are
    rejected to stop replays.

    Args:
        payload: Raw request body, exactly as received
        header: ``Stripe-Signature`` header value
        secret: Endpoint signing secret (``whsec_...``)
        tolerance: Maximum signature age in seconds
        now: Current Unix time; defaults to the system clock

    Returns:
        True if a signature matches and is fresh
    """
    timestamp = None
    signatures: list[str] = []
    for part in header.split(","):
        key, _, value = part.strip().partition("=")
        if key == "t":
            timestamp = value
        elif key == "v1" and value:
            signatures.append(value)

    if not timestamp or not timestamp.isdigit() or not signatures:
        return False

    current = time.time() if now is None else now
    if abs(current - int(timestamp)) > tolerance:
        return False

    expected = compute_webhook_signature(payload, timestamp, secret)
    return any(hmac.compare_digest(expected, signature) for signature in signatures)
