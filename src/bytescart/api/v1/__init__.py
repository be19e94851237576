"""
API v1 endpoints.

Route prefix constants for consistent API versioning.
"""

# JSON route handlers live under /api, server actions under /actions
API_V1_PREFIX: str = "/api"
ACTIONS_PREFIX: str = "/actions"

# Module-specific prefixes
AUTH_PREFIX: str = f"{API_V1_PREFIX}/auth"
STORES_PREFIX: str = f"{API_V1_PREFIX}/stores"
STRIPE_PREFIX: str = f"{API_V1_PREFIX}/stripe"
PAYMENTS_PREFIX: str = f"{API_V1_PREFIX}/payments"
DOMAINS_PREFIX: str = f"{API_V1_PREFIX}/domains"
SKELETONS_PREFIX: str = "/skeletons"

__all__ = [
    "API_V1_PREFIX",
    "ACTIONS_PREFIX",
    "AUTH_PREFIX",
    "STORES_PREFIX",
    "STRIPE_PREFIX",
    "PAYMENTS_PREFIX",
    "DOMAINS_PREFIX",
    "SKELETONS_PREFIX",
]
