"""OpenAPI schema customization for the ByteScart Backend API."""

from typing import Any

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from pydantic.json_schema import models_json_schema

from bytescart.models.errors import ProblemDetail

DESCRIPTION = """
# ByteScart Backend API

Storefront and store-admin backend for ByteScart, a multi-tenant shop builder.

## Authentication

Dashboard endpoints read the auth provider access token from
`Authorization: Bearer <token>` or the `sb-access-token` cookie.
Storefront lookups are public.

## API Endpoints

### Health Check
- `GET /health` - Readiness check including the database
- `GET /health/public` - Liveness check

### Route handlers
- `POST /api/auth/signout` - Sign out and redirect to the login page
- `GET /api/stores/shipping-locations?storeId=` - Shipping destinations of a store
- `GET /api/stores/by-domain?domain=` - Store served on a custom domain
- `GET /api/domain-lookup?hostname=` - Store slug for a request host
- `POST /api/domains/check-status` - Verify a custom domain and advance its status
- `GET /api/stripe/account` - Connected Stripe account, balance and payouts
- `POST /api/payments/connect/initiate` - Start Stripe Connect onboarding
- `GET /api/payments/connect/callback` - Stripe Connect return URL
- `POST /api/payments/checkout` - Open a hosted checkout for a storefront cart
- `POST /api/payments/webhook` - Signed Stripe events that record and settle orders
- `POST /api/payments/verify-session` - Record the order of a paid checkout session

### Server actions
- `/actions/stores/...` - Store, settings, custom domain, shipping and products
- `/actions/products/...`, `/actions/shipping-locations/...` - Item updates and deletes
- `POST /actions/stripe/disconnect` - Unlink the Stripe account
- `GET /actions/orders`, `GET /actions/orders/stats` - Order views

## Error Handling

Route handlers and actions fail with a short message:

```json
{"error": "Store not found or unauthorized"}
```

Request validation and unexpected failures follow
[RFC 7807 Problem Details](https://datatracker.ietf.org/doc/html/rfc7807):

```json
{
  "type": "https://datatracker.ietf.org/doc/html/rfc7231#section-6.5.1",
  "title": "Validation Error",
  "status": 400,
  "detail": "One or more validation errors occurred (1 error).",
  "instance": "/actions/stores/abc/products",
  "errors": [
    {"type": "missing", "loc": ["body", "price"], "msg": "Field required", "input": {}}
  ]
}
```
"""

TAGS: list[dict[str, str]] = [
    {"name": "Health", "description": "Health check endpoints for monitoring"},
    {"name": "Auth", "description": "Session sign-out"},
    {"name": "Stores", "description": "Public store lookups for the storefront"},
    {"name": "Domains", "description": "Custom domain verification and host lookup"},
    {"name": "Stripe", "description": "Connected account status"},
    {"name": "Payments", "description": "Stripe Connect onboarding and storefront checkout"},
    {"name": "Actions", "description": "Authenticated dashboard mutations and order views"},
    {"name": "Skeletons", "description": "Static loading placeholders"},
]


def custom_openapi(app: FastAPI) -> dict[str, Any]:
    """Generate customized OpenAPI schema for the API.

    Args:
        app: The FastAPI application instance.

    Returns:
        Customized OpenAPI schema dictionary.
    """
    if app.openapi_schema:
        return app.openapi_schema

    openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description=DESCRIPTION,
        routes=app.routes,
    )

    openapi_schema["tags"] = TAGS

    components = openapi_schema.setdefault("components", {})
    _, problem_schemas = models_json_schema(
        [(ProblemDetail, "serialization")],
        ref_template="#/components/schemas/{model}",
    )
    components.setdefault("schemas", {}).update(problem_schemas.get("$defs", {}))

    components["securitySchemes"] = {
        "BearerAuth": {
            "type": "http",
            "scheme": "bearer",
            "description": "Auth provider access token",
        },
        "CookieAuth": {
            "type": "apiKey",
            "in": "cookie",
            "name": "sb-access-token",
            "description": "Auth provider session cookie",
        },
    }

    # Validation failures are reported as 400 Problem Details, not FastAPI's 422
    for path in openapi_schema.get("paths", {}).values():
        for operation in path.values():
            if isinstance(operation, dict) and "responses" in operation:
                responses = operation["responses"]
                if "422" in responses:
                    del responses["422"]
                    responses.setdefault(
                        "400",
                        {
                            "description": "Validation Error",
                            "content": {
                                "application/json": {
                                    "schema": {"$ref": "#/components/schemas/ProblemDetail"}
                                }
                            },
                        },
                    )

    app.openapi_schema = openapi_schema
    return app.openapi_schema


def configure_openapi(app: FastAPI) -> None:
    """Configure the FastAPI app to use custom OpenAPI schema.

    Args:
        app: The FastAPI application instance.
    """
    app.openapi = lambda: custom_openapi(app)  # type: ignore[method-assign]
