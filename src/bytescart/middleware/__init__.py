"""
Middleware to add trace_id to each request.

The trace_id allows tracking logs from the same HTTP request throughout
the application. An incoming ``X-Trace-ID`` from the edge is reused so a
request can be followed across services.
"""

import re
import uuid
from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from bytescart.core.logging import logger
from bytescart.core.trace_context import trace_id_context

TRACE_ID_HEADER = "X-Trace-ID"
_TRACE_ID_RE = re.compile(r"^[A-Za-z0-9\-_]{8,64}$")


def resolve_trace_id(request: Request) -> str:
    """Reuse a well-formed incoming trace id, otherwise generate one."""
    incoming = request.headers.get(TRACE_ID_HEADER)
    if incoming and _TRACE_ID_RE.match(incoming):
        return incoming
    return str(uuid.uuid4())


class TraceIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware that binds a trace_id to each request.

    Flow:
    1. Request arrives -> reuses or generates the trace_id
    2. Stores trace_id in contextvars
    3. All logs automatically include the trace_id
    4. Response includes X-Trace-ID header
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        trace_id = resolve_trace_id(request)
        token = trace_id_context.set(trace_id)

        logger.info(f"Request started: {request.method} {request.url.path}")

        try:
            response = await call_next(request)
            response.headers[TRACE_ID_HEADER] = trace_id
            logger.info(
                f"Request completed: {request.method} {request.url.path} - Status: {response.status_code}"  # noqa: E501
            )
            return response

        except Exception:
            logger.exception(f"Request failed: {request.method} {request.url.path}")
            raise

        finally:
            trace_id_context.reset(token)


from bytescart.middleware.security_headers import SecurityHeadersMiddleware  # noqa: E402

__all__ = ["TraceIDMiddleware", "SecurityHeadersMiddleware", "resolve_trace_id"]
