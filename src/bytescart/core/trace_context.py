"""Request-scoped context variables used by logging."""

import contextvars

# Set by TraceIDMiddleware for the lifetime of one request
trace_id_context: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "trace_id", default=None
)
