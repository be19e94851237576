"""Exception handlers registered by the application factory.

Route handlers and server actions fail with RouteError, rendered as the
``{"error": message}`` body the dashboard expects. Everything else follows
RFC 7807 Problem Details for HTTP APIs.
"""

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from bytescart.core.logging import logger
from bytescart.models.errors import ProblemDetail, ValidationErrorDetail


class RouteError(Exception):
    """Expected failure of a route handler, returned as ``{"error": message}``."""

    def __init__(
        self,
        status_code: int,
        error: str,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(error)
        self.status_code = status_code
        self.error = error
        self.headers = headers


async def route_error_handler(
    request: Request, exc: RouteError
) -> JSONResponse:  # noqa: ASYNC100
    log = logger.warning if exc.status_code >= 500 else logger.info
    log(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.error}")

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.error},
        headers=exc.headers,
    )


async def http_exception_handler(
    request: Request, exc: HTTPException
) -> JSONResponse:  # noqa: ASYNC100
    """Render HTTPException as a ProblemDetail, keeping its headers (e.g. Allow)."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(f"HTTPException: {exc.status_code} - {exc.detail} ({request.method} {request.url.path})")

    problem_detail = ProblemDetail.for_status(
        exc.status_code,
        detail=str(exc.detail),
        instance=str(request.url.path),
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=problem_detail.model_dump(exclude_none=True),
        headers=exc.headers,
    )


async def general_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:  # noqa: ASYNC100
    """Log the traceback and answer 500 without leaking details."""
    logger.opt(exception=exc).error(
        f"Unexpected error: {type(exc).__name__} ({request.method} {request.url.path})"
    )

    problem_detail = ProblemDetail.for_status(
        500,
        detail="An unexpected error occurred. Please try again later.",
        instance=str(request.url.path),
    )

    return JSONResponse(
        status_code=500,
        content=problem_detail.model_dump(exclude_none=True),
    )


async def validation_exception_handler(  # noqa: ASYNC100
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Report request validation failures as 400 with one entry per field.

    FastAPI's default is 422; the dashboard treats every invalid input as a
    bad request.
    """
    raw_errors = exc.errors()
    logger.warning(
        f"Validation error: {len(raw_errors)} errors ({request.method} {request.url.path})"
    )

    errors = [
        ValidationErrorDetail(
            type=error["type"],
            loc=tuple(str(loc) for loc in error["loc"]),
            msg=error["msg"],
            input=error.get("input"),
            ctx=(
                {k: str(v) for k, v in error["ctx"].items()}
                if error.get("ctx")
                else None
            ),
        )
        for error in raw_errors
    ]

    noun = "error" if len(errors) == 1 else "errors"
    problem_detail = ProblemDetail.for_status(
        400,
        title="Validation Error",
        detail=f"One or more validation errors occurred ({len(errors)} {noun}).",
        instance=str(request.url.path),
        errors=errors,
    )

    return JSONResponse(
        status_code=400,
        content=problem_detail.model_dump(mode="json", exclude_none=True),
    )
