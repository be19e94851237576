"""
Sign-out endpoint.

Sign-out is a POST from the dashboard form. The session is revoked with the
auth provider, the cookie is cleared and the browser is sent to the login
page. GET is rejected so a link or prefetch can never sign a user out.
"""

from fastapi import APIRouter, Request, status
from fastapi.responses import RedirectResponse

from bytescart.core.logging import logger
from bytescart.di import (
    AccessTokenDep,
    AuditLoggerDep,
    AuthProviderDep,
    CurrentUserDep,
    SettingsDep,
)
from bytescart.exception_handlers import RouteError
from bytescart.infrastructure.repositories.audit_repository import AuditAction
from bytescart.models import ErrorResponse
from bytescart.services.audit import AuditLogEntry, get_request_ip

router = APIRouter()


@router.post("/signout", status_code=status.HTTP_303_SEE_OTHER)
async def sign_out(
    request: Request,
    settings: SettingsDep,
    user: CurrentUserDep,
    token: AccessTokenDep,
    auth: AuthProviderDep,
    audit: AuditLoggerDep,
) -> RedirectResponse:
    """
    Sign the current user out.

    Records a SignOut audit entry when the request is authenticated, then
    redirects to the login page in every case.
    """
    if user is not None:
        await audit.log(
            AuditLogEntry(
                action=AuditAction.SIGN_OUT,
                actor_id=user.id,
                resource_type="Auth",
                ip_address=get_request_ip(request),
            )
        )

    if token:
        revoked = await auth.sign_out(token)
        if not revoked:
            logger.warning("Auth provider did not confirm sign-out")

    response = RedirectResponse(
        url=f"{settings.app_url.rstrip('/')}/login",
        status_code=status.HTTP_303_SEE_OTHER,
    )
    response.delete_cookie(settings.auth_cookie_name, path="/")
    return response


@router.get(
    "/signout",
    responses={405: {"model": ErrorResponse}},
)
async def sign_out_get() -> None:
    """Reject sign-out over GET."""
    raise RouteError(405, "Method not allowed", headers={"Allow": "POST"})
