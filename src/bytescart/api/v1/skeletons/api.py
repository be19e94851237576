"""Loading placeholders served as HTML fragments."""

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

from bytescart.exception_handlers import RouteError
from bytescart.models import ErrorResponse
from bytescart.ui.skeletons import render_skeleton

router = APIRouter()


@router.get(
    "/{section}",
    response_class=HTMLResponse,
    responses={404: {"model": ErrorResponse}},
)
async def skeleton(section: str) -> HTMLResponse:
    """Placeholder markup for a dashboard or storefront section."""
    markup = render_skeleton(section)
    if markup is None:
        raise RouteError(404, f"Unknown skeleton section: {section}")
    return HTMLResponse(content=markup, headers={"Cache-Control": "public, max-age=3600"})
