"""ASGI entry point: ``uvicorn bytescart.main:app`` or the ``bytescart`` script."""

from bytescart.app_setup import add_root_endpoint, setup_app
from bytescart.application import create_app
from bytescart.config import get_settings
from bytescart.core.logging import intercept_standard_logging

intercept_standard_logging()

app = create_app()
setup_app(app)
add_root_endpoint(app)


def run() -> None:
    """Serve the application with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "bytescart.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="info" if settings.debug else "warning",
    )


if __name__ == "__main__":
    run()
