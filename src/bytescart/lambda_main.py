"""Serverless entry point; the function handler is ``bytescart.lambda_main.lambda_handler``."""

from mangum import Mangum

from bytescart.app_setup import add_root_endpoint, setup_app
from bytescart.application import create_app
from bytescart.core.logging import intercept_standard_logging

intercept_standard_logging()

app = create_app()
setup_app(app)
add_root_endpoint(app)

lambda_handler = Mangum(app, lifespan="auto")
