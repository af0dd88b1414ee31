"""AWS Lambda handler using Mangum adapter."""

from mangum import Mangum

from oauth2_registry.app_setup import build_app
from oauth2_registry.config import get_settings

app = build_app(get_settings())

lambda_handler = Mangum(app, lifespan="off")
