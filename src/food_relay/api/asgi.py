"""ASGI entrypoint for the food relay API."""

from food_relay.api.app import create_app
from food_relay.containers import build_container

app = create_app(build_container())
