"""Run the relay with uvicorn."""

import uvicorn

from food_relay.config import Settings


def main(settings: Settings | None = None) -> None:
    """Serve the ASGI app on the configured port."""
    resolved_settings = settings or Settings()
    uvicorn.run("food_relay.api.asgi:app", host="0.0.0.0", port=resolved_settings.port)  # noqa: S104


if __name__ == "__main__":
    main()
