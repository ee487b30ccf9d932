"""Tests for main module."""

from food_relay import main as main_module
from food_relay.config import Settings


def test_main_serves_asgi_app_on_configured_port(monkeypatch) -> None:
    calls: list[tuple[str, dict[str, object]]] = []
    monkeypatch.setattr(
        main_module.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs))
    )

    main_module.main(Settings(port=4321))

    assert calls == [("food_relay.api.asgi:app", {"host": "0.0.0.0", "port": 4321})]
