"""Tests for configuration helpers."""

from food_relay.config import Settings, parse_allowed_origins


def test_parse_allowed_origins() -> None:
    assert parse_allowed_origins(None) == ["*"]
    assert parse_allowed_origins(" * ") == ["*"]
    assert parse_allowed_origins("https://a.test, https://b.test,") == [
        "https://a.test",
        "https://b.test",
    ]


def test_settings_read_environment(monkeypatch) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "env-key")
    monkeypatch.setenv("RATE_LIMIT", "5")
    monkeypatch.setenv("PORT", "8080")

    settings = Settings()

    assert settings.openai_api_key == "env-key"
    assert settings.rate_limit == 5
    assert settings.port == 8080
    assert settings.openai_model == "gpt-4o"
