"""Unit tests for environment-driven settings."""

from decks_service.infra.config.settings import Settings


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.app_name == "decks"
    assert settings.seed_startup_delay == 5.0
    assert settings.get_seed_dependency_timeout() == 60.0
    assert settings.get_cache_clean_events() == ["cache.clean.decks", "cache.clean.cards"]


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("SEED_DEPENDENCY_TIMEOUT", "12.5")
    monkeypatch.setenv("CARDS_SERVICE_URL", "http://cards:9000")
    monkeypatch.setenv("CACHE_CLEAN_EVENTS", "cache.clean.decks, ")
    monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test")

    settings = Settings(_env_file=None)

    assert settings.get_seed_dependency_timeout() == 12.5
    assert settings.cards_service_url == "http://cards:9000"
    assert settings.get_cache_clean_events() == ["cache.clean.decks"]
    assert settings.get_cors_origins() == ["http://a.test", "http://b.test"]


def test_zero_timeout_waits_forever():
    settings = Settings(_env_file=None, seed_dependency_timeout=0)

    assert settings.get_seed_dependency_timeout() is None
