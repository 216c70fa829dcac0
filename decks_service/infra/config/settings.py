"""
Application configuration settings.
"""

import socket
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=[".env", "../.env"],
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Application
    app_name: str = Field("decks", alias="APP_NAME")
    app_version: str = Field("1.0.0", alias="APP_VERSION")

    # Environment
    environment: str = Field("development", alias="ENVIRONMENT")
    debug: bool = Field(False, alias="DEBUG")

    # Server
    host: str = Field("0.0.0.0", alias="HOST")
    port: int = Field(8000, alias="PORT")
    node_id: str = Field(default_factory=socket.gethostname, alias="NODE_ID")

    # Database
    database_url: str = Field("sqlite+aiosqlite:///./decks.db", alias="DATABASE_URL")
    debug_sql: bool = Field(False, alias="DATABASE_ECHO")

    # Redis (event bus + response cache)
    redis_url: str = Field("redis://localhost:6379", alias="REDIS_URL")
    event_stream_maxlen: int = Field(10_000, alias="EVENT_STREAM_MAXLEN")

    # Mesh peers
    cards_service_url: str = Field("http://localhost:8001", alias="CARDS_SERVICE_URL")
    http_timeout: float = Field(10.0, alias="HTTP_TIMEOUT")

    # Startup seeding
    seed_enabled: bool = Field(True, alias="SEED_ENABLED")
    seed_startup_delay: float = Field(5.0, alias="SEED_STARTUP_DELAY")
    seed_dependency_timeout: float = Field(60.0, alias="SEED_DEPENDENCY_TIMEOUT")
    seed_poll_interval: float = Field(1.0, alias="SEED_POLL_INTERVAL")

    # Response cache
    cache_enabled: bool = Field(True, alias="CACHE_ENABLED")
    cache_ttl: int = Field(300, alias="CACHE_TTL")
    cache_prefix: str = Field("cache:", alias="CACHE_PREFIX")
    cache_clean_events: str = Field(
        "cache.clean.decks,cache.clean.cards", alias="CACHE_CLEAN_EVENTS"
    )

    # CORS
    cors_origins: str = Field("*", alias="CORS_ORIGINS")

    # Logging
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_format: str = Field("json", alias="LOG_FORMAT")

    def get_cors_origins(self) -> List[str]:
        """Parse CORS origins from string."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",")]

    def get_seed_dependency_timeout(self) -> Optional[float]:
        """Seconds to wait for peer services; None waits forever."""
        if self.seed_dependency_timeout <= 0:
            return None
        return self.seed_dependency_timeout

    def get_cache_clean_events(self) -> List[str]:
        """Broadcast channels that invalidate this service's cached reads."""
        return [e.strip() for e in self.cache_clean_events.split(",") if e.strip()]


_settings = None


def get_settings() -> Settings:
    """Get settings instance (useful for dependency injection)."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
