"""Dependency injection container."""

from typing import Optional

import httpx
import redis.asyncio as redis

from decks_service.application.ports import (
    CachePort,
    CardsServicePort,
    DeckRepositoryPort,
    EventBusPort,
    ServiceRegistryPort,
)
from decks_service.application.services.deck_seeder import DeckSeeder
from decks_service.application.services.deck_service import DeckService
from decks_service.data.repositories.deck_repository import SqlDeckRepository
from decks_service.infra.cache.cache_cleaner import CacheCleaner
from decks_service.infra.cache.response_cache import RedisResponseCache
from decks_service.infra.clients.cards_client import CardsClient
from decks_service.infra.clients.service_registry import ServiceRegistry
from decks_service.infra.config.database import Database
from decks_service.infra.config.logging_config import get_logger
from decks_service.infra.config.settings import Settings
from decks_service.infra.messaging.event_bus import RedisEventBus
from decks_service.infra.messaging.redis_client import create_redis_client


class Container:
    """Wires the service's collaborators and owns their lifecycle.

    Any collaborator can be passed in to replace the default adapter.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        database: Optional[Database] = None,
        repository: Optional[DeckRepositoryPort] = None,
        event_bus: Optional[EventBusPort] = None,
        cache: Optional[CachePort] = None,
        cards: Optional[CardsServicePort] = None,
        registry: Optional[ServiceRegistryPort] = None,
    ):
        self.settings = settings
        self._log = get_logger("infra.container")
        self._redis: Optional[redis.Redis] = None
        self._http_client: Optional[httpx.AsyncClient] = None

        self.database = database or Database(settings.database_url, echo=settings.debug_sql)
        self.repository = repository or SqlDeckRepository(self.database)
        self.event_bus = event_bus or RedisEventBus(
            self._redis_client(),
            node_id=settings.node_id,
            stream_maxlen=settings.event_stream_maxlen,
        )
        if cache is None and settings.cache_enabled:
            cache = RedisResponseCache(
                self._redis_client(), prefix=settings.cache_prefix, ttl=settings.cache_ttl
            )
        self.cache = cache
        self.cards = cards or CardsClient(self._cards_http_client())
        self.registry = registry or ServiceRegistry(
            self._shared_http_client(),
            {"cards": settings.cards_service_url},
            poll_interval=settings.seed_poll_interval,
        )

        self.deck_service = DeckService(
            repository=self.repository,
            event_bus=self.event_bus,
            cards=self.cards,
            cache=self.cache,
            name=settings.app_name,
        )
        self.seeder = DeckSeeder(
            deck_service=self.deck_service,
            repository=self.repository,
            cards=self.cards,
            registry=self.registry,
            event_bus=self.event_bus,
            cache=self.cache,
            service_name=settings.app_name,
            startup_delay=settings.seed_startup_delay,
            dependency_timeout=settings.get_seed_dependency_timeout(),
            enabled=settings.seed_enabled,
        )
        self.cache_cleaner = (
            CacheCleaner(
                self.event_bus,
                self.cache,
                service_name=settings.app_name,
                events=settings.get_cache_clean_events(),
            )
            if self.cache is not None
            else None
        )

    def _redis_client(self) -> redis.Redis:
        if self._redis is None:
            self._redis = create_redis_client(self.settings.redis_url)
        return self._redis

    def _shared_http_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.settings.http_timeout)
        return self._http_client

    def _cards_http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.settings.cards_service_url,
            timeout=self.settings.http_timeout,
        )

    async def startup(self) -> None:
        await self.database.initialize()
        await self.database.create_all()
        if self.cache_cleaner is not None:
            await self.cache_cleaner.start()
        # Storage is connected: kick off the one-time seeding workflow
        self.seeder.start()
        self._log.info("container.started")

    async def shutdown(self) -> None:
        await self.seeder.stop()
        await self.event_bus.close()
        if isinstance(self.cards, CardsClient):
            await self.cards.http_client.aclose()
        if self._http_client is not None:
            await self._http_client.aclose()
        if self._redis is not None:
            await self._redis.aclose()
        await self.database.close()
        self._log.info("container.stopped")
