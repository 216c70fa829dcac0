"""
Purges cached deck reads when a cache-clean broadcast arrives.
"""

from typing import Any, List

from decks_service.application.ports import CachePort, EventBusPort
from decks_service.infra.config.logging_config import get_logger
from decks_service.infra.metrics import CACHE_CLEANS


class CacheCleaner:
    """Subscribes to ``cache.clean.*`` broadcasts and purges ``<service>.*`` keys.

    Deck reads can embed populated cards, so the cleaner listens to the cards
    service's channel as well as its own.
    """

    def __init__(
        self,
        event_bus: EventBusPort,
        cache: CachePort,
        service_name: str,
        events: List[str],
    ):
        self.event_bus = event_bus
        self.cache = cache
        self.service_name = service_name
        self.events = list(events)
        self._log = get_logger("infra.cache_cleaner")

    async def start(self) -> None:
        if not self.events:
            return
        await self.event_bus.subscribe(self.events, self.handle)
        self._log.info("cache_cleaner.start", events=self.events)

    async def handle(self, event: str, payload: Any = None) -> None:
        removed = await self.cache.clean(f"{self.service_name}.*")
        CACHE_CLEANS.labels(trigger=event).inc()
        self._log.info("cache_cleaner.clean", event_name=event, removed=removed)
