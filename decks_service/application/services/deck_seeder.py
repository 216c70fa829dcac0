"""
One-time startup seeding of the deck store.

Once storage is connected the seeder waits for the cards service, and when the
store holds no decks it creates a single "Base cards" deck from every known
card. Whatever happens, it then invalidates cached deck reads across the mesh.

The workflow runs as an asyncio task owned by the seeder. Failures never reach
a caller; they are logged and kept on the seeder so the health endpoint can
report them.
"""

import asyncio
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from decks_service.application.ports import (
    CachePort,
    CardsServicePort,
    DeckRepositoryPort,
    EventBusPort,
    ServiceRegistryPort,
)
from decks_service.application.services.deck_service import DeckService
from decks_service.domain.exceptions import (
    DeckAlreadyExistsError,
    DependencyUnavailableError,
)
from decks_service.domain.services.seed_builder import build_seed_deck
from decks_service.infra.config.logging_config import get_logger
from decks_service.infra.metrics import SEEDING_RUNS


class SeedingState(str, Enum):
    PENDING = "pending"
    DISABLED = "disabled"
    WAITING = "waiting"
    SEEDING = "seeding"
    SEEDED = "seeded"
    SKIPPED = "skipped"
    TIMED_OUT = "timed_out"
    FAILED = "failed"
    CANCELLED = "cancelled"


UNHEALTHY_STATES = {SeedingState.TIMED_OUT, SeedingState.FAILED}


class DeckSeeder:
    def __init__(
        self,
        deck_service: DeckService,
        repository: DeckRepositoryPort,
        cards: CardsServicePort,
        registry: ServiceRegistryPort,
        event_bus: EventBusPort,
        cache: Optional[CachePort] = None,
        *,
        service_name: str = "decks",
        dependencies: tuple = ("cards",),
        startup_delay: float = 5.0,
        dependency_timeout: Optional[float] = 60.0,
        enabled: bool = True,
    ):
        self.deck_service = deck_service
        self.repository = repository
        self.cards = cards
        self.registry = registry
        self.event_bus = event_bus
        self.cache = cache
        self.service_name = service_name
        self.dependencies = tuple(dependencies)
        self.startup_delay = startup_delay
        self.dependency_timeout = dependency_timeout
        self.enabled = enabled

        self.state = SeedingState.PENDING if enabled else SeedingState.DISABLED
        self.reason: Optional[str] = None
        self.error: Optional[str] = None
        self.seed_deck_id: Optional[str] = None
        self.finished_at: Optional[datetime] = None
        self._task: Optional[asyncio.Task] = None
        self._log = get_logger("service.seeder")

    # ---------- task lifecycle ----------

    def start(self) -> None:
        """Schedule the workflow off the request path; a no-op when disabled."""
        if not self.enabled:
            self._log.info("seed.disabled")
            return
        if self._task is not None:
            return
        self._task = asyncio.create_task(self.run(), name=f"{self.service_name}-seeder")

    async def stop(self) -> None:
        """Cancel the workflow if it is still running."""
        if self._task is None:
            return
        if not self._task.done():
            self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass

    async def wait(self) -> SeedingState:
        """Wait for a started workflow to finish."""
        if self._task is not None:
            await asyncio.shield(self._task)
        return self.state

    # ---------- workflow ----------

    async def run(self) -> SeedingState:
        try:
            self._set_state(SeedingState.WAITING)
            if self.startup_delay > 0:
                await asyncio.sleep(self.startup_delay)
            await self.registry.wait_for_services(
                self.dependencies, timeout=self.dependency_timeout
            )

            count = await self.repository.count()
            if count == 0:
                self._log.info("seed.start", reason="store empty")
                self._set_state(SeedingState.SEEDING)
                await self._seed()
            else:
                self._finish(SeedingState.SKIPPED, reason=f"{count} decks present")

            await self.event_bus.broadcast(f"cache.clean.{self.service_name}")
            if self.cache is not None:
                await self.cache.clean()
        except asyncio.CancelledError:
            self._finish(SeedingState.CANCELLED)
            raise
        except DependencyUnavailableError as e:
            self._finish(SeedingState.TIMED_OUT, error=e.message)
        except Exception as e:
            self._log.exception("seed.error", error=str(e))
            self._finish(SeedingState.FAILED, error=f"{type(e).__name__}: {e}")
        return self.state

    async def _seed(self) -> None:
        cards = await self.cards.find({})
        deck = build_seed_deck(cards)
        try:
            record = await self.deck_service.create(deck)
        except DeckAlreadyExistsError as e:
            # Another instance won the race for the reserved id
            self._finish(SeedingState.SKIPPED, reason=e.message)
            return

        self.seed_deck_id = record["_id"]
        self._log.info(
            "seed.done",
            deck_id=record["_id"],
            white_cards=len(record["whiteCards"]),
            black_cards=len(record["blackCards"]),
        )
        self._finish(SeedingState.SEEDED)

    # ---------- reporting ----------

    @property
    def healthy(self) -> bool:
        return self.state not in UNHEALTHY_STATES

    def status(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "reason": self.reason,
            "error": self.error,
            "deckId": self.seed_deck_id,
            "finishedAt": self.finished_at.isoformat() if self.finished_at else None,
        }

    def _set_state(self, state: SeedingState) -> None:
        self.state = state
        self._log.info("seed.state", state=state.value)

    def _finish(
        self,
        state: SeedingState,
        reason: Optional[str] = None,
        error: Optional[str] = None,
    ) -> None:
        self.state = state
        self.reason = reason
        self.error = error
        self.finished_at = datetime.now(timezone.utc)
        SEEDING_RUNS.labels(outcome=state.value).inc()
        if state in UNHEALTHY_STATES:
            self._log.error("seed.finished", state=state.value, error=error)
        else:
            self._log.info("seed.finished", state=state.value, reason=reason)
