"""In-memory fakes for the service's ports."""

import copy
from fnmatch import fnmatchcase
from typing import Any, Dict, Iterable, List, Optional

from decks_service.application.ports import (
    CachePort,
    CardsServicePort,
    DeckQuery,
    DeckRepositoryPort,
    EventBusPort,
    EventHandler,
    ServiceRegistryPort,
)
from decks_service.domain.entities.deck import Deck, new_deck_id
from decks_service.domain.exceptions import (
    DeckAlreadyExistsError,
    DependencyUnavailableError,
)


class InMemoryDeckRepository(DeckRepositoryPort):
    """Dict-backed repository; keeps insertion order."""

    def __init__(self) -> None:
        self._decks: Dict[str, Deck] = {}
        self.create_calls = 0

    async def create(self, deck: Deck) -> Deck:
        self.create_calls += 1
        deck.id = deck.id or new_deck_id()
        if deck.id in self._decks:
            raise DeckAlreadyExistsError(deck.id)
        self._decks[deck.id] = copy.deepcopy(deck)
        return deck

    async def get_by_id(self, deck_id: str) -> Optional[Deck]:
        deck = self._decks.get(deck_id)
        return copy.deepcopy(deck) if deck else None

    def _matching(self, query: Optional[DeckQuery]) -> List[Deck]:
        decks = list(self._decks.values())
        if query is None:
            return decks
        if query.name is not None:
            decks = [d for d in decks if d.name == query.name]
        if query.search:
            decks = [d for d in decks if query.search.lower() in d.name.lower()]
        return decks

    async def find(self, query: DeckQuery) -> List[Deck]:
        decks = self._matching(query)
        for field_name, descending in reversed(query.sort):
            attr = "id" if field_name == "_id" else field_name
            decks.sort(key=lambda d: getattr(d, attr), reverse=descending)
        decks = decks[query.offset:]
        if query.limit is not None:
            decks = decks[: query.limit]
        return [copy.deepcopy(d) for d in decks]

    async def count(self, query: Optional[DeckQuery] = None) -> int:
        return len(self._matching(query))

    async def update(self, deck: Deck) -> Optional[Deck]:
        if deck.id not in self._decks:
            return None
        self._decks[deck.id] = copy.deepcopy(deck)
        return copy.deepcopy(deck)

    async def delete(self, deck_id: str) -> Optional[Deck]:
        return self._decks.pop(deck_id, None)


class FakeEventBus(EventBusPort):
    """Records emits and broadcasts; broadcasts reach local subscribers."""

    def __init__(self) -> None:
        self.emitted: List[tuple] = []
        self.broadcasts: List[tuple] = []
        self.handlers: Dict[str, List[EventHandler]] = {}
        self.closed = False

    async def emit(self, event: str, payload: Any) -> None:
        self.emitted.append((event, copy.deepcopy(payload)))

    async def broadcast(self, event: str, payload: Any = None) -> None:
        self.broadcasts.append((event, payload))
        for handler in self.handlers.get(event, []):
            await handler(event, payload)

    async def subscribe(self, channels: Iterable[str], handler: EventHandler) -> None:
        for channel in channels:
            self.handlers.setdefault(channel, []).append(handler)

    async def close(self) -> None:
        self.closed = True


class InMemoryCache(CachePort):
    def __init__(self) -> None:
        self.entries: Dict[str, Any] = {}
        self.cleaned: List[str] = []

    async def get(self, key: str) -> Optional[Any]:
        return copy.deepcopy(self.entries.get(key))

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        self.entries[key] = copy.deepcopy(value)

    async def clean(self, pattern: str = "**") -> int:
        self.cleaned.append(pattern)
        glob = pattern.replace("**", "*")
        keys = [key for key in self.entries if fnmatchcase(key, glob)]
        for key in keys:
            del self.entries[key]
        return len(keys)


class FakeCardsService(CardsServicePort):
    def __init__(self, cards: Optional[List[Dict[str, Any]]] = None) -> None:
        self.cards = list(cards or [])
        self.find_calls: List[Optional[Dict[str, Any]]] = []
        self.get_calls: List[str] = []
        self.find_error: Optional[Exception] = None

    async def find(self, query: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        self.find_calls.append(query)
        if self.find_error is not None:
            raise self.find_error
        return copy.deepcopy(self.cards)

    async def get(self, card_id: str) -> Optional[Dict[str, Any]]:
        self.get_calls.append(card_id)
        for card in self.cards:
            if card["_id"] == card_id:
                return copy.deepcopy(card)
        return None

    async def get_many(self, card_ids: List[str]) -> List[Dict[str, Any]]:
        resolved = [await self.get(card_id) for card_id in card_ids]
        return [card for card in resolved if card is not None]


class FakeServiceRegistry(ServiceRegistryPort):
    def __init__(self, available: bool = True) -> None:
        self.available = available
        self.waited_for: List[tuple] = []

    async def wait_for_services(
        self, names: Iterable[str], timeout: Optional[float] = None
    ) -> None:
        names = tuple(names)
        self.waited_for.append((names, timeout))
        if not self.available:
            raise DependencyUnavailableError(names, timeout)
