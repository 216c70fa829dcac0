"""
Application ports - abstract interfaces for external dependencies.

These interfaces define the contracts that the deck lifecycle needs from
storage, the event bus, the response cache and the other mesh services.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Tuple

from decks_service.domain.entities.deck import Deck


@dataclass
class DeckQuery:
    """Filtering, ordering and paging applied by the repository."""

    name: Optional[str] = None
    search: Optional[str] = None
    sort: List[Tuple[str, bool]] = field(default_factory=list)  # (field, descending)
    limit: Optional[int] = None
    offset: int = 0


class DeckRepositoryPort(ABC):
    """Abstract repository interface for Deck persistence."""

    @abstractmethod
    async def create(self, deck: Deck) -> Deck:
        """Insert a deck, assigning an id when it has none."""
        pass

    @abstractmethod
    async def get_by_id(self, deck_id: str) -> Optional[Deck]:
        pass

    @abstractmethod
    async def find(self, query: DeckQuery) -> List[Deck]:
        pass

    @abstractmethod
    async def count(self, query: Optional[DeckQuery] = None) -> int:
        pass

    @abstractmethod
    async def update(self, deck: Deck) -> Optional[Deck]:
        """Replace the stored fields; None when the deck does not exist."""
        pass

    @abstractmethod
    async def delete(self, deck_id: str) -> Optional[Deck]:
        """Delete a deck and return the removed record, None when missing."""
        pass


EventHandler = Callable[[str, Any], Awaitable[None]]


class EventBusPort(ABC):
    """Abstract interface for mesh events."""

    @abstractmethod
    async def emit(self, event: str, payload: Any) -> None:
        """Balanced event: delivered to one instance of each subscribing service."""
        pass

    @abstractmethod
    async def broadcast(self, event: str, payload: Any = None) -> None:
        """Delivered to every instance of every subscribing service."""
        pass

    @abstractmethod
    async def subscribe(self, channels: Iterable[str], handler: EventHandler) -> None:
        """Start delivering broadcasts on ``channels`` to ``handler``."""
        pass

    @abstractmethod
    async def close(self) -> None:
        pass


class CachePort(ABC):
    """Abstract interface for the response cache."""

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        pass

    @abstractmethod
    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        pass

    @abstractmethod
    async def clean(self, pattern: str = "**") -> int:
        """Delete entries matching ``pattern``; returns the number removed."""
        pass


class CardsServicePort(ABC):
    """Abstract interface for the cards service actions."""

    @abstractmethod
    async def find(self, query: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        pass

    @abstractmethod
    async def get(self, card_id: str) -> Optional[Dict[str, Any]]:
        pass

    @abstractmethod
    async def get_many(self, card_ids: List[str]) -> List[Dict[str, Any]]:
        """Resolve ids in order, dropping ids that do not resolve."""
        pass


class ServiceRegistryPort(ABC):
    """Abstract interface for mesh service discovery."""

    @abstractmethod
    async def wait_for_services(
        self, names: Iterable[str], timeout: Optional[float] = None
    ) -> None:
        pass
