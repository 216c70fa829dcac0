"""
Deck service: CRUD actions, read-time population and lifecycle events.

Every successful mutation is republished on the event bus as
``<service>.created`` / ``<service>.updated`` / ``<service>.removed`` with the
affected record as payload, then the service's cached reads are invalidated
locally and across the mesh.
"""

import hashlib
import json
import math
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

from decks_service.application.ports import (
    CachePort,
    CardsServicePort,
    DeckQuery,
    DeckRepositoryPort,
    EventBusPort,
)
from decks_service.domain.entities.deck import Deck
from decks_service.domain.exceptions import DeckNotFoundError, InvalidQueryError
from decks_service.infra.config.logging_config import get_logger

# Record field -> cards action that resolves each id in it
POPULATES = {
    "whiteCards": "cards.get",
    "blackCards": "cards.get",
}


def cache_key(action: str, params: Dict[str, Any]) -> str:
    """Stable key for an action call, e.g. ``decks.get:3f2a...``."""
    normalized = json.dumps(params, sort_keys=True, default=str)
    digest = hashlib.sha1(normalized.encode("utf-8")).hexdigest()
    return f"{action}:{digest}"


def parse_csv(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def parse_sort(sort: Optional[str]) -> List[tuple]:
    """``"-name,_id"`` -> ``[("name", True), ("_id", False)]``."""
    return [
        (item[1:], True) if item.startswith("-") else (item, False)
        for item in parse_csv(sort)
    ]


class DeckService:
    def __init__(
        self,
        repository: DeckRepositoryPort,
        event_bus: EventBusPort,
        cards: CardsServicePort,
        cache: Optional[CachePort] = None,
        name: str = "decks",
    ):
        self.repository = repository
        self.event_bus = event_bus
        self.cards = cards
        self.cache = cache
        self.name = name
        self._log = get_logger("service.decks")

    # ---------- mutations ----------

    async def create(self, deck: Deck) -> Dict[str, Any]:
        created = await self.repository.create(deck)
        record = created.to_record()
        await self.entity_created(record)
        return record

    async def update(self, deck_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        deck = await self.repository.get_by_id(deck_id)
        if deck is None:
            raise DeckNotFoundError(deck_id)

        deck.apply_changes(changes)
        updated = await self.repository.update(deck)
        if updated is None:
            raise DeckNotFoundError(deck_id)

        record = updated.to_record()
        await self.entity_updated(record)
        return record

    async def remove(self, deck_id: str) -> Dict[str, Any]:
        removed = await self.repository.delete(deck_id)
        if removed is None:
            raise DeckNotFoundError(deck_id)

        record = removed.to_record()
        await self.entity_removed(record)
        return record

    # ---------- reads ----------

    async def get(
        self,
        deck_id: str,
        populate: Sequence[str] = (),
        fields: Sequence[str] = (),
    ) -> Dict[str, Any]:
        populate = self._check_populate(populate)

        async def load():
            deck = await self.repository.get_by_id(deck_id)
            if deck is None:
                raise DeckNotFoundError(deck_id)
            return await self._transform(deck.to_record(), populate, fields)

        params = {"id": deck_id, "populate": populate, "fields": list(fields)}
        return await self._cached("get", params, load)

    async def find(
        self,
        query: DeckQuery,
        populate: Sequence[str] = (),
        fields: Sequence[str] = (),
    ) -> List[Dict[str, Any]]:
        populate = self._check_populate(populate)

        async def load():
            decks = await self.repository.find(query)
            return [
                await self._transform(deck.to_record(), populate, fields)
                for deck in decks
            ]

        params = {
            "query": query.__dict__,
            "populate": populate,
            "fields": list(fields),
        }
        return await self._cached("find", params, load)

    async def list(
        self,
        page: int = 1,
        page_size: int = 10,
        sort: Optional[str] = None,
        search: Optional[str] = None,
        populate: Sequence[str] = (),
        fields: Sequence[str] = (),
    ) -> Dict[str, Any]:
        """Paged find: ``{rows, total, page, pageSize, totalPages}``."""
        if page < 1 or page_size < 1:
            raise InvalidQueryError("page and pageSize must be positive")

        query = DeckQuery(
            search=search,
            sort=parse_sort(sort),
            limit=page_size,
            offset=(page - 1) * page_size,
        )
        rows = await self.find(query, populate=populate, fields=fields)
        total = await self.count(DeckQuery(search=search))
        return {
            "rows": rows,
            "total": total,
            "page": page,
            "pageSize": page_size,
            "totalPages": math.ceil(total / page_size),
        }

    async def count(self, query: Optional[DeckQuery] = None) -> int:
        query = query or DeckQuery()

        async def load():
            return await self.repository.count(query)

        return await self._cached("count", {"query": query.__dict__}, load)

    # ---------- entity lifecycle hooks ----------

    async def entity_created(self, record: Dict[str, Any]) -> None:
        await self._entity_changed("created", record)

    async def entity_updated(self, record: Dict[str, Any]) -> None:
        await self._entity_changed("updated", record)

    async def entity_removed(self, record: Dict[str, Any]) -> None:
        await self._entity_changed("removed", record)

    async def _entity_changed(self, change: str, record: Dict[str, Any]) -> None:
        await self.event_bus.emit(f"{self.name}.{change}", record)
        self._log.info(f"deck.{change}", deck_id=record.get("_id"))
        await self.clear_cache()

    async def clear_cache(self) -> None:
        """Invalidate this service's cached reads on every node."""
        await self.event_bus.broadcast(f"cache.clean.{self.name}")
        if self.cache is not None:
            await self.cache.clean(f"{self.name}.*")

    # ---------- helpers ----------

    async def _cached(
        self, action: str, params: Dict[str, Any], load: Callable[[], Awaitable[Any]]
    ) -> Any:
        if self.cache is None:
            return await load()

        key = cache_key(f"{self.name}.{action}", params)
        cached = await self.cache.get(key)
        if cached is not None:
            return cached

        result = await load()
        await self.cache.set(key, result)
        return result

    @staticmethod
    def _check_populate(populate: Sequence[str]) -> List[str]:
        unknown = [name for name in populate if name not in POPULATES]
        if unknown:
            raise InvalidQueryError(f"cannot populate {', '.join(unknown)}")
        return list(populate)

    async def _transform(
        self,
        record: Dict[str, Any],
        populate: Sequence[str],
        fields: Sequence[str],
    ) -> Dict[str, Any]:
        for field_name in populate:
            record[field_name] = await self.cards.get_many(record[field_name])
        if fields:
            record = {key: value for key, value in record.items() if key in fields}
        return record
