"""
Deck repository for data access operations.
"""

from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from decks_service.application.ports import DeckQuery, DeckRepositoryPort
from decks_service.data.models.deck_model import DeckModel
from decks_service.domain.entities.deck import Deck, new_deck_id
from decks_service.domain.exceptions import DeckAlreadyExistsError, InvalidQueryError
from decks_service.infra.config.database import Database
from decks_service.infra.config.logging_config import get_logger

SORTABLE_COLUMNS = {
    "_id": DeckModel.id,
    "name": DeckModel.name,
}


class SqlDeckRepository(DeckRepositoryPort):
    """Deck persistence on SQLAlchemy; every call runs in its own transaction."""

    def __init__(self, database: Database):
        self.database = database
        self._log = get_logger("repo.deck")

    async def create(self, deck: Deck) -> Deck:
        deck_id = deck.id or new_deck_id()
        deck_model = DeckModel(
            id=deck_id,
            name=deck.name,
            white_cards=list(deck.white_cards),
            black_cards=list(deck.black_cards),
        )
        try:
            async with self.database.session() as session:
                session.add(deck_model)
                await session.flush()
        except IntegrityError:
            self._log.info("deck.create.conflict", deck_id=deck_id)
            raise DeckAlreadyExistsError(deck_id)

        deck.id = deck_id
        self._log.info("deck.create", deck_id=deck_id)
        return deck

    async def get_by_id(self, deck_id: str) -> Optional[Deck]:
        async with self.database.session() as session:
            result = await session.execute(
                select(DeckModel).where(DeckModel.id == deck_id)
            )
            deck_model = result.scalar_one_or_none()

        if not deck_model:
            self._log.info("deck.get.not_found", deck_id=deck_id)
            return None
        return self._to_entity(deck_model)

    async def find(self, query: DeckQuery) -> List[Deck]:
        stmt = self._apply_filters(select(DeckModel), query)

        order_by = []
        for field_name, descending in query.sort:
            column = SORTABLE_COLUMNS.get(field_name)
            if column is None:
                raise InvalidQueryError(f"cannot sort by '{field_name}'")
            order_by.append(column.desc() if descending else column.asc())
        order_by.append(DeckModel.seq.asc())
        stmt = stmt.order_by(*order_by)

        if query.offset:
            stmt = stmt.offset(query.offset)
        if query.limit is not None:
            stmt = stmt.limit(query.limit)

        async with self.database.session() as session:
            result = await session.execute(stmt)
            deck_models = result.scalars().all()

        items = [self._to_entity(model) for model in deck_models]
        self._log.info("deck.find", count=len(items))
        return items

    async def count(self, query: Optional[DeckQuery] = None) -> int:
        stmt = select(func.count()).select_from(DeckModel)
        if query is not None:
            stmt = self._apply_filters(stmt, query)
        async with self.database.session() as session:
            result = await session.execute(stmt)
            total = result.scalar_one()
        self._log.info("deck.count", count=total)
        return total

    async def update(self, deck: Deck) -> Optional[Deck]:
        async with self.database.session() as session:
            result = await session.execute(
                select(DeckModel).where(DeckModel.id == deck.id)
            )
            deck_model = result.scalar_one_or_none()
            if not deck_model:
                return None
            deck_model.name = deck.name
            deck_model.white_cards = list(deck.white_cards)
            deck_model.black_cards = list(deck.black_cards)
            await session.flush()
            updated = self._to_entity(deck_model)

        self._log.info("deck.update", deck_id=deck.id)
        return updated

    async def delete(self, deck_id: str) -> Optional[Deck]:
        async with self.database.session() as session:
            result = await session.execute(
                select(DeckModel).where(DeckModel.id == deck_id)
            )
            deck_model = result.scalar_one_or_none()
            if not deck_model:
                self._log.info("deck.delete.not_found", deck_id=deck_id)
                return None
            removed = self._to_entity(deck_model)
            await session.delete(deck_model)

        self._log.info("deck.delete", deck_id=deck_id)
        return removed

    @staticmethod
    def _apply_filters(stmt, query: DeckQuery):
        if query.name is not None:
            stmt = stmt.where(DeckModel.name == query.name)
        if query.search:
            stmt = stmt.where(DeckModel.name.ilike(f"%{query.search}%"))
        return stmt

    @staticmethod
    def _to_entity(model: DeckModel) -> Deck:
        """Convert SQLAlchemy model to domain entity."""
        return Deck(
            id=model.id,
            name=model.name,
            white_cards=list(model.white_cards or []),
            black_cards=list(model.black_cards or []),
        )
