"""
SQLAlchemy model for Deck entity.
"""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, JSON, String

from decks_service.data.models.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DeckModel(Base):
    __tablename__ = "decks"

    # Insertion order for unsorted reads; never exposed on the wire.
    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(64), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False, index=True)
    white_cards = Column(JSON, nullable=False, default=list)
    black_cards = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=_utcnow)
