"""
Request and response schemas for the decks API.

Field names follow the mesh wire format (``_id``, ``whiteCards``,
``blackCards``) rather than Python naming.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


CardRef = Union[str, Dict[str, Any]]


# ---------- REQUESTS ----------
class CreateDeckRequest(BaseModel):
    """Entity validation for ``decks.create``."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1, description="Deck label")
    whiteCards: List[str] = Field(default_factory=list, description="White card ids")
    blackCards: List[str] = Field(default_factory=list, description="Black card ids")


class UpdateDeckRequest(BaseModel):
    """Partial update for ``decks.update``; omitted fields are left unchanged."""

    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(None, min_length=1)
    whiteCards: Optional[List[str]] = None
    blackCards: Optional[List[str]] = None


# ---------- RESPONSES ----------
class DeckRecord(BaseModel):
    """A deck as returned by every read and mutation.

    Card lists hold ids, or card records when the read asked to populate them.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(None, alias="_id")
    name: Optional[str] = None
    whiteCards: Optional[List[CardRef]] = None
    blackCards: Optional[List[CardRef]] = None


class DeckPage(BaseModel):
    rows: List[DeckRecord]
    total: int = Field(..., ge=0)
    page: int = Field(..., ge=1)
    pageSize: int = Field(..., ge=1)
    totalPages: int = Field(..., ge=0)


class CountResponse(BaseModel):
    count: int = Field(..., ge=0)


class SeedingStatus(BaseModel):
    state: str
    reason: Optional[str] = None
    error: Optional[str] = None
    deckId: Optional[str] = None
    finishedAt: Optional[str] = None


class ServiceHealthResponse(BaseModel):
    status: str
    database: str
    service: str
    version: str
    seeding: SeedingStatus


class ErrorResponse(BaseModel):
    """Standard error response format."""

    error: str = Field(..., description="Error type or code")
    detail: str = Field(..., description="Human-readable error description")
    timestamp: datetime = Field(default_factory=_utcnow)
