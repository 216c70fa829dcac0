"""
Deck actions router.

- POST   /decks              decks.create
- GET    /decks              decks.list (paged)
- GET    /decks/find         decks.find
- GET    /decks/count        decks.count
- GET    /decks/health       decks.health
- GET    /decks/{deck_id}    decks.get
- PATCH  /decks/{deck_id}    decks.update
- DELETE /decks/{deck_id}    decks.remove
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Query, status

from decks_service.api.dependencies import DeckServiceDep
from decks_service.api.schemas import (
    CountResponse,
    CreateDeckRequest,
    DeckPage,
    DeckRecord,
    UpdateDeckRequest,
)
from decks_service.application.ports import DeckQuery
from decks_service.application.services.deck_service import parse_csv, parse_sort
from decks_service.domain.entities.deck import Deck
from decks_service.infra.config.logging_config import bind_context, get_logger
from decks_service.infra.health.node_health import get_node_health

router = APIRouter(prefix="/decks", tags=["decks"])
log = get_logger("api.decks")

PopulateQuery = Query(None, description="Comma separated: whiteCards,blackCards")
FieldsQuery = Query(None, description="Comma separated record fields to return")


@router.post(
    "",
    response_model=DeckRecord,
    response_model_by_alias=True,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_deck(request: CreateDeckRequest, service: DeckServiceDep) -> Dict[str, Any]:
    """Create a deck. Card ids are stored as given."""
    deck = Deck(
        name=request.name,
        white_cards=request.whiteCards,
        black_cards=request.blackCards,
    )
    return await service.create(deck)


@router.get(
    "",
    response_model=DeckPage,
    response_model_by_alias=True,
    response_model_exclude_none=True,
)
async def list_decks(
    service: DeckServiceDep,
    page: int = Query(1, ge=1),
    pageSize: int = Query(10, ge=1, le=100),
    sort: Optional[str] = Query(None, description="e.g. '-name' for descending"),
    search: Optional[str] = Query(None, description="Substring match on name"),
    populate: Optional[str] = PopulateQuery,
    fields: Optional[str] = FieldsQuery,
) -> Dict[str, Any]:
    return await service.list(
        page=page,
        page_size=pageSize,
        sort=sort,
        search=search,
        populate=parse_csv(populate),
        fields=parse_csv(fields),
    )


@router.get(
    "/find",
    response_model=List[DeckRecord],
    response_model_by_alias=True,
    response_model_exclude_none=True,
)
async def find_decks(
    service: DeckServiceDep,
    name: Optional[str] = Query(None, description="Exact name match"),
    search: Optional[str] = Query(None, description="Substring match on name"),
    sort: Optional[str] = None,
    limit: Optional[int] = Query(None, ge=1),
    offset: int = Query(0, ge=0),
    populate: Optional[str] = PopulateQuery,
    fields: Optional[str] = FieldsQuery,
) -> List[Dict[str, Any]]:
    query = DeckQuery(
        name=name, search=search, sort=parse_sort(sort), limit=limit, offset=offset
    )
    return await service.find(
        query, populate=parse_csv(populate), fields=parse_csv(fields)
    )


@router.get("/count", response_model=CountResponse)
async def count_decks(
    service: DeckServiceDep,
    name: Optional[str] = None,
    search: Optional[str] = None,
) -> Dict[str, int]:
    count = await service.count(DeckQuery(name=name, search=search))
    return {"count": count}


@router.get("/health")
async def health() -> Dict[str, Any]:
    """Node health of the runtime hosting this service, returned as is."""
    return get_node_health()


@router.get(
    "/{deck_id}",
    response_model=DeckRecord,
    response_model_by_alias=True,
    response_model_exclude_none=True,
)
async def get_deck(
    deck_id: str,
    service: DeckServiceDep,
    populate: Optional[str] = PopulateQuery,
    fields: Optional[str] = FieldsQuery,
) -> Dict[str, Any]:
    bind_context(deck_id=deck_id)
    return await service.get(
        deck_id, populate=parse_csv(populate), fields=parse_csv(fields)
    )


@router.patch(
    "/{deck_id}",
    response_model=DeckRecord,
    response_model_by_alias=True,
    response_model_exclude_none=True,
)
async def update_deck(
    deck_id: str, request: UpdateDeckRequest, service: DeckServiceDep
) -> Dict[str, Any]:
    bind_context(deck_id=deck_id)
    changes = request.model_dump(exclude_unset=True, exclude_none=True)
    log.info("deck.update.request", fields=sorted(changes))
    return await service.update(deck_id, changes)


@router.delete(
    "/{deck_id}",
    response_model=DeckRecord,
    response_model_by_alias=True,
    response_model_exclude_none=True,
)
async def remove_deck(deck_id: str, service: DeckServiceDep) -> Dict[str, Any]:
    bind_context(deck_id=deck_id)
    return await service.remove(deck_id)
