"""Integration tests for the SQLAlchemy deck repository."""

import pytest

from decks_service.application.ports import DeckQuery
from decks_service.data.repositories.deck_repository import SqlDeckRepository
from decks_service.domain.entities.deck import Deck
from decks_service.domain.exceptions import DeckAlreadyExistsError, InvalidQueryError

pytestmark = pytest.mark.integration


@pytest.fixture
def repository(database):
    return SqlDeckRepository(database)


async def _create(repository, *names):
    return [await repository.create(Deck(name=name)) for name in names]


@pytest.mark.asyncio
async def test_create_assigns_id_and_round_trips(repository):
    created = await repository.create(
        Deck(name="Party pack", white_cards=["w1", "w2"], black_cards=["b1"])
    )

    assert created.id
    stored = await repository.get_by_id(created.id)
    assert stored == Deck(
        id=created.id,
        name="Party pack",
        white_cards=["w1", "w2"],
        black_cards=["b1"],
    )


@pytest.mark.asyncio
async def test_create_keeps_given_id(repository):
    created = await repository.create(Deck(name="Base cards", id="base-cards"))

    assert created.id == "base-cards"
    assert (await repository.get_by_id("base-cards")).name == "Base cards"


@pytest.mark.asyncio
async def test_duplicate_id_conflicts(repository):
    await repository.create(Deck(name="Base cards", id="base-cards"))

    with pytest.raises(DeckAlreadyExistsError):
        await repository.create(Deck(name="Base cards", id="base-cards"))

    assert await repository.count() == 1


@pytest.mark.asyncio
async def test_get_missing_returns_none(repository):
    assert await repository.get_by_id("nope") is None


@pytest.mark.asyncio
async def test_find_defaults_to_insertion_order(repository):
    await _create(repository, "b", "c", "a")

    decks = await repository.find(DeckQuery())

    assert [d.name for d in decks] == ["b", "c", "a"]


@pytest.mark.asyncio
async def test_find_sorts_and_pages(repository):
    await _create(repository, "b", "c", "a", "d")

    decks = await repository.find(
        DeckQuery(sort=[("name", True)], limit=2, offset=1)
    )

    assert [d.name for d in decks] == ["c", "b"]


@pytest.mark.asyncio
async def test_find_filters_by_name_and_search(repository):
    await _create(repository, "Party pack", "Base cards", "Family party")

    exact = await repository.find(DeckQuery(name="Base cards"))
    search = await repository.find(DeckQuery(search="PARTY"))

    assert [d.name for d in exact] == ["Base cards"]
    assert [d.name for d in search] == ["Party pack", "Family party"]
    assert await repository.count(DeckQuery(search="party")) == 2


@pytest.mark.asyncio
async def test_find_rejects_unknown_sort_field(repository):
    with pytest.raises(InvalidQueryError):
        await repository.find(DeckQuery(sort=[("whiteCards", False)]))


@pytest.mark.asyncio
async def test_update_replaces_fields(repository):
    deck = await repository.create(Deck(name="Old", white_cards=["w1"]))
    deck.name = "New"
    deck.black_cards = ["b9"]

    updated = await repository.update(deck)

    assert updated.name == "New"
    assert updated.white_cards == ["w1"]
    assert updated.black_cards == ["b9"]
    assert (await repository.get_by_id(deck.id)).name == "New"


@pytest.mark.asyncio
async def test_update_missing_returns_none(repository):
    assert await repository.update(Deck(name="ghost", id="nope")) is None


@pytest.mark.asyncio
async def test_delete_returns_removed_deck(repository):
    deck = await repository.create(Deck(name="Doomed", white_cards=["w1"]))

    removed = await repository.delete(deck.id)

    assert removed.name == "Doomed"
    assert removed.white_cards == ["w1"]
    assert await repository.get_by_id(deck.id) is None
    assert await repository.delete(deck.id) is None
    assert await repository.count() == 0
