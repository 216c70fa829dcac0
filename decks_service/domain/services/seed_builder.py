"""
Building the default deck from the full card catalogue.
"""

from typing import Any, Dict, Iterable, List, Tuple

from decks_service.domain.entities.deck import Deck

SEED_DECK_NAME = "Base cards"

# Reserved id: concurrent instances racing to seed collide on the unique id
# instead of creating two "Base cards" decks.
SEED_DECK_ID = "base-cards"


def partition_cards(cards: Iterable[Dict[str, Any]]) -> Tuple[List[str], List[str]]:
    """Split card records into (white_ids, black_ids), keeping source order.

    Only ``cardType == "black"`` counts as black; any other value, including a
    missing one, is white.
    """
    white_cards: List[str] = []
    black_cards: List[str] = []
    for card in cards:
        if card.get("cardType") == "black":
            black_cards.append(card["_id"])
        else:
            white_cards.append(card["_id"])
    return white_cards, black_cards


def build_seed_deck(cards: Iterable[Dict[str, Any]]) -> Deck:
    white_cards, black_cards = partition_cards(cards)
    return Deck(
        id=SEED_DECK_ID,
        name=SEED_DECK_NAME,
        white_cards=white_cards,
        black_cards=black_cards,
    )
