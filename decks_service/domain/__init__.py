"""
Domain layer - Deck entity and the rules for building the seed deck.

This package is independent of storage, transport and caching concerns.
"""

from .entities import Deck
from .services import SEED_DECK_ID, SEED_DECK_NAME, build_seed_deck, partition_cards

__all__ = [
    "Deck",
    "SEED_DECK_ID",
    "SEED_DECK_NAME",
    "build_seed_deck",
    "partition_cards",
]
