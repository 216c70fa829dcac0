"""Domain services."""

from .seed_builder import SEED_DECK_ID, SEED_DECK_NAME, build_seed_deck, partition_cards

__all__ = ["SEED_DECK_ID", "SEED_DECK_NAME", "build_seed_deck", "partition_cards"]
