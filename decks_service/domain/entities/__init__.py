"""Domain entities."""

from .deck import Deck, new_deck_id

__all__ = ["Deck", "new_deck_id"]
