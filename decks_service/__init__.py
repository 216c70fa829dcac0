"""Decks service: deck storage and lifecycle events for the card-game mesh."""

__version__ = "1.0.0"
