"""
Application layer - deck actions, lifecycle events and startup seeding.

This package orchestrates the domain entity against the storage, event bus,
cache and peer-service ports declared in ``ports``.
"""

from .services.deck_service import DeckService
from .services.deck_seeder import DeckSeeder, SeedingState

__all__ = [
    "DeckService",
    "DeckSeeder",
    "SeedingState",
]
