from .deck_service import DeckService
from .deck_seeder import DeckSeeder, SeedingState

__all__ = ["DeckService", "DeckSeeder", "SeedingState"]
