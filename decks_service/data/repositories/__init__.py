from .deck_repository import SqlDeckRepository

__all__ = ["SqlDeckRepository"]
