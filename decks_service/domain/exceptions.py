"""
Domain exceptions for the decks service.

Every error carries a stable ``code`` that the API layer maps onto an HTTP
status, so callers elsewhere in the mesh get structured failures.
"""

from typing import Optional


class DomainError(Exception):
    """Base class for domain-specific errors."""

    def __init__(self, message: str, code: str = "DOMAIN_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)


class DeckNotFoundError(DomainError):
    """Raised when a deck is not found."""

    def __init__(self, deck_id: str):
        self.deck_id = deck_id
        super().__init__(f"Deck {deck_id} not found", "DECK_NOT_FOUND")


class DeckAlreadyExistsError(DomainError):
    """Raised when a deck id collides with an existing record."""

    def __init__(self, deck_id: str):
        self.deck_id = deck_id
        super().__init__(f"Deck {deck_id} already exists", "DECK_ALREADY_EXISTS")


class InvalidQueryError(DomainError):
    """Raised when find/list parameters cannot be applied."""

    def __init__(self, reason: str):
        super().__init__(f"Invalid query: {reason}", "INVALID_QUERY")


class DependencyUnavailableError(DomainError):
    """Raised when a mesh dependency does not become reachable in time."""

    def __init__(self, services, timeout: Optional[float] = None):
        self.services = list(services)
        names = ", ".join(self.services)
        if timeout is not None:
            message = f"Services not available after {timeout:g}s: {names}"
        else:
            message = f"Services not available: {names}"
        super().__init__(message, "DEPENDENCY_UNAVAILABLE")


class ServiceCallError(DomainError):
    """Raised when a call to another service fails."""

    def __init__(self, action: str, reason: str):
        self.action = action
        super().__init__(f"Call to {action} failed: {reason}", "SERVICE_CALL_FAILED")
