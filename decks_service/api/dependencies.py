"""
FastAPI dependencies.
"""

from typing import Annotated

from fastapi import Depends, Request

from decks_service.application.services.deck_seeder import DeckSeeder
from decks_service.application.services.deck_service import DeckService
from decks_service.infra.container import Container


def get_container(request: Request) -> Container:
    return request.app.state.container


def get_deck_service(container: Container = Depends(get_container)) -> DeckService:
    return container.deck_service


def get_seeder(container: Container = Depends(get_container)) -> DeckSeeder:
    return container.seeder


# Type aliases for cleaner dependency injection
ContainerDep = Annotated[Container, Depends(get_container)]
DeckServiceDep = Annotated[DeckService, Depends(get_deck_service)]
SeederDep = Annotated[DeckSeeder, Depends(get_seeder)]
