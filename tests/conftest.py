"""
Pytest configuration and fixtures.
"""

import os

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Set test environment before settings are read anywhere
os.environ["ENVIRONMENT"] = "testing"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["REDIS_URL"] = "redis://localhost:6379/15"
os.environ["SEED_ENABLED"] = "false"

from decks_service.infra.config.database import Database  # noqa: E402
from decks_service.infra.config.settings import Settings  # noqa: E402
from decks_service.infra.container import Container  # noqa: E402
from tests._helpers.fakes import (  # noqa: E402
    FakeCardsService,
    FakeEventBus,
    FakeServiceRegistry,
    InMemoryCache,
)


@pytest.fixture
def sample_cards():
    """Cards as returned by cards.find, in catalogue order."""
    return [
        {"_id": "a", "cardType": "black", "text": "Why can't I sleep at night? ____."},
        {"_id": "b", "cardType": "white", "text": "A disappointing birthday party."},
        {"_id": "c", "cardType": "black", "text": "What's that smell? ____."},
        {"_id": "d", "cardType": "white", "text": "Puppies!"},
    ]


@pytest.fixture
def settings():
    return Settings(
        environment="testing",
        database_url="sqlite+aiosqlite:///:memory:",
        seed_enabled=False,
        seed_startup_delay=0,
        seed_dependency_timeout=1,
        cache_enabled=False,
    )


@pytest.fixture
def event_bus():
    return FakeEventBus()


@pytest.fixture
def cache():
    return InMemoryCache()


@pytest.fixture
def cards_service(sample_cards):
    return FakeCardsService(sample_cards)


@pytest.fixture
def registry():
    return FakeServiceRegistry()


# ---------- DATABASE FIXTURES ----------


@pytest_asyncio.fixture
async def database():
    """Fresh in-memory database with tables created."""
    db = Database("sqlite+aiosqlite:///:memory:")
    await db.initialize()
    await db.create_all()
    yield db
    await db.close()


# ---------- API TESTING FIXTURES ----------


@pytest.fixture
def container(settings, event_bus, cache, cards_service, registry):
    return Container(
        settings,
        database=Database(settings.database_url),
        event_bus=event_bus,
        cache=cache,
        cards=cards_service,
        registry=registry,
    )


@pytest.fixture
def app(container):
    from decks_service.main import create_app

    return create_app(container=container)


@pytest_asyncio.fixture
async def async_client(app, container):
    """ASGITransport does not run the lifespan, so start the container here."""
    await container.startup()
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://testserver"
    ) as ac:
        yield ac
    await container.shutdown()
