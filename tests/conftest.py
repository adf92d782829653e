"""Test configuration and fixtures."""

import pytest
import pytest_asyncio

from model_registry.config import Settings
from model_registry.db.base import Database
from model_registry.repositories import ModelsRepository
from model_registry.services import ModelsService

MEMORY_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def settings() -> Settings:
    """Settings for an in-memory SQLite database."""
    return Settings(database_url=MEMORY_URL)


@pytest_asyncio.fixture
async def database(settings: Settings) -> Database:
    """A migrated in-memory database, closed after the test."""
    db = Database(MEMORY_URL, settings=settings)
    await db.open()
    await db.create_schema()
    yield db
    await db.close()


@pytest.fixture
def models_repository(database: Database) -> ModelsRepository:
    return ModelsRepository(database)


@pytest.fixture
def models_service(database: Database) -> ModelsService:
    return ModelsService.from_database(database)
