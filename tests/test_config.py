"""
Tests for settings, database URL handling, logging setup and error payloads.
"""

import logging
import uuid

import pytest
import structlog
from sqlalchemy.engine import make_url
from structlog.testing import capture_logs

from model_registry.config import Settings, get_settings
from model_registry.db.base import Database, get_database_url
from model_registry.errors import (
    ModelNotFoundError,
    NumericOverflowError,
    RecordNotFoundError,
    StorageError,
)
from model_registry.logging import configure_logging

from factories import make_model


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    structlog.reset_defaults()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        settings = Settings(_env_file=None)

        assert settings.database_url == "sqlite+aiosqlite:///./model_registry.db"
        assert settings.pool_size == 20
        assert settings.max_overflow == 30
        assert settings.sqlite_foreign_keys is True
        assert settings.search_default_limit == 50
        assert settings.page_default_limit == 20
        assert settings.events_default_limit == 100

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@db/registry")
        monkeypatch.setenv("SEARCH_DEFAULT_LIMIT", "5")
        settings = Settings(_env_file=None)

        assert settings.database_url == "postgresql://u:p@db/registry"
        assert settings.search_default_limit == 5

    def test_cached(self):
        assert get_settings() is get_settings()


class TestDatabaseUrl:
    @pytest.mark.parametrize(
        "raw,driver,database",
        [
            ("sqlite:///./x.db", "sqlite+aiosqlite", "./x.db"),
            ("sqlite+aiosqlite:///:memory:", "sqlite+aiosqlite", ":memory:"),
            ("postgresql://u:secret@db:5432/reg", "postgresql+asyncpg", "reg"),
            ("postgresql+psycopg2://u@db/reg", "postgresql+asyncpg", "reg"),
        ],
    )
    def test_async_driver_forced(self, raw, driver, database):
        url = make_url(get_database_url(raw))
        assert url.drivername == driver
        assert url.database == database

    def test_credentials_survive(self):
        url = make_url(get_database_url("postgresql://u:secret@db:5432/reg"))
        assert (url.username, url.password, url.host, url.port) == ("u", "secret", "db", 5432)

    def test_dialect_name(self):
        assert Database("postgresql://u@db/reg").dialect_name == "postgresql"
        assert Database("sqlite:///:memory:").dialect_name == "sqlite"

    def test_engine_requires_open(self):
        db = Database("sqlite:///:memory:")
        assert not db.is_open
        with pytest.raises(StorageError):
            db.engine
        with pytest.raises(StorageError):
            db.session()

    @pytest.mark.asyncio
    async def test_open_close(self, settings):
        async with Database(settings.database_url, settings=settings) as db:
            assert db.is_open
        assert not db.is_open


class TestLogging:
    def test_json_renderer(self, restore_logging):
        configure_logging("debug", "json")

        assert logging.getLogger().level == logging.DEBUG
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_console_renderer(self, restore_logging):
        configure_logging("warning", "console")

        assert logging.getLogger().level == logging.WARNING
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)

    def test_falls_back_to_settings(self, restore_logging):
        configure_logging()
        assert logging.getLogger().level == getattr(logging, get_settings().log_level.upper())

    @pytest.mark.asyncio
    async def test_service_events(self, models_service):
        with capture_logs() as logs:
            model = await models_service.create_model(make_model())

        created = [entry for entry in logs if entry["event"] == "model_created"]
        assert created == [
            {
                "event": "model_created",
                "log_level": "info",
                "model_id": str(model.id),
                "name": model.name,
            }
        ]


class TestErrorPayloads:
    def test_not_found(self):
        model_id = uuid.uuid4()
        payload = ModelNotFoundError(model_id).to_dict()
        assert payload == {
            "error": "MODEL_NOT_FOUND",
            "message": f"Model not found: {model_id}",
            "model": str(model_id),
        }

    def test_overflow(self):
        payload = NumericOverflowError("port", 70000, 16).to_dict()
        assert payload["field"] == "port"
        assert payload["bits"] == 16

    def test_record_not_found(self):
        error = RecordNotFoundError("ModelSource", "abc")
        assert str(error) == "ModelSource not found: abc"
        assert error.to_dict()["kind"] == "ModelSource"
