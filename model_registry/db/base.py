"""Database handle and declarative base for the model registry."""

import uuid
from datetime import datetime
from typing import Any, Dict, Optional

import structlog
from sqlalchemy import event, inspect
from sqlalchemy.engine.url import URL, make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from ..config import Settings, get_settings
from ..errors import StorageError

logger = structlog.get_logger(__name__)


class Base(DeclarativeBase):
    """Base class for all row models."""

    def column_values(self) -> Dict[str, Any]:
        """Values keyed by column name, ready for a Core INSERT/UPDATE.

        A ``None`` attribute with a Python-side default is filled in on the
        row itself; one with only a server default is left out so the
        database applies it.
        """
        values = {}
        for attr in inspect(type(self)).column_attrs:
            column = attr.columns[0]
            value = getattr(self, attr.key)
            if value is None and column.default is not None:
                default = column.default
                value = default.arg(None) if default.is_callable else default.arg
                setattr(self, attr.key, value)
            elif value is None and column.server_default is not None:
                continue
            values[column.key] = value
        return values

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly dump; JSON columns stay as text."""
        result = {}
        for attr in inspect(type(self)).column_attrs:
            value = getattr(self, attr.key)
            if isinstance(value, datetime):
                value = value.isoformat()
            elif isinstance(value, uuid.UUID):
                value = str(value)
            result[attr.columns[0].key] = value
        return result


# Default to a local SQLite database when DATABASE_URL is not provided.
DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./model_registry.db"


def _ensure_async_driver(url: URL) -> URL:
    """Force the async driver of each supported backend."""

    backend = url.get_backend_name()
    if backend == "postgresql" and url.drivername != "postgresql+asyncpg":
        url = url.set(drivername="postgresql+asyncpg")
    elif backend == "sqlite" and url.drivername != "sqlite+aiosqlite":
        url = url.set(drivername="sqlite+aiosqlite")

    return url


def get_database_url(raw_url: Optional[str] = None) -> str:
    """Return a database URL with a guaranteed async driver."""

    url = make_url(raw_url or get_settings().database_url or DEFAULT_DATABASE_URL)
    # str(url) would mask the password with ***
    return _ensure_async_driver(url).render_as_string(hide_password=False)


def _is_memory_sqlite(url: URL) -> bool:
    return url.get_backend_name() == "sqlite" and url.database in (
        None,
        "",
        ":memory:",
    )


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Explicit handle over an async engine and its session factory.

    Repositories receive a ``Database`` instead of reaching for a global
    pool. Use ``async with Database(url) as db`` or call ``open()`` and
    ``close()`` yourself.
    """

    def __init__(self, url: Optional[str] = None, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.url = get_database_url(url or self.settings.database_url)
        self._engine: Optional[AsyncEngine] = None
        self._sessionmaker: Optional[async_sessionmaker] = None

    @property
    def dialect_name(self) -> str:
        return make_url(self.url).get_backend_name()

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise StorageError("Database is not open")
        return self._engine

    def _create_engine(self) -> AsyncEngine:
        url = make_url(self.url)
        if url.get_backend_name() == "sqlite":
            kwargs: Dict[str, Any] = {}
            if _is_memory_sqlite(url):
                # One shared connection, otherwise every checkout sees an empty db
                kwargs = {
                    "connect_args": {"check_same_thread": False},
                    "poolclass": StaticPool,
                }
            engine = create_async_engine(
                url, echo=self.settings.database_echo, **kwargs
            )
            if self.settings.sqlite_foreign_keys:
                event.listen(
                    engine.sync_engine, "connect", _enable_sqlite_foreign_keys
                )
            return engine

        return create_async_engine(
            url,
            echo=self.settings.database_echo,
            pool_size=self.settings.pool_size,
            max_overflow=self.settings.max_overflow,
            pool_pre_ping=self.settings.pool_pre_ping,
            pool_recycle=self.settings.pool_recycle,
        )

    async def open(self) -> "Database":
        if self._engine is not None:
            return self
        self._engine = self._create_engine()
        self._sessionmaker = async_sessionmaker(self._engine, expire_on_commit=False)
        logger.info("database_opened", dialect=self.dialect_name)

        if self.settings.verify_schema_on_open:
            from .schema import verify_schema

            await verify_schema(self)
        return self

    async def close(self) -> None:
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._sessionmaker = None
        logger.info("database_closed", dialect=self.dialect_name)

    def session(self) -> AsyncSession:
        """A new session; use as ``async with db.session() as session``."""
        if self._sessionmaker is None:
            raise StorageError("Database is not open")
        return self._sessionmaker()

    async def create_schema(self) -> list:
        """Apply pending migrations; returns the versions applied."""
        from .migrations import MigrationRunner

        return await MigrationRunner(self).run()

    async def __aenter__(self) -> "Database":
        return await self.open()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
