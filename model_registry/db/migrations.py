"""
Numbered schema migrations and the runner that applies them.

Applied versions are recorded in ``_migration_history``. A run applies
every migration numbered after the highest recorded version, in order.
Table creation uses ``checkfirst`` so re-creating an existing table is a
no-op; column additions go through alembic's operations API and tolerate
"already exists" / "duplicate column" errors, which is the only error this
module swallows.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional, Sequence, Tuple

import structlog
from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import Column, Integer, MetaData, String, Table, func, insert, select
from sqlalchemy.exc import DBAPIError, SQLAlchemyError

from ..domain.primitives import utc_now
from ..errors import StorageError
from . import (  # noqa: F401
    activity_tables,
    monitoring_tables,
    runtime_tables,
    source_tables,
    tables,
)
from .base import Base, Database
from .types import UTCDateTime

logger = structlog.get_logger(__name__)

# Kept off Base.metadata so it never shows up in verify_schema or render_schema.
history_metadata = MetaData()

migration_history = Table(
    "_migration_history",
    history_metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("version", Integer, nullable=False, unique=True),
    Column("name", String(255), nullable=False),
    Column("applied_at", UTCDateTime(), nullable=False),
)


@dataclass(frozen=True)
class Migration:
    """One schema version: tables to create, or columns to add."""

    version: int
    description: str
    tables: Sequence[str] = ()
    add_columns: Sequence[Tuple[str, Callable[[], Column]]] = ()

    @property
    def name(self) -> str:
        return f"migration_{self.version:03d}"


MIGRATIONS: List[Migration] = [
    Migration(
        1,
        "initial schema",
        tables=(
            "models",
            "installed_models",
            "available_models",
            "runtime_configs",
            "model_runtimes",
            "runtime_metrics",
            "runtime_events",
        ),
    ),
    Migration(
        2,
        "model sources",
        tables=(
            "model_repositories",
            "repository_indexes",
            "repository_models",
            "sync_results",
        ),
    ),
    Migration(
        3,
        "monitoring",
        tables=(
            "global_configs",
            "system_metrics",
            "application_metrics",
            "model_metrics",
            "alert_events",
        ),
    ),
    Migration(
        4,
        "tasks and sessions",
        tables=("user_sessions", "api_usage", "tasks", "download_tasks"),
    ),
    Migration(
        5,
        "installation timestamps",
        add_columns=(
            (
                "installed_models",
                lambda: Column("created_at", UTCDateTime(), nullable=True),
            ),
            (
                "installed_models",
                lambda: Column("updated_at", UTCDateTime(), nullable=True),
            ),
        ),
    ),
]


def _already_exists(exc: DBAPIError) -> bool:
    message = str(exc.orig).lower()
    return "already exists" in message or "duplicate column" in message


def _create_tables(sync_conn, table_names: Sequence[str]) -> None:
    tables = [Base.metadata.tables[name] for name in table_names]
    Base.metadata.create_all(sync_conn, tables=tables, checkfirst=True)


class MigrationRunner:
    """Applies ``MIGRATIONS`` to a database."""

    def __init__(
        self, database: Database, migrations: Optional[Sequence[Migration]] = None
    ):
        self.database = database
        self.migrations = sorted(migrations or MIGRATIONS, key=lambda m: m.version)

    async def current_version(self) -> int:
        async with self.database.engine.connect() as conn:
            result = await conn.execute(select(func.max(migration_history.c.version)))
            return result.scalar() or 0

    async def history(self) -> List[Tuple[int, str, datetime]]:
        """Recorded migrations, oldest first."""
        async with self.database.engine.connect() as conn:
            result = await conn.execute(
                select(
                    migration_history.c.version,
                    migration_history.c.name,
                    migration_history.c.applied_at,
                ).order_by(migration_history.c.version)
            )
            return [tuple(row) for row in result]

    async def run(self) -> List[int]:
        """Apply pending migrations and return their versions."""
        applied = []
        try:
            async with self.database.engine.begin() as conn:
                await conn.run_sync(history_metadata.create_all)

            current = await self.current_version()
            for migration in self.migrations:
                if migration.version <= current:
                    continue
                await self._apply(migration)
                applied.append(migration.version)
                logger.info(
                    "migration_applied",
                    version=migration.version,
                    name=migration.name,
                    description=migration.description,
                )
        except SQLAlchemyError as exc:
            raise StorageError(f"Migration failed: {exc}") from exc

        if not applied:
            logger.debug("migrations_up_to_date", version=current)
        return applied

    async def _apply(self, migration: Migration) -> None:
        for table_name, column_factory in migration.add_columns:
            await self._add_column(table_name, column_factory())

        async with self.database.engine.begin() as conn:
            if migration.tables:
                await conn.run_sync(_create_tables, migration.tables)
            await conn.execute(
                insert(migration_history).values(
                    version=migration.version,
                    name=migration.name,
                    applied_at=utc_now(),
                )
            )

    async def _add_column(self, table_name: str, column: Column) -> None:
        def add(sync_conn) -> None:
            operations = Operations(MigrationContext.configure(sync_conn))
            operations.add_column(table_name, column)

        # Own transaction: a failed ALTER aborts the whole transaction on PostgreSQL
        try:
            async with self.database.engine.begin() as conn:
                await conn.run_sync(add)
        except DBAPIError as exc:
            if not _already_exists(exc):
                raise
            logger.debug("migration_column_exists", table=table_name, column=column.name)
