"""
Tests for the numbered migration runner.

Verifies:
- a fresh database gets every version, recorded in order
- re-running is a no-op
- guarded column additions tolerate existing columns and add missing ones
"""

import pytest
from sqlalchemy import Column, String, inspect, text

from model_registry.db.base import Database
from model_registry.db.migrations import MIGRATIONS, Migration, MigrationRunner
from model_registry.db.schema import verify_schema
from model_registry.errors import StorageError

MEMORY_URL = "sqlite+aiosqlite:///:memory:"


async def _columns(database, table_name):
    async with database.engine.connect() as conn:
        return await conn.run_sync(
            lambda sync_conn: {c["name"] for c in inspect(sync_conn).get_columns(table_name)}
        )


class TestMigrationRunner:
    @pytest.mark.asyncio
    async def test_fresh_database(self, settings):
        async with Database(MEMORY_URL, settings=settings) as db:
            runner = MigrationRunner(db)
            applied = await runner.run()

            assert applied == [m.version for m in MIGRATIONS]
            assert await runner.current_version() == MIGRATIONS[-1].version
            history = await runner.history()
            assert [(version, name) for version, name, _ in history] == [
                (m.version, m.name) for m in MIGRATIONS
            ]
            assert all(applied_at.tzinfo is not None for _, _, applied_at in history)
            await verify_schema(db)

    @pytest.mark.asyncio
    async def test_rerun_is_noop(self, database):
        runner = MigrationRunner(database)
        assert await runner.run() == []
        assert len(await runner.history()) == len(MIGRATIONS)

    @pytest.mark.asyncio
    async def test_resumes_after_recorded_version(self, settings):
        async with Database(MEMORY_URL, settings=settings) as db:
            assert await MigrationRunner(db, MIGRATIONS[:2]).run() == [1, 2]
            assert await MigrationRunner(db).run() == [3, 4, 5]

    @pytest.mark.asyncio
    async def test_adds_missing_installation_timestamps(self, settings):
        async with Database(MEMORY_URL, settings=settings) as db:
            await MigrationRunner(db, MIGRATIONS[:1]).run()
            async with db.engine.begin() as conn:
                await conn.execute(text("ALTER TABLE installed_models DROP COLUMN created_at"))
                await conn.execute(text("ALTER TABLE installed_models DROP COLUMN updated_at"))
            assert "created_at" not in await _columns(db, "installed_models")

            await MigrationRunner(db).run()

            columns = await _columns(db, "installed_models")
            assert {"created_at", "updated_at"} <= columns

    @pytest.mark.asyncio
    async def test_existing_column_tolerated(self, database):
        extra = Migration(
            6,
            "re-add an existing column",
            add_columns=(("models", lambda: Column("name", String(255))),),
        )
        assert await MigrationRunner(database, [*MIGRATIONS, extra]).run() == [6]

    @pytest.mark.asyncio
    async def test_other_ddl_errors_propagate(self, database):
        broken = Migration(
            6,
            "add to a missing table",
            add_columns=(("no_such_table", lambda: Column("x", String(10))),),
        )
        with pytest.raises(StorageError):
            await MigrationRunner(database, [*MIGRATIONS, broken]).run()
        assert await MigrationRunner(database).current_version() == 5

    def test_versions_are_unique_and_ordered(self):
        versions = [m.version for m in MIGRATIONS]
        assert versions == sorted(set(versions))
        assert versions[0] == 1
        assert MIGRATIONS[0].name == "migration_001"
