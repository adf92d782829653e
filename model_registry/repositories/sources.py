"""Repository for model sources, their indexes, published models and sync results."""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import desc, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from ..db.source_tables import (
    ModelSourceRow,
    RepositoryIndexRow,
    RepositoryModelRow,
    SyncResultRow,
)
from .base import BaseRepository

DEFAULT_SYNC_HISTORY = 20


class SourcesRepository(BaseRepository):
    # --- sources -------------------------------------------------------------

    async def create_source(self, row: ModelSourceRow) -> ModelSourceRow:
        return await self._insert(row)

    async def get_source(self, source_id: UUID) -> Optional[ModelSourceRow]:
        return await self._first(
            select(ModelSourceRow).where(ModelSourceRow.id == source_id)
        )

    async def get_source_by_name(self, name: str) -> Optional[ModelSourceRow]:
        return await self._first(
            select(ModelSourceRow).where(ModelSourceRow.name == name)
        )

    async def list_sources(self) -> List[ModelSourceRow]:
        """All sources, lowest priority value first."""
        return await self._all(
            select(ModelSourceRow).order_by(ModelSourceRow.priority, ModelSourceRow.name)
        )

    async def list_enabled_sources(self) -> List[ModelSourceRow]:
        stmt = (
            select(ModelSourceRow)
            .where(ModelSourceRow.enabled.is_(True))
            .order_by(ModelSourceRow.priority, ModelSourceRow.name)
        )
        return await self._all(stmt)

    async def update_source(self, row: ModelSourceRow) -> ModelSourceRow:
        return await self._update(row)

    async def delete_source(self, source_id: UUID) -> bool:
        return await self._delete_by_id(ModelSourceRow, source_id)

    # --- index ---------------------------------------------------------------

    async def upsert_index(self, row: RepositoryIndexRow) -> RepositoryIndexRow:
        """Insert or replace the index of ``row.repository_id`` in one statement.

        On replace the stored row keeps its original ``id``.
        """
        table = RepositoryIndexRow.__table__
        values = row.column_values()
        dialect_insert = (
            pg_insert if self.database.dialect_name == "postgresql" else sqlite_insert
        )
        stmt = dialect_insert(table).values(values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[table.c.repository_id],
            set_={
                "version": stmt.excluded["version"],
                "updated_at": stmt.excluded["updated_at"],
                "checksum": stmt.excluded["checksum"],
                "metadata": stmt.excluded["metadata"],
            },
        )
        await self._execute(stmt)
        return row

    async def get_index(self, repository_id: UUID) -> Optional[RepositoryIndexRow]:
        return await self._first(
            select(RepositoryIndexRow).where(
                RepositoryIndexRow.repository_id == repository_id
            )
        )

    # --- published models ----------------------------------------------------

    async def create_repository_model(
        self, row: RepositoryModelRow
    ) -> RepositoryModelRow:
        return await self._insert(row)

    async def get_repository_model(
        self, record_id: UUID
    ) -> Optional[RepositoryModelRow]:
        return await self._first(
            select(RepositoryModelRow).where(RepositoryModelRow.id == record_id)
        )

    async def list_repository_models(
        self, repository_id: UUID
    ) -> List[RepositoryModelRow]:
        stmt = (
            select(RepositoryModelRow)
            .where(RepositoryModelRow.repository_id == repository_id)
            .order_by(RepositoryModelRow.repo_model_id)
        )
        return await self._all(stmt)

    async def list_repository_models_by_model(
        self, model_id: UUID
    ) -> List[RepositoryModelRow]:
        stmt = (
            select(RepositoryModelRow)
            .where(RepositoryModelRow.model_id == model_id)
            .order_by(RepositoryModelRow.repo_model_id)
        )
        return await self._all(stmt)

    async def delete_repository_model(self, record_id: UUID) -> bool:
        return await self._delete_by_id(RepositoryModelRow, record_id)

    # --- sync results ----------------------------------------------------------

    async def record_sync(self, row: SyncResultRow) -> SyncResultRow:
        return await self._insert(row)

    async def sync_history(
        self, repository_id: UUID, limit: int = DEFAULT_SYNC_HISTORY
    ) -> List[SyncResultRow]:
        stmt = (
            select(SyncResultRow)
            .where(SyncResultRow.repository_id == repository_id)
            .order_by(desc(SyncResultRow.started_at))
            .limit(limit)
        )
        return await self._all(stmt)
