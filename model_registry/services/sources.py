"""Service for model sources, their indexes, published models and sync runs."""

from typing import List, Optional
from uuid import UUID

import structlog

from ..converters.sources import (
    model_source_to_row,
    repository_index_to_row,
    repository_model_to_row,
    row_to_model_source,
    row_to_repository_index,
    row_to_repository_model,
    row_to_sync_result,
    sync_result_to_row,
)
from ..db.base import Database
from ..db.source_tables import ModelSourceRow
from ..domain.sources import ModelSource, RepositoryIndex, RepositoryModel, SyncResult
from ..errors import ModelNotFoundError, RecordNotFoundError, SourceAlreadyExistsError
from ..repositories.models import ModelsRepository
from ..repositories.sources import DEFAULT_SYNC_HISTORY, SourcesRepository

logger = structlog.get_logger(__name__)


class SourcesService:
    def __init__(self, repository: SourcesRepository, models: ModelsRepository):
        self.repository = repository
        self.models = models

    @classmethod
    def from_database(cls, database: Database) -> "SourcesService":
        return cls(SourcesRepository(database), ModelsRepository(database))

    async def _require_source(self, source_id: UUID) -> ModelSourceRow:
        row = await self.repository.get_source(source_id)
        if row is None:
            raise RecordNotFoundError("ModelSource", source_id)
        return row

    # --- sources -------------------------------------------------------------

    async def add_source(self, source: ModelSource) -> ModelSource:
        if await self.repository.get_source_by_name(source.name) is not None:
            raise SourceAlreadyExistsError(source.name)

        row = await self.repository.create_source(model_source_to_row(source))
        logger.info("source_added", source_id=str(row.id), name=row.name)
        return row_to_model_source(row)

    async def get_source(self, source_id: UUID) -> Optional[ModelSource]:
        row = await self.repository.get_source(source_id)
        return row_to_model_source(row) if row else None

    async def get_source_by_name(self, name: str) -> Optional[ModelSource]:
        row = await self.repository.get_source_by_name(name)
        return row_to_model_source(row) if row else None

    async def list_sources(self, enabled_only: bool = False) -> List[ModelSource]:
        if enabled_only:
            rows = await self.repository.list_enabled_sources()
        else:
            rows = await self.repository.list_sources()
        return [row_to_model_source(row) for row in rows]

    async def update_source(self, source: ModelSource) -> ModelSource:
        existing = await self._require_source(source.id)
        row = model_source_to_row(source)
        row.created_at = existing.created_at
        row = await self.repository.update_source(row)
        return row_to_model_source(row)

    async def remove_source(self, source_id: UUID) -> None:
        if not await self.repository.delete_source(source_id):
            raise RecordNotFoundError("ModelSource", source_id)
        logger.info("source_removed", source_id=str(source_id))

    # --- index ---------------------------------------------------------------

    async def save_index(self, index: RepositoryIndex) -> RepositoryIndex:
        """Store the latest index of a source, replacing any previous one."""
        await self._require_source(index.repository_id)
        await self.repository.upsert_index(repository_index_to_row(index))
        row = await self.repository.get_index(index.repository_id)
        return row_to_repository_index(row)

    async def get_index(self, source_id: UUID) -> Optional[RepositoryIndex]:
        row = await self.repository.get_index(source_id)
        return row_to_repository_index(row) if row else None

    # --- published models ----------------------------------------------------

    async def add_repository_model(self, published: RepositoryModel) -> RepositoryModel:
        await self._require_source(published.repository_id)
        if await self.models.get_model_by_id(published.model_id) is None:
            raise ModelNotFoundError(published.model_id)

        row = await self.repository.create_repository_model(
            repository_model_to_row(published)
        )
        return row_to_repository_model(row)

    async def get_repository_model(self, record_id: UUID) -> Optional[RepositoryModel]:
        row = await self.repository.get_repository_model(record_id)
        return row_to_repository_model(row) if row else None

    async def list_repository_models(self, source_id: UUID) -> List[RepositoryModel]:
        rows = await self.repository.list_repository_models(source_id)
        return [row_to_repository_model(row) for row in rows]

    async def list_sources_for_model(self, model_id: UUID) -> List[RepositoryModel]:
        rows = await self.repository.list_repository_models_by_model(model_id)
        return [row_to_repository_model(row) for row in rows]

    async def remove_repository_model(self, record_id: UUID) -> None:
        if not await self.repository.delete_repository_model(record_id):
            raise RecordNotFoundError("RepositoryModel", record_id)

    # --- sync ----------------------------------------------------------------

    async def record_sync(self, result: SyncResult) -> SyncResult:
        await self._require_source(result.repository_id)
        row = await self.repository.record_sync(sync_result_to_row(result))
        logger.info(
            "source_synced",
            source_id=str(row.repository_id),
            status=row.status,
            added=row.models_added,
            updated=row.models_updated,
            removed=row.models_removed,
        )
        return row_to_sync_result(row)

    async def sync_history(
        self, source_id: UUID, limit: int = DEFAULT_SYNC_HISTORY
    ) -> List[SyncResult]:
        rows = await self.repository.sync_history(source_id, limit)
        return [row_to_sync_result(row) for row in rows]
