"""
Models service layer.

Business rules for registry entries and installations: existence checks
before a single mutation, statistics and orphan cleanup. Converts between
domain models and rows at the repository boundary.
"""

from collections import Counter
from dataclasses import replace
from typing import List, Optional, Tuple
from uuid import UUID

import structlog

from ..converters.models import (
    installed_model_to_row,
    model_to_row,
    row_to_installed_model,
    row_to_model,
)
from ..db.base import Database
from ..domain.enums import ModelStatus, ModelType
from ..domain.models import InstalledModel, Model, ModelStatistics
from ..errors import (
    ModelAlreadyExistsError,
    ModelAlreadyInstalledError,
    ModelHasInstalledInstancesError,
    ModelNotFoundError,
    ModelNotInstalledError,
)
from ..repositories.base import ModelQuery, Page, Pagination, SortBy
from ..repositories.models import ModelsRepository

logger = structlog.get_logger(__name__)


class ModelsService:
    """Service for managing models and their installations."""

    def __init__(self, repository: ModelsRepository):
        self.repository = repository

    @classmethod
    def from_database(cls, database: Database) -> "ModelsService":
        return cls(ModelsRepository(database))

    # --- queries -------------------------------------------------------------

    async def list_models(self) -> List[Model]:
        return [row_to_model(row) for row in await self.repository.list_models()]

    async def get_model_by_id(self, model_id: UUID) -> Optional[Model]:
        row = await self.repository.get_model_by_id(model_id)
        return row_to_model(row) if row else None

    async def get_model_by_name(self, name: str) -> Optional[Model]:
        row = await self.repository.get_model_by_name(name)
        return row_to_model(row) if row else None

    async def search_models(self, query: str, limit: Optional[int] = None) -> List[Model]:
        rows = await self.repository.search_models(query, limit)
        return [row_to_model(row) for row in rows]

    async def list_models_by_type(self, model_type: ModelType) -> List[Model]:
        rows = await self.repository.list_models_by_type(model_type.value)
        return [row_to_model(row) for row in rows]

    async def list_models_by_provider(self, provider: str) -> List[Model]:
        rows = await self.repository.list_models_by_provider(provider)
        return [row_to_model(row) for row in rows]

    async def list_official_models(self) -> List[Model]:
        rows = await self.repository.list_official_models()
        return [row_to_model(row) for row in rows]

    async def list_models_page(
        self,
        query: Optional[ModelQuery] = None,
        pagination: Optional[Pagination] = None,
        sort: Optional[SortBy] = None,
    ) -> Page[Model]:
        if query is not None and isinstance(query.model_type, ModelType):
            query = replace(query, model_type=query.model_type.value)
        page = await self.repository.list_models_page(query, pagination, sort)
        return Page(
            items=[row_to_model(row) for row in page.items],
            total_count=page.total_count,
            offset=page.offset,
            limit=page.limit,
        )

    # --- model mutations -----------------------------------------------------

    async def create_model(self, model: Model) -> Model:
        """Create a model. Raises ModelAlreadyExistsError if the name is taken."""
        if await self.repository.get_model_by_name(model.name) is not None:
            raise ModelAlreadyExistsError(model.name)

        row = await self.repository.create_model(model_to_row(model))
        logger.info("model_created", model_id=str(row.id), name=row.name)
        return row_to_model(row)

    async def update_model(self, model: Model) -> Model:
        existing = await self.repository.get_model_by_id(model.id)
        if existing is None:
            raise ModelNotFoundError(model.id)

        row = model_to_row(model)
        row.created_at = existing.created_at
        row = await self.repository.update_model(row)
        logger.info("model_updated", model_id=str(row.id))
        return row_to_model(row)

    async def delete_model(self, model_id: UUID) -> None:
        """Delete a model that has no installation."""
        if await self.repository.get_installed_by_model_id(model_id) is not None:
            raise ModelHasInstalledInstancesError(model_id)
        if await self.repository.get_model_by_id(model_id) is None:
            raise ModelNotFoundError(model_id)

        await self.repository.delete_model(model_id)
        logger.info("model_deleted", model_id=str(model_id))

    async def increment_download_count(self, model_id: UUID) -> None:
        if not await self.repository.increment_download_count(model_id):
            raise ModelNotFoundError(model_id)

    # --- installations -------------------------------------------------------

    async def install_model(self, installed: InstalledModel) -> InstalledModel:
        model_id = installed.model.id
        model_row = await self.repository.get_model_by_id(model_id)
        if model_row is None:
            raise ModelNotFoundError(model_id)
        if await self.repository.get_installed_by_model_id(model_id) is not None:
            raise ModelAlreadyInstalledError(model_id)

        row = await self.repository.install_model(installed_model_to_row(installed))
        logger.info(
            "model_installed", model_id=str(model_id), install_path=row.install_path
        )
        return row_to_installed_model(row, model_row)

    async def uninstall_model(self, model_id: UUID) -> None:
        if not await self.repository.uninstall_model(model_id):
            raise ModelNotInstalledError(model_id)
        logger.info("model_uninstalled", model_id=str(model_id))

    async def update_installed_model(self, installed: InstalledModel) -> InstalledModel:
        model_id = installed.model.id
        existing = await self.repository.get_installed_by_model_id(model_id)
        if existing is None:
            raise ModelNotInstalledError(model_id)

        row = installed_model_to_row(installed)
        row.id = existing.id
        row.created_at = existing.created_at
        row = await self.repository.update_installed_model(row)
        return installed.model_copy(update={"id": row.id})

    async def update_model_usage(self, model_id: UUID) -> None:
        if not await self.repository.mark_model_used(model_id):
            raise ModelNotInstalledError(model_id)

    async def get_installed_model(self, model_id: UUID) -> Optional[InstalledModel]:
        row = await self.repository.get_installed_by_model_id(model_id)
        if row is None:
            return None
        model_row = await self.repository.get_model_by_id(model_id)
        if model_row is None:
            logger.warning("installed_model_orphaned", model_id=str(model_id))
            return None
        return row_to_installed_model(row, model_row)

    async def list_installed_models(self) -> List[InstalledModel]:
        pairs = await self.repository.list_installed_with_models()
        return [row_to_installed_model(row, model_row) for row, model_row in pairs]

    async def list_installed_by_status(self, status: ModelStatus) -> List[InstalledModel]:
        pairs = await self.repository.list_installed_with_models(status.value)
        return [row_to_installed_model(row, model_row) for row, model_row in pairs]

    async def list_models_with_install_info(
        self,
    ) -> List[Tuple[Model, Optional[InstalledModel]]]:
        result = []
        for model_row, installed_row in await self.repository.list_models_with_install_info():
            installed = (
                row_to_installed_model(installed_row, model_row)
                if installed_row is not None
                else None
            )
            result.append((row_to_model(model_row), installed))
        return result

    # --- maintenance ---------------------------------------------------------

    async def get_statistics(self) -> ModelStatistics:
        models = await self.list_models()
        installed_count = await self.repository.count_installed()

        return ModelStatistics(
            total_models=len(models),
            installed_count=installed_count,
            official_count=sum(1 for model in models if model.is_official),
            total_size_bytes=sum(model.file_size for model in models),
            models_by_type=dict(Counter(model.model_type for model in models)),
            models_by_provider=dict(Counter(model.provider for model in models)),
        )

    async def cleanup_orphaned_data(self, remove: bool = False) -> int:
        """Count installations whose model is gone; delete them when ``remove``."""
        orphans = await self.repository.list_orphaned_installations()
        if remove and orphans:
            deleted = await self.repository.delete_installed_by_ids(
                [row.id for row in orphans]
            )
            logger.info("orphans_removed", count=deleted)
        elif orphans:
            logger.warning("orphans_found", count=len(orphans))
        return len(orphans)
