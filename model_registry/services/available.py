"""Service for models offered for installation."""

from typing import List, Optional
from uuid import UUID

import structlog

from ..converters.models import available_model_to_row, row_to_available_model
from ..db.base import Database
from ..domain.models import AvailableModel
from ..errors import ModelNotFoundError, RecordNotFoundError
from ..repositories.available import AvailableModelsRepository
from ..repositories.models import ModelsRepository

logger = structlog.get_logger(__name__)


class AvailableModelsService:
    def __init__(
        self, repository: AvailableModelsRepository, models: ModelsRepository
    ):
        self.repository = repository
        self.models = models

    @classmethod
    def from_database(cls, database: Database) -> "AvailableModelsService":
        return cls(AvailableModelsRepository(database), ModelsRepository(database))

    async def add(self, available: AvailableModel) -> AvailableModel:
        model_row = await self.models.get_model_by_id(available.model.id)
        if model_row is None:
            raise ModelNotFoundError(available.model.id)

        row = await self.repository.create(available_model_to_row(available))
        logger.info("available_model_added", model_id=str(row.model_id))
        return row_to_available_model(row, model_row)

    async def get(self, model_id: UUID) -> Optional[AvailableModel]:
        pair = await self.repository.get_by_model_id(model_id)
        return row_to_available_model(*pair) if pair else None

    async def list(self, installed: Optional[bool] = None) -> List[AvailableModel]:
        pairs = await self.repository.list(installed)
        return [row_to_available_model(row, model_row) for row, model_row in pairs]

    async def mark_installed(self, model_id: UUID, installed: bool = True) -> None:
        if not await self.repository.set_installed(model_id, installed):
            raise RecordNotFoundError("AvailableModel", model_id)

    async def remove(self, model_id: UUID) -> None:
        if not await self.repository.delete(model_id):
            raise RecordNotFoundError("AvailableModel", model_id)
