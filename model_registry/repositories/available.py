"""Repository for models offered for installation (``available_models``)."""

from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import delete, desc, select, update

from ..db.tables import AvailableModelRow, ModelRow
from .base import BaseRepository

available_table = AvailableModelRow.__table__


class AvailableModelsRepository(BaseRepository):
    async def create(self, row: AvailableModelRow) -> AvailableModelRow:
        return await self._insert(row)

    async def get_by_model_id(
        self, model_id: UUID
    ) -> Optional[Tuple[AvailableModelRow, ModelRow]]:
        stmt = (
            select(AvailableModelRow, ModelRow)
            .join(ModelRow, AvailableModelRow.model_id == ModelRow.id)
            .where(AvailableModelRow.model_id == model_id)
        )
        rows = await self._tuples(stmt)
        return rows[0] if rows else None

    async def list(
        self, installed: Optional[bool] = None
    ) -> List[Tuple[AvailableModelRow, ModelRow]]:
        """Available models with their model rows, newest publication first."""
        stmt = select(AvailableModelRow, ModelRow).join(
            ModelRow, AvailableModelRow.model_id == ModelRow.id
        )
        if installed is not None:
            stmt = stmt.where(AvailableModelRow.is_installed.is_(installed))
        return await self._tuples(stmt.order_by(desc(AvailableModelRow.published_at)))

    async def set_installed(self, model_id: UUID, installed: bool) -> bool:
        stmt = (
            update(available_table)
            .where(available_table.c.model_id == model_id)
            .values(is_installed=installed)
        )
        return await self._execute(stmt) > 0

    async def delete(self, model_id: UUID) -> bool:
        stmt = delete(available_table).where(available_table.c.model_id == model_id)
        return await self._execute(stmt) > 0
