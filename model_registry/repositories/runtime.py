"""Repository for runtime configs, runtimes, runtime metrics and events."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import desc, select

from ..db.runtime_tables import (
    ModelRuntimeRow,
    RuntimeConfigRow,
    RuntimeEventRow,
    RuntimeMetricsRow,
)
from .base import BaseRepository


class RuntimeRepository(BaseRepository):
    # --- configs -------------------------------------------------------------

    async def create_config(self, row: RuntimeConfigRow) -> RuntimeConfigRow:
        return await self._insert(row)

    async def get_config(self, config_id: UUID) -> Optional[RuntimeConfigRow]:
        return await self._first(
            select(RuntimeConfigRow).where(RuntimeConfigRow.id == config_id)
        )

    async def list_configs(self) -> List[RuntimeConfigRow]:
        return await self._all(select(RuntimeConfigRow).order_by(RuntimeConfigRow.name))

    async def update_config(self, row: RuntimeConfigRow) -> RuntimeConfigRow:
        return await self._update(row)

    async def delete_config(self, config_id: UUID) -> bool:
        return await self._delete_by_id(RuntimeConfigRow, config_id)

    # --- runtimes ------------------------------------------------------------

    async def create_runtime(self, row: ModelRuntimeRow) -> ModelRuntimeRow:
        """Raises ConflictError if the model already has a runtime on that port."""
        return await self._insert(row)

    async def get_runtime(self, runtime_id: UUID) -> Optional[ModelRuntimeRow]:
        return await self._first(
            select(ModelRuntimeRow).where(ModelRuntimeRow.id == runtime_id)
        )

    async def get_runtimes_by_model_id(self, model_id: UUID) -> List[ModelRuntimeRow]:
        stmt = (
            select(ModelRuntimeRow)
            .where(ModelRuntimeRow.model_id == model_id)
            .order_by(ModelRuntimeRow.port)
        )
        return await self._all(stmt)

    async def list_runtimes_by_status(self, status: str) -> List[ModelRuntimeRow]:
        stmt = (
            select(ModelRuntimeRow)
            .where(ModelRuntimeRow.status == status)
            .order_by(desc(ModelRuntimeRow.created_at))
        )
        return await self._all(stmt)

    async def update_runtime(self, row: ModelRuntimeRow) -> ModelRuntimeRow:
        return await self._update(row)

    async def delete_runtime(self, runtime_id: UUID) -> bool:
        return await self._delete_by_id(ModelRuntimeRow, runtime_id)

    # --- metrics and events --------------------------------------------------

    async def record_metrics(self, row: RuntimeMetricsRow) -> RuntimeMetricsRow:
        return await self._insert(row)

    async def metrics_history(
        self, runtime_id: UUID, start: datetime, end: datetime
    ) -> List[RuntimeMetricsRow]:
        """Samples with ``start <= timestamp <= end``, oldest first."""
        stmt = (
            select(RuntimeMetricsRow)
            .where(
                RuntimeMetricsRow.runtime_id == runtime_id,
                RuntimeMetricsRow.timestamp >= start,
                RuntimeMetricsRow.timestamp <= end,
            )
            .order_by(RuntimeMetricsRow.timestamp)
        )
        return await self._all(stmt)

    async def record_event(self, row: RuntimeEventRow) -> RuntimeEventRow:
        return await self._insert(row)

    async def latest_events(
        self, runtime_id: UUID, limit: Optional[int] = None
    ) -> List[RuntimeEventRow]:
        stmt = (
            select(RuntimeEventRow)
            .where(RuntimeEventRow.runtime_id == runtime_id)
            .order_by(desc(RuntimeEventRow.timestamp))
            .limit(limit or self.settings.events_default_limit)
        )
        return await self._all(stmt)
