"""
Runtime service: launch configurations, runtime processes, their metrics
and events.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

import structlog

from ..converters.runtime import (
    model_runtime_to_row,
    row_to_model_runtime,
    row_to_runtime_config,
    row_to_runtime_event,
    row_to_runtime_metrics,
    runtime_config_to_row,
    runtime_event_to_row,
    runtime_metrics_to_row,
)
from ..db.base import Database
from ..domain.enums import ModelStatus
from ..domain.primitives import utc_now
from ..domain.runtime import ModelRuntime, RuntimeConfig, RuntimeEvent, RuntimeMetrics
from ..errors import ModelNotFoundError, RecordNotFoundError
from ..repositories.models import ModelsRepository
from ..repositories.runtime import RuntimeRepository

logger = structlog.get_logger(__name__)


class RuntimeService:
    """Service for runtime configs and the processes launched from them."""

    def __init__(self, repository: RuntimeRepository, models: ModelsRepository):
        self.repository = repository
        self.models = models

    @classmethod
    def from_database(cls, database: Database) -> "RuntimeService":
        return cls(RuntimeRepository(database), ModelsRepository(database))

    # --- configs -------------------------------------------------------------

    async def create_config(self, config: RuntimeConfig) -> RuntimeConfig:
        row = await self.repository.create_config(runtime_config_to_row(config))
        return row_to_runtime_config(row)

    async def get_config(self, config_id: UUID) -> Optional[RuntimeConfig]:
        row = await self.repository.get_config(config_id)
        return row_to_runtime_config(row) if row else None

    async def list_configs(self) -> List[RuntimeConfig]:
        return [row_to_runtime_config(row) for row in await self.repository.list_configs()]

    async def update_config(self, config: RuntimeConfig) -> RuntimeConfig:
        existing = await self.repository.get_config(config.id)
        if existing is None:
            raise RecordNotFoundError("RuntimeConfig", config.id)
        row = runtime_config_to_row(config)
        row.created_at = existing.created_at
        row = await self.repository.update_config(row)
        return row_to_runtime_config(row)

    async def delete_config(self, config_id: UUID) -> None:
        if not await self.repository.delete_config(config_id):
            raise RecordNotFoundError("RuntimeConfig", config_id)

    # --- runtimes ------------------------------------------------------------

    async def create_runtime(self, runtime: ModelRuntime) -> ModelRuntime:
        """Register a runtime for an existing model and config."""
        if await self.models.get_model_by_id(runtime.model_id) is None:
            raise ModelNotFoundError(runtime.model_id)
        if await self.repository.get_config(runtime.runtime_config_id) is None:
            raise RecordNotFoundError("RuntimeConfig", runtime.runtime_config_id)

        row = await self.repository.create_runtime(model_runtime_to_row(runtime))
        logger.info(
            "runtime_created",
            runtime_id=str(row.id),
            model_id=str(row.model_id),
            port=row.port,
        )
        return row_to_model_runtime(row)

    async def get_runtime(self, runtime_id: UUID) -> Optional[ModelRuntime]:
        row = await self.repository.get_runtime(runtime_id)
        return row_to_model_runtime(row) if row else None

    async def list_runtimes_for_model(self, model_id: UUID) -> List[ModelRuntime]:
        rows = await self.repository.get_runtimes_by_model_id(model_id)
        return [row_to_model_runtime(row) for row in rows]

    async def list_runtimes_by_status(self, status: ModelStatus) -> List[ModelRuntime]:
        rows = await self.repository.list_runtimes_by_status(status.value)
        return [row_to_model_runtime(row) for row in rows]

    async def update_runtime(self, runtime: ModelRuntime) -> ModelRuntime:
        existing = await self.repository.get_runtime(runtime.id)
        if existing is None:
            raise RecordNotFoundError("ModelRuntime", runtime.id)
        row = model_runtime_to_row(runtime)
        row.created_at = existing.created_at
        row = await self.repository.update_runtime(row)
        return row_to_model_runtime(row)

    async def set_runtime_status(
        self, runtime_id: UUID, status: ModelStatus
    ) -> ModelRuntime:
        """Move a runtime to ``status``, stamping started_at / stopped_at."""
        row = await self.repository.get_runtime(runtime_id)
        if row is None:
            raise RecordNotFoundError("ModelRuntime", runtime_id)

        runtime = row_to_model_runtime(row)
        update = {"status": status}
        if status == ModelStatus.RUNNING:
            update["started_at"] = utc_now()
        elif status == ModelStatus.STOPPED:
            update["stopped_at"] = utc_now()
        runtime = runtime.model_copy(update=update)

        await self.repository.update_runtime(model_runtime_to_row(runtime))
        logger.info("runtime_status_changed", runtime_id=str(runtime_id), status=status.value)
        return runtime

    async def delete_runtime(self, runtime_id: UUID) -> None:
        if not await self.repository.delete_runtime(runtime_id):
            raise RecordNotFoundError("ModelRuntime", runtime_id)

    # --- metrics and events --------------------------------------------------

    async def record_metrics(self, metrics: RuntimeMetrics) -> RuntimeMetrics:
        row = await self.repository.record_metrics(runtime_metrics_to_row(metrics))
        return row_to_runtime_metrics(row)

    async def metrics_history(
        self, runtime_id: UUID, start: datetime, end: datetime
    ) -> List[RuntimeMetrics]:
        rows = await self.repository.metrics_history(runtime_id, start, end)
        return [row_to_runtime_metrics(row) for row in rows]

    async def record_event(self, event: RuntimeEvent) -> RuntimeEvent:
        row = await self.repository.record_event(runtime_event_to_row(event))
        return row_to_runtime_event(row)

    async def latest_events(
        self, runtime_id: UUID, limit: Optional[int] = None
    ) -> List[RuntimeEvent]:
        rows = await self.repository.latest_events(runtime_id, limit)
        return [row_to_runtime_event(row) for row in rows]
