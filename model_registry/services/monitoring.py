"""Monitoring and global configuration services."""

from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional
from uuid import UUID

import structlog

from ..converters.monitoring import (
    alert_event_to_row,
    application_metrics_to_row,
    global_config_to_row,
    model_metrics_to_row,
    row_to_alert_event,
    row_to_application_metrics,
    row_to_global_config,
    row_to_model_metrics,
    row_to_system_metrics,
    system_metrics_to_row,
)
from ..db.base import Database
from ..domain.enums import AlertStatus
from ..domain.monitoring import (
    AlertEvent,
    ApplicationMetrics,
    GlobalConfig,
    ModelMetrics,
    SystemMetrics,
)
from ..domain.primitives import utc_now
from ..errors import RecordNotFoundError
from ..repositories.monitoring import (
    ConfigRepository,
    MonitoringRepository,
    RetentionPolicy,
)

logger = structlog.get_logger(__name__)

SUMMARY_WINDOW = timedelta(hours=24)


class MonitoringService:
    """Metrics samples, alerts and retention."""

    def __init__(self, repository: MonitoringRepository):
        self.repository = repository

    @classmethod
    def from_database(cls, database: Database) -> "MonitoringService":
        return cls(MonitoringRepository(database))

    # --- metrics -------------------------------------------------------------

    async def record_system_metrics(self, metrics: SystemMetrics) -> SystemMetrics:
        row = await self.repository.record_system_metrics(system_metrics_to_row(metrics))
        return row_to_system_metrics(row)

    async def system_metrics_history(
        self, start: datetime, end: datetime
    ) -> List[SystemMetrics]:
        rows = await self.repository.system_metrics_history(start, end)
        return [row_to_system_metrics(row) for row in rows]

    async def record_application_metrics(
        self, metrics: ApplicationMetrics
    ) -> ApplicationMetrics:
        row = await self.repository.record_application_metrics(
            application_metrics_to_row(metrics)
        )
        return row_to_application_metrics(row)

    async def application_metrics_history(
        self, start: datetime, end: datetime
    ) -> List[ApplicationMetrics]:
        rows = await self.repository.application_metrics_history(start, end)
        return [row_to_application_metrics(row) for row in rows]

    async def record_model_metrics(self, metrics: ModelMetrics) -> ModelMetrics:
        row = await self.repository.record_model_metrics(model_metrics_to_row(metrics))
        return row_to_model_metrics(row)

    async def model_metrics_history(
        self, model_id: UUID, start: datetime, end: datetime
    ) -> List[ModelMetrics]:
        rows = await self.repository.model_metrics_history(model_id, start, end)
        return [row_to_model_metrics(row) for row in rows]

    async def model_summary(
        self, model_id: UUID, since: Optional[datetime] = None
    ) -> Dict[str, Any]:
        """Totals for one model, over the last 24 hours unless ``since`` is given."""
        since = since or utc_now() - SUMMARY_WINDOW
        return await self.repository.summarize_model_metrics(model_id, since)

    # --- alerts --------------------------------------------------------------

    async def raise_alert(self, alert: AlertEvent) -> AlertEvent:
        row = await self.repository.create_alert(alert_event_to_row(alert))
        logger.warning(
            "alert_triggered",
            alert_id=str(row.id),
            alert_type=row.alert_type,
            severity=row.severity,
            resource=row.resource_name,
        )
        return row_to_alert_event(row)

    async def _set_alert_status(self, alert_id: UUID, status: AlertStatus) -> AlertEvent:
        row = await self.repository.get_alert(alert_id)
        if row is None:
            raise RecordNotFoundError("AlertEvent", alert_id)

        update = {"status": status}
        if status == AlertStatus.RESOLVED:
            update["resolved_at"] = utc_now()
        alert = row_to_alert_event(row).model_copy(update=update)
        await self.repository.update_alert(alert_event_to_row(alert))
        logger.info("alert_status_changed", alert_id=str(alert_id), status=status.value)
        return alert

    async def acknowledge_alert(self, alert_id: UUID) -> AlertEvent:
        return await self._set_alert_status(alert_id, AlertStatus.ACKNOWLEDGED)

    async def resolve_alert(self, alert_id: UUID) -> AlertEvent:
        return await self._set_alert_status(alert_id, AlertStatus.RESOLVED)

    async def active_alerts(self) -> List[AlertEvent]:
        return [row_to_alert_event(row) for row in await self.repository.active_alerts()]

    async def alert_history(self, limit: Optional[int] = None) -> List[AlertEvent]:
        rows = await self.repository.alert_history(limit)
        return [row_to_alert_event(row) for row in rows]

    # --- retention -----------------------------------------------------------

    async def purge_old_data(
        self, retention: Optional[RetentionPolicy] = None
    ) -> Dict[str, int]:
        return await self.repository.purge_metrics_before(retention)


class ConfigService:
    def __init__(self, repository: ConfigRepository):
        self.repository = repository

    @classmethod
    def from_database(cls, database: Database) -> "ConfigService":
        return cls(ConfigRepository(database))

    async def save(self, config: GlobalConfig) -> GlobalConfig:
        row = await self.repository.save(global_config_to_row(config))
        logger.info("config_saved", config_id=str(row.id), version=row.version)
        return row_to_global_config(row)

    async def latest(self) -> Optional[GlobalConfig]:
        row = await self.repository.latest()
        return row_to_global_config(row) if row else None

    async def history(self, limit: Optional[int] = None) -> List[GlobalConfig]:
        return [row_to_global_config(row) for row in await self.repository.history(limit)]
