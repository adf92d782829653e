"""Repositories for monitoring data and global config snapshots."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional
from uuid import UUID

import structlog
from sqlalchemy import delete, desc, func, select

from ..db.activity_tables import ApiUsageRow, UserSessionRow
from ..db.monitoring_tables import (
    AlertEventRow,
    ApplicationMetricsRow,
    GlobalConfigRow,
    ModelMetricsRow,
    SystemMetricsRow,
)
from ..db.runtime_tables import RuntimeMetricsRow
from ..domain.primitives import utc_now
from .base import BaseRepository

logger = structlog.get_logger(__name__)

RESOLVED = "Resolved"


@dataclass(frozen=True)
class RetentionPolicy:
    """How long each kind of sample is kept."""

    system_metrics: timedelta = timedelta(days=30)
    application_metrics: timedelta = timedelta(days=30)
    runtime_metrics: timedelta = timedelta(days=7)
    api_usage: timedelta = timedelta(days=90)


class MonitoringRepository(BaseRepository):
    # --- samples -------------------------------------------------------------

    async def record_system_metrics(self, row: SystemMetricsRow) -> SystemMetricsRow:
        return await self._insert(row)

    async def system_metrics_history(
        self, start: datetime, end: datetime
    ) -> List[SystemMetricsRow]:
        stmt = (
            select(SystemMetricsRow)
            .where(SystemMetricsRow.timestamp >= start, SystemMetricsRow.timestamp <= end)
            .order_by(SystemMetricsRow.timestamp)
        )
        return await self._all(stmt)

    async def record_application_metrics(
        self, row: ApplicationMetricsRow
    ) -> ApplicationMetricsRow:
        return await self._insert(row)

    async def application_metrics_history(
        self, start: datetime, end: datetime
    ) -> List[ApplicationMetricsRow]:
        stmt = (
            select(ApplicationMetricsRow)
            .where(
                ApplicationMetricsRow.timestamp >= start,
                ApplicationMetricsRow.timestamp <= end,
            )
            .order_by(ApplicationMetricsRow.timestamp)
        )
        return await self._all(stmt)

    async def record_model_metrics(self, row: ModelMetricsRow) -> ModelMetricsRow:
        return await self._insert(row)

    async def model_metrics_history(
        self, model_id: UUID, start: datetime, end: datetime
    ) -> List[ModelMetricsRow]:
        stmt = (
            select(ModelMetricsRow)
            .where(
                ModelMetricsRow.model_id == model_id,
                ModelMetricsRow.timestamp >= start,
                ModelMetricsRow.timestamp <= end,
            )
            .order_by(ModelMetricsRow.timestamp)
        )
        return await self._all(stmt)

    async def summarize_model_metrics(
        self, model_id: UUID, since: datetime
    ) -> Dict[str, Any]:
        """Request totals and averages for one model since ``since``."""
        stmt = select(
            func.coalesce(func.sum(ModelMetricsRow.total_requests), 0),
            func.coalesce(func.sum(ModelMetricsRow.successful_requests), 0),
            func.coalesce(func.sum(ModelMetricsRow.failed_requests), 0),
            func.coalesce(func.avg(ModelMetricsRow.avg_inference_time_ms), 0.0),
            func.coalesce(func.avg(ModelMetricsRow.tokens_per_second), 0.0),
            func.max(ModelMetricsRow.timestamp),
        ).where(ModelMetricsRow.model_id == model_id, ModelMetricsRow.timestamp >= since)
        rows = await self._tuples(stmt)
        total, successful, failed, avg_time, avg_tps, last = rows[0]
        return {
            "total_requests": int(total),
            "successful_requests": int(successful),
            "failed_requests": int(failed),
            "avg_inference_time_ms": float(avg_time),
            "avg_tokens_per_second": float(avg_tps),
            "last_activity": last,
        }

    # --- alerts --------------------------------------------------------------

    async def create_alert(self, row: AlertEventRow) -> AlertEventRow:
        return await self._insert(row)

    async def get_alert(self, alert_id: UUID) -> Optional[AlertEventRow]:
        return await self._first(select(AlertEventRow).where(AlertEventRow.id == alert_id))

    async def update_alert(self, row: AlertEventRow) -> AlertEventRow:
        return await self._update(row)

    async def active_alerts(self) -> List[AlertEventRow]:
        stmt = (
            select(AlertEventRow)
            .where(AlertEventRow.status != RESOLVED)
            .order_by(desc(AlertEventRow.triggered_at))
        )
        return await self._all(stmt)

    async def alert_history(self, limit: Optional[int] = None) -> List[AlertEventRow]:
        stmt = (
            select(AlertEventRow)
            .order_by(desc(AlertEventRow.triggered_at))
            .limit(limit or self.settings.events_default_limit)
        )
        return await self._all(stmt)

    # --- retention -----------------------------------------------------------

    async def purge_metrics_before(
        self,
        retention: Optional[RetentionPolicy] = None,
        now: Optional[datetime] = None,
    ) -> Dict[str, int]:
        """Delete samples older than their retention window and expired sessions.

        Returns the number of rows deleted per table.
        """
        retention = retention or RetentionPolicy()
        now = now or utc_now()

        targets = (
            (SystemMetricsRow.__table__, "timestamp", retention.system_metrics),
            (ApplicationMetricsRow.__table__, "timestamp", retention.application_metrics),
            (RuntimeMetricsRow.__table__, "timestamp", retention.runtime_metrics),
            (ApiUsageRow.__table__, "timestamp", retention.api_usage),
            (UserSessionRow.__table__, "expires_at", timedelta(0)),
        )
        deleted = {}
        for table, column, window in targets:
            stmt = delete(table).where(table.c[column] < now - window)
            deleted[table.name] = await self._execute(stmt)

        logger.info("metrics_purged", **deleted)
        return deleted


class ConfigRepository(BaseRepository):
    async def save(self, row: GlobalConfigRow) -> GlobalConfigRow:
        return await self._insert(row)

    async def latest(self) -> Optional[GlobalConfigRow]:
        return await self._first(
            select(GlobalConfigRow).order_by(desc(GlobalConfigRow.created_at)).limit(1)
        )

    async def history(self, limit: Optional[int] = None) -> List[GlobalConfigRow]:
        stmt = select(GlobalConfigRow).order_by(desc(GlobalConfigRow.created_at))
        if limit is not None:
            stmt = stmt.limit(limit)
        return await self._all(stmt)
