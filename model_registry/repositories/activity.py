"""Repositories for row-only records: tasks, downloads, sessions and API usage."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import Float, case, delete, desc, func, literal, or_, select, update

from ..db.activity_tables import (
    DOWNLOAD_STATUSES,
    TASK_STATUSES,
    ApiUsageRow,
    DownloadTaskRow,
    TaskRow,
    UserSessionRow,
)
from ..db.types import UTCDateTime
from ..domain.primitives import utc_now
from .base import BaseRepository

tasks_table = TaskRow.__table__
downloads_table = DownloadTaskRow.__table__
sessions_table = UserSessionRow.__table__


def _check_status(status: str, allowed) -> None:
    if status not in allowed:
        raise ValueError(f"Unknown status {status!r}; expected one of {allowed}")


class TaskRepository(BaseRepository):
    # --- background tasks ----------------------------------------------------

    async def create_task(self, row: TaskRow) -> TaskRow:
        return await self._insert(row)

    async def get_task(self, task_id: UUID) -> Optional[TaskRow]:
        return await self._first(select(TaskRow).where(TaskRow.id == task_id))

    async def pending_tasks(
        self, limit: Optional[int] = None, now: Optional[datetime] = None
    ) -> List[TaskRow]:
        """Pending tasks that are due, highest priority first, then oldest."""
        now = now or utc_now()
        stmt = (
            select(TaskRow)
            .where(
                TaskRow.status == "pending",
                or_(TaskRow.scheduled_at.is_(None), TaskRow.scheduled_at <= now),
            )
            .order_by(desc(TaskRow.priority), TaskRow.created_at)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        return await self._all(stmt)

    async def set_task_status(self, task_id: UUID, status: str) -> bool:
        _check_status(status, TASK_STATUSES)
        values = {"status": status}
        if status == "running":
            values["started_at"] = utc_now()
        stmt = update(tasks_table).where(tasks_table.c.id == task_id).values(values)
        return await self._execute(stmt) > 0

    async def complete_task(self, task_id: UUID) -> bool:
        stmt = (
            update(tasks_table)
            .where(tasks_table.c.id == task_id)
            .values(status="completed", completed_at=utc_now(), error_message=None)
        )
        return await self._execute(stmt) > 0

    async def fail_task(self, task_id: UUID, error_message: str) -> bool:
        """Count a failed attempt; the task goes back to pending while retries remain."""
        retries = tasks_table.c.retry_count + 1
        stmt = (
            update(tasks_table)
            .where(tasks_table.c.id == task_id)
            .values(
                retry_count=retries,
                error_message=error_message,
                status=case(
                    (retries < tasks_table.c.max_retries, "pending"), else_="failed"
                ),
            )
        )
        return await self._execute(stmt) > 0

    # --- downloads -----------------------------------------------------------

    async def create_download(self, row: DownloadTaskRow) -> DownloadTaskRow:
        return await self._insert(row)

    async def get_download(self, download_id: UUID) -> Optional[DownloadTaskRow]:
        return await self._first(
            select(DownloadTaskRow).where(DownloadTaskRow.id == download_id)
        )

    async def list_downloads_by_model(self, model_id: UUID) -> List[DownloadTaskRow]:
        stmt = (
            select(DownloadTaskRow)
            .where(DownloadTaskRow.model_id == model_id)
            .order_by(desc(DownloadTaskRow.created_at))
        )
        return await self._all(stmt)

    async def update_download_progress(
        self,
        download_id: UUID,
        downloaded_size: int,
        speed_bps: int = 0,
        estimated_time_remaining: Optional[int] = None,
    ) -> bool:
        """Record bytes received; progress_percent is derived from total_size."""
        progress = case(
            (
                downloads_table.c.total_size > 0,
                literal(downloaded_size, Float) * 100.0 / downloads_table.c.total_size,
            ),
            else_=0.0,
        )
        stmt = (
            update(downloads_table)
            .where(downloads_table.c.id == download_id)
            .values(
                downloaded_size=downloaded_size,
                download_speed_bps=speed_bps,
                estimated_time_remaining=estimated_time_remaining,
                progress_percent=progress,
            )
        )
        return await self._execute(stmt) > 0

    async def set_download_status(
        self, download_id: UUID, status: str, error_message: Optional[str] = None
    ) -> bool:
        _check_status(status, DOWNLOAD_STATUSES)
        now = utc_now()
        values = {"status": status, "error_message": error_message}
        if status == "downloading":
            values["started_at"] = func.coalesce(
                downloads_table.c.started_at, literal(now, UTCDateTime())
            )
        if status == "completed":
            values["completed_at"] = now
        stmt = (
            update(downloads_table)
            .where(downloads_table.c.id == download_id)
            .values(values)
        )
        return await self._execute(stmt) > 0


class SessionRepository(BaseRepository):
    # --- sessions ------------------------------------------------------------

    async def create_session(self, row: UserSessionRow) -> UserSessionRow:
        return await self._insert(row)

    async def get_by_token(self, session_token: str) -> Optional[UserSessionRow]:
        return await self._first(
            select(UserSessionRow).where(UserSessionRow.session_token == session_token)
        )

    async def touch(self, session_token: str) -> bool:
        stmt = (
            update(sessions_table)
            .where(sessions_table.c.session_token == session_token)
            .values(last_accessed=utc_now())
        )
        return await self._execute(stmt) > 0

    async def delete_session(self, session_token: str) -> bool:
        stmt = delete(sessions_table).where(
            sessions_table.c.session_token == session_token
        )
        return await self._execute(stmt) > 0

    async def cleanup_expired(self, now: Optional[datetime] = None) -> int:
        stmt = delete(sessions_table).where(
            sessions_table.c.expires_at < (now or utc_now())
        )
        return await self._execute(stmt)

    # --- API usage -----------------------------------------------------------

    async def record_api_usage(self, row: ApiUsageRow) -> ApiUsageRow:
        return await self._insert(row)

    async def api_usage_between(
        self, start: datetime, end: datetime, endpoint: Optional[str] = None
    ) -> List[ApiUsageRow]:
        stmt = select(ApiUsageRow).where(
            ApiUsageRow.timestamp >= start, ApiUsageRow.timestamp <= end
        )
        if endpoint is not None:
            stmt = stmt.where(ApiUsageRow.endpoint == endpoint)
        return await self._all(stmt.order_by(ApiUsageRow.timestamp))
