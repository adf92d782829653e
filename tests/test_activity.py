"""
Tests for the task, download, session and API-usage repositories.
"""

import json
import uuid
from datetime import timedelta

import pytest

from model_registry.converters import model_to_row
from model_registry.db.activity_tables import (
    ApiUsageRow,
    DownloadTaskRow,
    TaskRow,
    UserSessionRow,
)
from model_registry.errors import ConflictError
from model_registry.repositories import ModelsRepository, SessionRepository, TaskRepository

from factories import at, make_model


@pytest.fixture
def tasks(database) -> TaskRepository:
    return TaskRepository(database)


@pytest.fixture
def sessions(database) -> SessionRepository:
    return SessionRepository(database)


def make_task(**overrides) -> TaskRow:
    values = dict(task_type="sync_source", payload=json.dumps({"source": "hf"}))
    values.update(overrides)
    return TaskRow(**values)


def make_usage(minute: int, endpoint: str = "/models") -> ApiUsageRow:
    return ApiUsageRow(
        endpoint=endpoint,
        method="GET",
        timestamp=at(minute),
        response_time_ms=12,
        status_code=200,
        request_size_bytes=0,
        response_size_bytes=512,
        ip_address="10.0.0.1",
    )


class TestTasks:
    @pytest.mark.asyncio
    async def test_defaults_applied(self, tasks):
        task = await tasks.create_task(make_task())

        stored = await tasks.get_task(task.id)
        assert stored.status == "pending"
        assert stored.priority == 0
        assert stored.retry_count == 0
        assert stored.max_retries == 3

    @pytest.mark.asyncio
    async def test_pending_order(self, tasks):
        low = await tasks.create_task(make_task(priority=1, created_at=at(0)))
        high = await tasks.create_task(make_task(priority=5, created_at=at(2)))
        older_high = await tasks.create_task(make_task(priority=5, created_at=at(1)))
        await tasks.create_task(make_task(scheduled_at=at(60 * 24 * 3650)))

        pending = await tasks.pending_tasks(now=at(10))
        assert [t.id for t in pending] == [older_high.id, high.id, low.id]
        assert len(await tasks.pending_tasks(limit=1, now=at(10))) == 1

    @pytest.mark.asyncio
    async def test_status_changes(self, tasks):
        task = await tasks.create_task(make_task())

        assert await tasks.set_task_status(task.id, "running")
        assert (await tasks.get_task(task.id)).started_at is not None

        assert await tasks.complete_task(task.id)
        stored = await tasks.get_task(task.id)
        assert stored.status == "completed"
        assert stored.completed_at is not None

    @pytest.mark.asyncio
    async def test_unknown_status_rejected(self, tasks):
        with pytest.raises(ValueError):
            await tasks.set_task_status(uuid.uuid4(), "exploded")

    @pytest.mark.asyncio
    async def test_fail_retries_then_fails(self, tasks):
        task = await tasks.create_task(make_task(max_retries=2))

        await tasks.fail_task(task.id, "timeout")
        first = await tasks.get_task(task.id)
        await tasks.fail_task(task.id, "timeout again")
        second = await tasks.get_task(task.id)

        assert (first.status, first.retry_count) == ("pending", 1)
        assert (second.status, second.retry_count) == ("failed", 2)
        assert second.error_message == "timeout again"
        assert not await tasks.fail_task(uuid.uuid4(), "missing")


class TestDownloads:
    @pytest.mark.asyncio
    async def test_progress_and_status(self, database, tasks):
        model = make_model()
        await ModelsRepository(database).create_model(model_to_row(model))
        download = await tasks.create_download(
            DownloadTaskRow(
                model_id=model.id,
                url="https://cdn/model.gguf",
                file_path="/tmp/model.gguf",
                total_size=2000,
            )
        )

        assert await tasks.set_download_status(download.id, "downloading")
        started = (await tasks.get_download(download.id)).started_at
        assert started is not None

        await tasks.update_download_progress(download.id, 500, speed_bps=100)
        await tasks.set_download_status(download.id, "downloading")
        stored = await tasks.get_download(download.id)
        assert stored.progress_percent == pytest.approx(25.0)
        assert stored.downloaded_size == 500
        assert stored.started_at == started

        await tasks.set_download_status(download.id, "completed")
        done = await tasks.get_download(download.id)
        assert done.status == "completed"
        assert done.completed_at is not None
        assert [d.id for d in await tasks.list_downloads_by_model(model.id)] == [download.id]

    @pytest.mark.asyncio
    async def test_unknown_download_status(self, tasks):
        with pytest.raises(ValueError):
            await tasks.set_download_status(uuid.uuid4(), "teleporting")


class TestSessions:
    @pytest.mark.asyncio
    async def test_lifecycle(self, sessions):
        session = await sessions.create_session(
            UserSessionRow(
                user_id="u1",
                session_token="tok-1",
                expires_at=at(60),
                ip_address="10.0.0.1",
            )
        )

        stored = await sessions.get_by_token("tok-1")
        assert stored.id == session.id
        assert stored.is_active is True

        assert await sessions.touch("tok-1")
        assert await sessions.delete_session("tok-1")
        assert await sessions.get_by_token("tok-1") is None
        assert not await sessions.touch("tok-1")

    @pytest.mark.asyncio
    async def test_duplicate_token(self, sessions):
        row = dict(user_id="u1", session_token="same", expires_at=at(60), ip_address="::1")
        await sessions.create_session(UserSessionRow(**row))
        with pytest.raises(ConflictError):
            await sessions.create_session(UserSessionRow(**row))

    @pytest.mark.asyncio
    async def test_cleanup_expired(self, sessions):
        for index, minutes in enumerate([-5, -1, 30]):
            await sessions.create_session(
                UserSessionRow(
                    user_id="u1",
                    session_token=f"tok-{index}",
                    expires_at=at(0) + timedelta(minutes=minutes),
                    ip_address="10.0.0.1",
                )
            )

        assert await sessions.cleanup_expired(now=at(0)) == 2
        assert await sessions.get_by_token("tok-2") is not None

    @pytest.mark.asyncio
    async def test_api_usage_range(self, sessions):
        for minute in range(4):
            await sessions.record_api_usage(make_usage(minute))
        await sessions.record_api_usage(make_usage(2, endpoint="/health"))

        window = await sessions.api_usage_between(at(1), at(2))
        models_only = await sessions.api_usage_between(at(0), at(3), endpoint="/models")

        assert len(window) == 3
        assert [u.timestamp for u in models_only] == [at(0), at(1), at(2), at(3)]
