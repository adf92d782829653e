"""
Tests for RuntimeService and the runtime repository behind it.
"""

import uuid
from datetime import timedelta

import pytest

from model_registry.domain import (
    EventSeverity,
    ModelStatus,
    RuntimeEvent,
    RuntimeEventType,
    RuntimeMetrics,
)
from model_registry.errors import ConflictError, ModelNotFoundError, RecordNotFoundError
from model_registry.services import RuntimeService

from factories import at, make_config, make_model, make_runtime


@pytest.fixture
def runtime_service(database) -> RuntimeService:
    return RuntimeService.from_database(database)


async def _setup(models_service, runtime_service):
    model = await models_service.create_model(make_model())
    config = await runtime_service.create_config(make_config())
    return model, config


class TestRuntimeConfigs:
    @pytest.mark.asyncio
    async def test_round_trip(self, runtime_service):
        config = await runtime_service.create_config(make_config())

        stored = await runtime_service.get_config(config.id)
        assert stored == config
        assert stored.stop_sequences == ["</s>"]
        assert stored.custom_params == {"threads": 8}

    @pytest.mark.asyncio
    async def test_list_sorted_by_name(self, runtime_service):
        await runtime_service.create_config(make_config("zeta"))
        await runtime_service.create_config(make_config("alpha"))

        assert [c.name for c in await runtime_service.list_configs()] == ["alpha", "zeta"]

    @pytest.mark.asyncio
    async def test_update_and_delete(self, runtime_service):
        config = await runtime_service.create_config(make_config())
        await runtime_service.update_config(config.model_copy(update={"temperature": 0.1}))
        assert (await runtime_service.get_config(config.id)).temperature == 0.1

        await runtime_service.delete_config(config.id)
        assert await runtime_service.get_config(config.id) is None
        with pytest.raises(RecordNotFoundError):
            await runtime_service.delete_config(config.id)

    @pytest.mark.asyncio
    async def test_update_missing(self, runtime_service):
        with pytest.raises(RecordNotFoundError) as excinfo:
            await runtime_service.update_config(make_config())
        assert excinfo.value.kind == "RuntimeConfig"

    @pytest.mark.asyncio
    async def test_update_keeps_created_at(self, runtime_service):
        config = await runtime_service.create_config(make_config(created_at=at(0)))

        updated = await runtime_service.update_config(
            config.model_copy(update={"temperature": 0.2, "created_at": at(99)})
        )
        stored = await runtime_service.get_config(config.id)

        assert updated.created_at == at(0)
        assert stored.created_at == at(0)
        assert stored.temperature == 0.2


class TestRuntimes:
    @pytest.mark.asyncio
    async def test_create_and_list(self, models_service, runtime_service):
        model, config = await _setup(models_service, runtime_service)
        first = await runtime_service.create_runtime(make_runtime(model, config, port=9001))
        second = await runtime_service.create_runtime(
            make_runtime(model, config, port=9000, name="second")
        )

        listed = await runtime_service.list_runtimes_for_model(model.id)
        assert [r.id for r in listed] == [second.id, first.id]
        assert listed[1].environment == {"CUDA_VISIBLE_DEVICES": "0"}

    @pytest.mark.asyncio
    async def test_create_requires_model_and_config(self, models_service, runtime_service):
        model, config = await _setup(models_service, runtime_service)

        with pytest.raises(ModelNotFoundError):
            await runtime_service.create_runtime(make_runtime(make_model("ghost"), config))
        with pytest.raises(RecordNotFoundError):
            await runtime_service.create_runtime(make_runtime(model, make_config()))

    @pytest.mark.asyncio
    async def test_same_port_twice_conflicts(self, models_service, runtime_service):
        model, config = await _setup(models_service, runtime_service)
        await runtime_service.create_runtime(make_runtime(model, config))
        with pytest.raises(ConflictError):
            await runtime_service.create_runtime(make_runtime(model, config))

    @pytest.mark.asyncio
    async def test_status_transitions(self, models_service, runtime_service):
        model, config = await _setup(models_service, runtime_service)
        runtime = await runtime_service.create_runtime(make_runtime(model, config))

        running = await runtime_service.set_runtime_status(runtime.id, ModelStatus.RUNNING)
        assert running.started_at is not None
        by_status = await runtime_service.list_runtimes_by_status(ModelStatus.RUNNING)
        assert [r.id for r in by_status] == [runtime.id]

        stopped = await runtime_service.set_runtime_status(runtime.id, ModelStatus.STOPPED)
        stored = await runtime_service.get_runtime(runtime.id)
        assert stored.status == ModelStatus.STOPPED
        assert stored.stopped_at == stopped.stopped_at
        assert stored.started_at == running.started_at

    @pytest.mark.asyncio
    async def test_update_keeps_created_at(self, models_service, runtime_service):
        model, config = await _setup(models_service, runtime_service)
        runtime = await runtime_service.create_runtime(
            make_runtime(model, config, created_at=at(0))
        )

        updated = await runtime_service.update_runtime(
            runtime.model_copy(update={"port": 9001, "created_at": at(99)})
        )
        stored = await runtime_service.get_runtime(runtime.id)

        assert updated.created_at == at(0)
        assert stored.created_at == at(0)
        assert stored.port == 9001

    @pytest.mark.asyncio
    async def test_missing_runtime(self, runtime_service):
        with pytest.raises(RecordNotFoundError):
            await runtime_service.set_runtime_status(uuid.uuid4(), ModelStatus.RUNNING)
        with pytest.raises(RecordNotFoundError):
            await runtime_service.delete_runtime(uuid.uuid4())

    @pytest.mark.asyncio
    async def test_deleting_model_removes_runtimes(self, models_service, runtime_service):
        model, config = await _setup(models_service, runtime_service)
        runtime = await runtime_service.create_runtime(make_runtime(model, config))

        await models_service.delete_model(model.id)
        assert await runtime_service.get_runtime(runtime.id) is None


class TestMetricsAndEvents:
    @pytest.mark.asyncio
    async def test_metrics_history_window(self, models_service, runtime_service):
        model, config = await _setup(models_service, runtime_service)
        runtime = await runtime_service.create_runtime(make_runtime(model, config))
        for minute in range(5):
            await runtime_service.record_metrics(
                RuntimeMetrics(
                    runtime_id=runtime.id,
                    timestamp=at(minute),
                    cpu_usage_percent=10.0 * minute,
                    memory_usage_mb=512,
                    total_requests=minute,
                )
            )

        history = await runtime_service.metrics_history(runtime.id, at(1), at(3))
        assert [m.total_requests for m in history] == [1, 2, 3]
        assert history[0].timestamp == at(1)

    @pytest.mark.asyncio
    async def test_latest_events(self, models_service, runtime_service):
        model, config = await _setup(models_service, runtime_service)
        runtime = await runtime_service.create_runtime(make_runtime(model, config))
        for minute, kind in enumerate(
            [RuntimeEventType.STARTED, RuntimeEventType.CRASHED, RuntimeEventType.RESTARTED]
        ):
            await runtime_service.record_event(
                RuntimeEvent(
                    runtime_id=runtime.id,
                    event_type=kind,
                    timestamp=at(minute),
                    message=kind.value,
                    details={"attempt": minute},
                    severity=EventSeverity.WARNING,
                )
            )

        latest = await runtime_service.latest_events(runtime.id, limit=2)
        assert [e.event_type for e in latest] == [
            RuntimeEventType.RESTARTED,
            RuntimeEventType.CRASHED,
        ]
        assert latest[0].details == {"attempt": 2}
        assert len(await runtime_service.latest_events(runtime.id)) == 3

    @pytest.mark.asyncio
    async def test_metrics_outside_window(self, models_service, runtime_service):
        model, config = await _setup(models_service, runtime_service)
        runtime = await runtime_service.create_runtime(make_runtime(model, config))
        await runtime_service.record_metrics(
            RuntimeMetrics(runtime_id=runtime.id, timestamp=at(0))
        )

        later = at(0) + timedelta(hours=1)
        assert await runtime_service.metrics_history(runtime.id, later, later) == []
