"""Converters for runtime configs, runtimes, runtime metrics and events."""

from ..db.runtime_tables import (
    ModelRuntimeRow,
    RuntimeConfigRow,
    RuntimeEventRow,
    RuntimeMetricsRow,
)
from ..domain.enums import EventSeverity, ModelStatus, RuntimeEventType, parse_enum
from ..domain.runtime import ModelRuntime, RuntimeConfig, RuntimeEvent, RuntimeMetrics
from .common import (
    INT_LIST,
    JSON_ANY,
    JSON_OBJECT,
    STR_LIST,
    STR_MAP,
    build,
    dump_json,
    load_json,
    load_optional_json,
    optional_text,
    to_signed,
    to_unsigned,
)

# Optional u32 knobs stored as 32-bit integers
_CONFIG_INT_FIELDS = (
    "max_context_length",
    "top_k",
    "max_tokens",
    "batch_size",
    "max_concurrent_requests",
)


def runtime_config_to_row(config: RuntimeConfig) -> RuntimeConfigRow:
    for device_id in config.gpu_device_ids:
        to_signed("gpu_device_ids", device_id, 32)
    return RuntimeConfigRow(
        id=config.id,
        name=config.name,
        temperature=config.temperature,
        top_p=config.top_p,
        stop_sequences=dump_json(STR_LIST, config.stop_sequences),
        gpu_device_ids=dump_json(INT_LIST, config.gpu_device_ids),
        memory_limit_mb=to_signed("memory_limit_mb", config.memory_limit_mb, 64),
        enable_streaming=config.enable_streaming,
        custom_params=dump_json(JSON_OBJECT, config.custom_params),
        created_at=config.created_at,
        updated_at=config.updated_at,
        **{
            field: to_signed(field, getattr(config, field), 32)
            for field in _CONFIG_INT_FIELDS
        },
    )


def row_to_runtime_config(row: RuntimeConfigRow) -> RuntimeConfig:
    return build(
        RuntimeConfig,
        id=row.id,
        name=row.name,
        temperature=row.temperature,
        top_p=row.top_p,
        stop_sequences=load_json(STR_LIST, "stop_sequences", row.stop_sequences),
        gpu_device_ids=load_json(INT_LIST, "gpu_device_ids", row.gpu_device_ids),
        memory_limit_mb=to_unsigned("memory_limit_mb", row.memory_limit_mb, 64),
        enable_streaming=bool(row.enable_streaming),
        custom_params=load_json(JSON_OBJECT, "custom_params", row.custom_params),
        created_at=row.created_at,
        updated_at=row.updated_at,
        **{
            field: to_unsigned(field, getattr(row, field), 32)
            for field in _CONFIG_INT_FIELDS
        },
    )


def model_runtime_to_row(runtime: ModelRuntime) -> ModelRuntimeRow:
    return ModelRuntimeRow(
        id=runtime.id,
        model_id=runtime.model_id,
        runtime_config_id=runtime.runtime_config_id,
        name=runtime.name,
        port=to_signed("port", runtime.port, 32),
        process_id=to_signed("process_id", runtime.process_id, 32),
        started_at=runtime.started_at,
        stopped_at=runtime.stopped_at,
        status=runtime.status.value,
        health_endpoint=runtime.health_endpoint,
        api_endpoint=runtime.api_endpoint,
        log_file=runtime.log_file,
        environment=dump_json(STR_MAP, runtime.environment),
        created_at=runtime.created_at,
        updated_at=runtime.updated_at,
    )


def row_to_model_runtime(row: ModelRuntimeRow) -> ModelRuntime:
    return build(
        ModelRuntime,
        id=row.id,
        model_id=row.model_id,
        runtime_config_id=row.runtime_config_id,
        name=row.name,
        port=to_unsigned("port", row.port, 32),
        process_id=to_unsigned("process_id", row.process_id, 32),
        started_at=row.started_at,
        stopped_at=row.stopped_at,
        status=parse_enum(ModelStatus, "status", row.status),
        health_endpoint=row.health_endpoint,
        api_endpoint=row.api_endpoint,
        log_file=optional_text(row.log_file),
        environment=load_json(STR_MAP, "environment", row.environment),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def runtime_metrics_to_row(metrics: RuntimeMetrics) -> RuntimeMetricsRow:
    return RuntimeMetricsRow(
        id=metrics.id,
        runtime_id=metrics.runtime_id,
        timestamp=metrics.timestamp,
        cpu_usage_percent=metrics.cpu_usage_percent,
        memory_usage_mb=to_signed("memory_usage_mb", metrics.memory_usage_mb, 64),
        gpu_usage_percent=metrics.gpu_usage_percent,
        gpu_memory_usage_mb=to_signed(
            "gpu_memory_usage_mb", metrics.gpu_memory_usage_mb, 64
        ),
        active_connections=to_signed(
            "active_connections", metrics.active_connections, 32
        ),
        total_requests=to_signed("total_requests", metrics.total_requests, 64),
        successful_requests=to_signed(
            "successful_requests", metrics.successful_requests, 64
        ),
        failed_requests=to_signed("failed_requests", metrics.failed_requests, 64),
        avg_response_time_ms=metrics.avg_response_time_ms,
        throughput_rps=metrics.throughput_rps,
        queue_length=to_signed("queue_length", metrics.queue_length, 32),
    )


def row_to_runtime_metrics(row: RuntimeMetricsRow) -> RuntimeMetrics:
    return build(
        RuntimeMetrics,
        id=row.id,
        runtime_id=row.runtime_id,
        timestamp=row.timestamp,
        cpu_usage_percent=row.cpu_usage_percent,
        memory_usage_mb=to_unsigned("memory_usage_mb", row.memory_usage_mb, 64),
        gpu_usage_percent=row.gpu_usage_percent,
        gpu_memory_usage_mb=to_unsigned(
            "gpu_memory_usage_mb", row.gpu_memory_usage_mb, 64
        ),
        active_connections=to_unsigned("active_connections", row.active_connections, 32),
        total_requests=to_unsigned("total_requests", row.total_requests, 64),
        successful_requests=to_unsigned(
            "successful_requests", row.successful_requests, 64
        ),
        failed_requests=to_unsigned("failed_requests", row.failed_requests, 64),
        avg_response_time_ms=row.avg_response_time_ms,
        throughput_rps=row.throughput_rps,
        queue_length=to_unsigned("queue_length", row.queue_length, 32),
    )


def runtime_event_to_row(event: RuntimeEvent) -> RuntimeEventRow:
    return RuntimeEventRow(
        id=event.id,
        runtime_id=event.runtime_id,
        event_type=event.event_type.value,
        timestamp=event.timestamp,
        message=event.message,
        details=None if event.details is None else dump_json(JSON_ANY, event.details),
        severity=event.severity.value,
    )


def row_to_runtime_event(row: RuntimeEventRow) -> RuntimeEvent:
    return build(
        RuntimeEvent,
        id=row.id,
        runtime_id=row.runtime_id,
        event_type=parse_enum(RuntimeEventType, "event_type", row.event_type),
        timestamp=row.timestamp,
        message=row.message,
        details=load_optional_json(JSON_ANY, "details", row.details),
        severity=parse_enum(EventSeverity, "severity", row.severity),
    )
