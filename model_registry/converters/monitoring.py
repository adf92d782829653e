"""Converters for global configs, metrics samples and alerts."""

from ..db.monitoring_tables import (
    AlertEventRow,
    ApplicationMetricsRow,
    GlobalConfigRow,
    ModelMetricsRow,
    SystemMetricsRow,
)
from ..domain.enums import (
    AlertSeverity,
    AlertStatus,
    AlertType,
    HealthStatus,
    ModelStatus,
    parse_enum,
)
from ..domain.monitoring import (
    AlertEvent,
    ApplicationMetrics,
    GlobalConfig,
    ModelMetrics,
    SystemMetrics,
)
from .common import JSON_ANY, STR_MAP, build, dump_json, load_json, to_signed, to_unsigned

_SYSTEM_WIDE = (
    "memory_total_bytes",
    "memory_used_bytes",
    "disk_total_bytes",
    "disk_used_bytes",
    "network_rx_bytes_per_sec",
    "network_tx_bytes_per_sec",
    "gpu_memory_usage_mb",
)
_APPLICATION_WIDE = (
    "uptime_seconds",
    "total_requests",
    "successful_requests",
    "failed_requests",
)
_MODEL_WIDE = (
    "total_requests",
    "successful_requests",
    "failed_requests",
    "memory_usage_bytes",
    "gpu_memory_usage_bytes",
)


def _narrow(source, wide=(), narrow=()) -> dict:
    values = {field: to_signed(field, getattr(source, field), 64) for field in wide}
    values.update(
        {field: to_signed(field, getattr(source, field), 32) for field in narrow}
    )
    return values


def _widen(row, wide=(), narrow=()) -> dict:
    values = {field: to_unsigned(field, getattr(row, field), 64) for field in wide}
    values.update(
        {field: to_unsigned(field, getattr(row, field), 32) for field in narrow}
    )
    return values


def global_config_to_row(config: GlobalConfig) -> GlobalConfigRow:
    return GlobalConfigRow(
        id=config.id,
        version=config.version,
        config_data=dump_json(JSON_ANY, config.config_data),
        created_at=config.created_at,
        updated_at=config.updated_at,
    )


def row_to_global_config(row: GlobalConfigRow) -> GlobalConfig:
    return build(
        GlobalConfig,
        id=row.id,
        version=row.version,
        config_data=load_json(JSON_ANY, "config_data", row.config_data),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def system_metrics_to_row(metrics: SystemMetrics) -> SystemMetricsRow:
    return SystemMetricsRow(
        id=metrics.id,
        timestamp=metrics.timestamp,
        cpu_usage_percent=metrics.cpu_usage_percent,
        memory_usage_percent=metrics.memory_usage_percent,
        disk_usage_percent=metrics.disk_usage_percent,
        gpu_usage_percent=metrics.gpu_usage_percent,
        load_1m=metrics.load_1m,
        load_5m=metrics.load_5m,
        load_15m=metrics.load_15m,
        **_narrow(metrics, wide=_SYSTEM_WIDE, narrow=("cpu_cores",)),
    )


def row_to_system_metrics(row: SystemMetricsRow) -> SystemMetrics:
    return build(
        SystemMetrics,
        id=row.id,
        timestamp=row.timestamp,
        cpu_usage_percent=row.cpu_usage_percent,
        memory_usage_percent=row.memory_usage_percent,
        disk_usage_percent=row.disk_usage_percent,
        gpu_usage_percent=row.gpu_usage_percent,
        load_1m=row.load_1m,
        load_5m=row.load_5m,
        load_15m=row.load_15m,
        **_widen(row, wide=_SYSTEM_WIDE, narrow=("cpu_cores",)),
    )


def application_metrics_to_row(metrics: ApplicationMetrics) -> ApplicationMetricsRow:
    return ApplicationMetricsRow(
        id=metrics.id,
        timestamp=metrics.timestamp,
        avg_response_time_ms=metrics.avg_response_time_ms,
        p95_response_time_ms=metrics.p95_response_time_ms,
        p99_response_time_ms=metrics.p99_response_time_ms,
        current_qps=metrics.current_qps,
        peak_qps=metrics.peak_qps,
        error_rate_percent=metrics.error_rate_percent,
        health_status=metrics.health_status.value,
        **_narrow(metrics, wide=_APPLICATION_WIDE, narrow=("active_connections",)),
    )


def row_to_application_metrics(row: ApplicationMetricsRow) -> ApplicationMetrics:
    return build(
        ApplicationMetrics,
        id=row.id,
        timestamp=row.timestamp,
        avg_response_time_ms=row.avg_response_time_ms,
        p95_response_time_ms=row.p95_response_time_ms,
        p99_response_time_ms=row.p99_response_time_ms,
        current_qps=row.current_qps,
        peak_qps=row.peak_qps,
        error_rate_percent=row.error_rate_percent,
        health_status=parse_enum(HealthStatus, "health_status", row.health_status),
        **_widen(row, wide=_APPLICATION_WIDE, narrow=("active_connections",)),
    )


def model_metrics_to_row(metrics: ModelMetrics) -> ModelMetricsRow:
    return ModelMetricsRow(
        id=metrics.id,
        model_id=metrics.model_id,
        runtime_id=metrics.runtime_id,
        timestamp=metrics.timestamp,
        status=metrics.status.value,
        avg_inference_time_ms=metrics.avg_inference_time_ms,
        tokens_per_second=metrics.tokens_per_second,
        cpu_usage_percent=metrics.cpu_usage_percent,
        gpu_usage_percent=metrics.gpu_usage_percent,
        last_request_time=metrics.last_request_time,
        **_narrow(metrics, wide=_MODEL_WIDE, narrow=("queue_length",)),
    )


def row_to_model_metrics(row: ModelMetricsRow) -> ModelMetrics:
    return build(
        ModelMetrics,
        id=row.id,
        model_id=row.model_id,
        runtime_id=row.runtime_id,
        timestamp=row.timestamp,
        status=parse_enum(ModelStatus, "status", row.status),
        avg_inference_time_ms=row.avg_inference_time_ms,
        tokens_per_second=row.tokens_per_second,
        cpu_usage_percent=row.cpu_usage_percent,
        gpu_usage_percent=row.gpu_usage_percent,
        last_request_time=row.last_request_time,
        **_widen(row, wide=_MODEL_WIDE, narrow=("queue_length",)),
    )


def alert_event_to_row(alert: AlertEvent) -> AlertEventRow:
    return AlertEventRow(
        id=alert.id,
        alert_type=alert.alert_type.value,
        severity=alert.severity.value,
        title=alert.title,
        description=alert.description,
        triggered_at=alert.triggered_at,
        resolved_at=alert.resolved_at,
        status=alert.status.value,
        resource_type=alert.resource_type,
        resource_id=alert.resource_id,
        resource_name=alert.resource_name,
        value=alert.value,
        threshold=alert.threshold,
        labels=dump_json(STR_MAP, alert.labels),
        metadata_=dump_json(STR_MAP, alert.metadata),
    )


def row_to_alert_event(row: AlertEventRow) -> AlertEvent:
    return build(
        AlertEvent,
        id=row.id,
        alert_type=parse_enum(AlertType, "alert_type", row.alert_type),
        severity=parse_enum(AlertSeverity, "severity", row.severity),
        title=row.title,
        description=row.description,
        triggered_at=row.triggered_at,
        resolved_at=row.resolved_at,
        status=parse_enum(AlertStatus, "status", row.status),
        resource_type=row.resource_type,
        resource_id=row.resource_id,
        resource_name=row.resource_name,
        value=row.value,
        threshold=row.threshold,
        labels=load_json(STR_MAP, "labels", row.labels),
        metadata=load_json(STR_MAP, "metadata", row.metadata_),
    )
