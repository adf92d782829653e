"""Row models for global config snapshots, metrics samples and alerts."""

import uuid

from sqlalchemy import (
    BigInteger,
    Column,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    text,
)

from ..domain.primitives import utc_now
from .base import Base
from .tables import EMPTY_OBJECT, json_column
from .types import GUID, JSONText, UTCDateTime


class GlobalConfigRow(Base):
    __tablename__ = "global_configs"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4)
    version = Column(String(100), nullable=False)
    config_data = Column(JSONText(), nullable=False)
    created_at = Column(UTCDateTime(), nullable=False, default=utc_now)
    updated_at = Column(UTCDateTime(), nullable=False, default=utc_now)

    __table_args__ = (Index("idx_global_configs_created_at", "created_at"),)


class SystemMetricsRow(Base):
    __tablename__ = "system_metrics"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4)
    timestamp = Column(UTCDateTime(), nullable=False, default=utc_now)
    cpu_usage_percent = Column(Float, nullable=False)
    cpu_cores = Column(Integer, nullable=False)
    memory_total_bytes = Column(BigInteger, nullable=False)
    memory_used_bytes = Column(BigInteger, nullable=False)
    memory_usage_percent = Column(Float, nullable=False)
    disk_total_bytes = Column(BigInteger, nullable=False)
    disk_used_bytes = Column(BigInteger, nullable=False)
    disk_usage_percent = Column(Float, nullable=False)
    network_rx_bytes_per_sec = Column(BigInteger, nullable=False)
    network_tx_bytes_per_sec = Column(BigInteger, nullable=False)
    gpu_usage_percent = Column(Float, nullable=True)
    gpu_memory_usage_mb = Column(BigInteger, nullable=True)
    load_1m = Column(Float, nullable=False)
    load_5m = Column(Float, nullable=False)
    load_15m = Column(Float, nullable=False)

    __table_args__ = (Index("idx_system_metrics_timestamp", "timestamp"),)


class ApplicationMetricsRow(Base):
    __tablename__ = "application_metrics"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4)
    timestamp = Column(UTCDateTime(), nullable=False, default=utc_now)
    uptime_seconds = Column(BigInteger, nullable=False)
    total_requests = Column(BigInteger, nullable=False)
    successful_requests = Column(BigInteger, nullable=False)
    failed_requests = Column(BigInteger, nullable=False)
    active_connections = Column(Integer, nullable=False)
    avg_response_time_ms = Column(Float, nullable=False)
    p95_response_time_ms = Column(Float, nullable=False)
    p99_response_time_ms = Column(Float, nullable=False)
    current_qps = Column(Float, nullable=False)
    peak_qps = Column(Float, nullable=False)
    error_rate_percent = Column(Float, nullable=False)
    health_status = Column(String(20), nullable=False)

    __table_args__ = (Index("idx_application_metrics_timestamp", "timestamp"),)


class ModelMetricsRow(Base):
    __tablename__ = "model_metrics"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4)
    model_id = Column(
        GUID(), ForeignKey("models.id", ondelete="CASCADE"), nullable=False
    )
    runtime_id = Column(
        GUID(), ForeignKey("model_runtimes.id", ondelete="SET NULL"), nullable=True
    )
    timestamp = Column(UTCDateTime(), nullable=False, default=utc_now)
    status = Column(String(50), nullable=False)
    total_requests = Column(BigInteger, nullable=False)
    successful_requests = Column(BigInteger, nullable=False)
    failed_requests = Column(BigInteger, nullable=False)
    avg_inference_time_ms = Column(Float, nullable=False)
    tokens_per_second = Column(Float, nullable=False)
    memory_usage_bytes = Column(BigInteger, nullable=False)
    gpu_memory_usage_bytes = Column(BigInteger, nullable=True)
    cpu_usage_percent = Column(Float, nullable=False)
    gpu_usage_percent = Column(Float, nullable=True)
    queue_length = Column(Integer, nullable=False)
    last_request_time = Column(UTCDateTime(), nullable=True)

    __table_args__ = (
        Index("idx_model_metrics_model_id", "model_id"),
        Index("idx_model_metrics_timestamp", "timestamp"),
    )


class AlertEventRow(Base):
    __tablename__ = "alert_events"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4)
    alert_type = Column(String(100), nullable=False)
    severity = Column(String(20), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    triggered_at = Column(UTCDateTime(), nullable=False, default=utc_now)
    resolved_at = Column(UTCDateTime(), nullable=True)
    status = Column(
        String(20), nullable=False, default="Triggered", server_default="Triggered"
    )
    resource_type = Column(String(100), nullable=False)
    resource_id = Column(String(255), nullable=False)
    resource_name = Column(String(255), nullable=False)
    value = Column(Float, nullable=False)
    threshold = Column(Float, nullable=False)
    labels = json_column(EMPTY_OBJECT)
    # "metadata" is reserved on declarative classes
    metadata_ = Column(
        "metadata",
        JSONText(),
        nullable=False,
        default=EMPTY_OBJECT,
        server_default=text(f"'{EMPTY_OBJECT}'"),
    )

    __table_args__ = (
        Index("idx_alert_events_triggered_at", "triggered_at"),
        Index("idx_alert_events_status", "status"),
        Index("idx_alert_events_severity", "severity"),
    )
