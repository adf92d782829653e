"""Row models for runtime configs, running processes, metrics and events."""

import uuid

from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    text,
)

from ..domain.primitives import utc_now
from .base import Base
from .tables import EMPTY_LIST, EMPTY_OBJECT, json_column
from .types import GUID, JSONText, UTCDateTime


class RuntimeConfigRow(Base):
    __tablename__ = "runtime_configs"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    max_context_length = Column(Integer, nullable=True)
    temperature = Column(Float, nullable=True)
    top_p = Column(Float, nullable=True)
    top_k = Column(Integer, nullable=True)
    max_tokens = Column(Integer, nullable=True)
    stop_sequences = json_column(EMPTY_LIST)
    batch_size = Column(Integer, nullable=True)
    max_concurrent_requests = Column(Integer, nullable=True)
    gpu_device_ids = json_column(EMPTY_LIST)
    memory_limit_mb = Column(BigInteger, nullable=True)
    enable_streaming = Column(
        Boolean, nullable=False, default=True, server_default=text("true")
    )
    custom_params = json_column(EMPTY_OBJECT)
    created_at = Column(UTCDateTime(), nullable=False, default=utc_now)
    updated_at = Column(UTCDateTime(), nullable=False, default=utc_now)


class ModelRuntimeRow(Base):
    """A serving process; one per (model, port)."""

    __tablename__ = "model_runtimes"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4)
    model_id = Column(
        GUID(), ForeignKey("models.id", ondelete="CASCADE"), nullable=False
    )
    runtime_config_id = Column(
        GUID(), ForeignKey("runtime_configs.id", ondelete="CASCADE"), nullable=False
    )
    name = Column(String(255), nullable=False)
    port = Column(Integer, nullable=False)
    process_id = Column(Integer, nullable=True)
    started_at = Column(UTCDateTime(), nullable=True)
    stopped_at = Column(UTCDateTime(), nullable=True)
    status = Column(String(50), nullable=False)
    health_endpoint = Column(String(255), nullable=False)
    api_endpoint = Column(String(255), nullable=False)
    log_file = Column(String(500), nullable=True)
    environment = json_column(EMPTY_OBJECT)
    created_at = Column(UTCDateTime(), nullable=False, default=utc_now)
    updated_at = Column(UTCDateTime(), nullable=False, default=utc_now)

    __table_args__ = (
        UniqueConstraint("model_id", "port", name="uq_model_runtimes_model_port"),
        Index("idx_model_runtimes_model_id", "model_id"),
        Index("idx_model_runtimes_status", "status"),
    )


class RuntimeMetricsRow(Base):
    __tablename__ = "runtime_metrics"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4)
    runtime_id = Column(
        GUID(), ForeignKey("model_runtimes.id", ondelete="CASCADE"), nullable=False
    )
    timestamp = Column(UTCDateTime(), nullable=False, default=utc_now)
    cpu_usage_percent = Column(Float, nullable=False)
    memory_usage_mb = Column(BigInteger, nullable=False)
    gpu_usage_percent = Column(Float, nullable=True)
    gpu_memory_usage_mb = Column(BigInteger, nullable=True)
    active_connections = Column(Integer, nullable=False)
    total_requests = Column(BigInteger, nullable=False)
    successful_requests = Column(BigInteger, nullable=False)
    failed_requests = Column(BigInteger, nullable=False)
    avg_response_time_ms = Column(Float, nullable=False)
    throughput_rps = Column(Float, nullable=False)
    queue_length = Column(Integer, nullable=False)

    __table_args__ = (
        Index("idx_runtime_metrics_runtime_id", "runtime_id"),
        Index("idx_runtime_metrics_timestamp", "timestamp"),
    )


class RuntimeEventRow(Base):
    __tablename__ = "runtime_events"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4)
    runtime_id = Column(
        GUID(), ForeignKey("model_runtimes.id", ondelete="CASCADE"), nullable=False
    )
    event_type = Column(String(50), nullable=False)
    timestamp = Column(UTCDateTime(), nullable=False, default=utc_now)
    message = Column(Text, nullable=False)
    details = Column(JSONText(), nullable=True)
    severity = Column(String(20), nullable=False)

    __table_args__ = (
        Index("idx_runtime_events_runtime_id", "runtime_id"),
        Index("idx_runtime_events_timestamp", "timestamp"),
    )
