"""
Monitoring domain models: global config snapshots, metrics samples and alerts.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID, uuid4

from pydantic import Field

from .enums import AlertSeverity, AlertStatus, AlertType, HealthStatus, ModelStatus
from .primitives import U32_MAX, U64_MAX, DomainModel, utc_now


class GlobalConfig(DomainModel):
    """A versioned snapshot of the whole application configuration."""

    id: UUID = Field(default_factory=uuid4)
    version: str
    config_data: Any = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class SystemMetrics(DomainModel):
    id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(default_factory=utc_now)
    cpu_usage_percent: float = 0.0
    cpu_cores: int = Field(0, ge=0, le=U32_MAX)
    memory_total_bytes: int = Field(0, ge=0, le=U64_MAX)
    memory_used_bytes: int = Field(0, ge=0, le=U64_MAX)
    memory_usage_percent: float = 0.0
    disk_total_bytes: int = Field(0, ge=0, le=U64_MAX)
    disk_used_bytes: int = Field(0, ge=0, le=U64_MAX)
    disk_usage_percent: float = 0.0
    network_rx_bytes_per_sec: int = Field(0, ge=0, le=U64_MAX)
    network_tx_bytes_per_sec: int = Field(0, ge=0, le=U64_MAX)
    gpu_usage_percent: Optional[float] = None
    gpu_memory_usage_mb: Optional[int] = Field(None, ge=0, le=U64_MAX)
    load_1m: float = 0.0
    load_5m: float = 0.0
    load_15m: float = 0.0


class ApplicationMetrics(DomainModel):
    id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(default_factory=utc_now)
    uptime_seconds: int = Field(0, ge=0, le=U64_MAX)
    total_requests: int = Field(0, ge=0, le=U64_MAX)
    successful_requests: int = Field(0, ge=0, le=U64_MAX)
    failed_requests: int = Field(0, ge=0, le=U64_MAX)
    active_connections: int = Field(0, ge=0, le=U32_MAX)
    avg_response_time_ms: float = 0.0
    p95_response_time_ms: float = 0.0
    p99_response_time_ms: float = 0.0
    current_qps: float = 0.0
    peak_qps: float = 0.0
    error_rate_percent: float = 0.0
    health_status: HealthStatus = HealthStatus.UNKNOWN


class ModelMetrics(DomainModel):
    id: UUID = Field(default_factory=uuid4)
    model_id: UUID
    runtime_id: Optional[UUID] = None
    timestamp: datetime = Field(default_factory=utc_now)
    status: ModelStatus
    total_requests: int = Field(0, ge=0, le=U64_MAX)
    successful_requests: int = Field(0, ge=0, le=U64_MAX)
    failed_requests: int = Field(0, ge=0, le=U64_MAX)
    avg_inference_time_ms: float = 0.0
    tokens_per_second: float = 0.0
    memory_usage_bytes: int = Field(0, ge=0, le=U64_MAX)
    gpu_memory_usage_bytes: Optional[int] = Field(None, ge=0, le=U64_MAX)
    cpu_usage_percent: float = 0.0
    gpu_usage_percent: Optional[float] = None
    queue_length: int = Field(0, ge=0, le=U32_MAX)
    last_request_time: Optional[datetime] = None


class AlertEvent(DomainModel):
    """A threshold breach on some resource."""

    id: UUID = Field(default_factory=uuid4)
    alert_type: AlertType
    severity: AlertSeverity
    title: str
    description: str
    triggered_at: datetime = Field(default_factory=utc_now)
    resolved_at: Optional[datetime] = None
    status: AlertStatus = AlertStatus.TRIGGERED
    resource_type: str
    resource_id: str
    resource_name: str
    value: float
    threshold: float
    labels: Dict[str, str] = Field(default_factory=dict)
    metadata: Dict[str, str] = Field(default_factory=dict)
