"""
Runtime domain models: launch configs, running processes, their metrics and events.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID, uuid4

from pydantic import Field

from .enums import EventSeverity, ModelStatus, RuntimeEventType
from .primitives import U16_MAX, U32_MAX, U64_MAX, DomainModel, utc_now


class RuntimeConfig(DomainModel):
    """Inference parameters a runtime is started with."""

    id: UUID = Field(default_factory=uuid4)
    name: str
    max_context_length: Optional[int] = Field(None, ge=0, le=U32_MAX)
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    top_k: Optional[int] = Field(None, ge=0, le=U32_MAX)
    max_tokens: Optional[int] = Field(None, ge=0, le=U32_MAX)
    stop_sequences: List[str] = Field(default_factory=list)
    batch_size: Optional[int] = Field(None, ge=0, le=U32_MAX)
    max_concurrent_requests: Optional[int] = Field(None, ge=0, le=U32_MAX)
    gpu_device_ids: List[int] = Field(default_factory=list)
    memory_limit_mb: Optional[int] = Field(None, ge=0, le=U64_MAX)
    enable_streaming: bool = True
    custom_params: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class ModelRuntime(DomainModel):
    """A serving process for one model on one port."""

    id: UUID = Field(default_factory=uuid4)
    model_id: UUID
    runtime_config_id: UUID
    name: str
    port: int = Field(..., ge=0, le=U16_MAX)
    process_id: Optional[int] = Field(None, ge=0, le=U32_MAX)
    started_at: Optional[datetime] = None
    stopped_at: Optional[datetime] = None
    status: ModelStatus = ModelStatus.STOPPED
    health_endpoint: str
    api_endpoint: str
    log_file: Optional[str] = None
    environment: Dict[str, str] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class RuntimeMetrics(DomainModel):
    id: UUID = Field(default_factory=uuid4)
    runtime_id: UUID
    timestamp: datetime = Field(default_factory=utc_now)
    cpu_usage_percent: float = 0.0
    memory_usage_mb: int = Field(0, ge=0, le=U64_MAX)
    gpu_usage_percent: Optional[float] = None
    gpu_memory_usage_mb: Optional[int] = Field(None, ge=0, le=U64_MAX)
    active_connections: int = Field(0, ge=0, le=U32_MAX)
    total_requests: int = Field(0, ge=0, le=U64_MAX)
    successful_requests: int = Field(0, ge=0, le=U64_MAX)
    failed_requests: int = Field(0, ge=0, le=U64_MAX)
    avg_response_time_ms: float = 0.0
    throughput_rps: float = 0.0
    queue_length: int = Field(0, ge=0, le=U32_MAX)


class RuntimeEvent(DomainModel):
    id: UUID = Field(default_factory=uuid4)
    runtime_id: UUID
    event_type: RuntimeEventType
    timestamp: datetime = Field(default_factory=utc_now)
    message: str
    details: Optional[Any] = Field(None, description="Free-form JSON payload")
    severity: EventSeverity = EventSeverity.INFO
