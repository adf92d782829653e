"""
Domain models for registry entries and their installations.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID, uuid4

from pydantic import Field, model_validator

from .enums import ModelSize, ModelStatus, ModelType
from .primitives import U16_MAX, U32_MAX, U64_MAX, DomainModel, utc_now

GIB = 1024**3


def classify_file_size(file_size: int) -> ModelSize:
    """Bucket a byte count: <3 GiB Small, <8 Medium, <30 Large, else XLarge."""
    size_gb = file_size / GIB
    if size_gb < 3:
        return ModelSize.SMALL
    if size_gb < 8:
        return ModelSize.MEDIUM
    if size_gb < 30:
        return ModelSize.LARGE
    return ModelSize.XLARGE


class Model(DomainModel):
    """A model known to the registry."""

    id: UUID = Field(default_factory=uuid4)
    name: str = Field(..., min_length=1, description="Unique model name")
    display_name: str
    description: Optional[str] = None
    version: str
    model_type: ModelType
    size_category: ModelSize = Field(
        ..., description="Derived from file_size when omitted"
    )
    file_size: int = Field(..., ge=0, le=U64_MAX, description="Size in bytes")
    provider: str
    license: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    languages: List[str] = Field(default_factory=list)
    file_path: Optional[str] = None
    checksum: Optional[str] = None
    download_url: Optional[str] = None
    config: Dict[str, Any] = Field(default_factory=dict)
    rating: Optional[float] = Field(None, ge=0.0, le=5.0)
    download_count: int = Field(0, ge=0, le=U64_MAX)
    is_official: bool = False
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @model_validator(mode="before")
    @classmethod
    def _derive_size_category(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("size_category") is None:
            try:
                file_size = int(data.get("file_size"))
            except (TypeError, ValueError, OverflowError):
                # Left for the file_size field to reject
                return data
            if file_size >= 0:
                data = {**data, "size_category": classify_file_size(file_size)}
        return data


class InstalledModel(DomainModel):
    """A model present on the local machine."""

    id: UUID = Field(default_factory=uuid4, description="Installation id")
    model: Model
    install_path: str
    installed_at: datetime = Field(default_factory=utc_now)
    status: ModelStatus = ModelStatus.STOPPED
    port: Optional[int] = Field(None, ge=0, le=U16_MAX)
    process_id: Optional[int] = Field(None, ge=0, le=U32_MAX)
    last_used: Optional[datetime] = None
    usage_count: int = Field(0, ge=0, le=U64_MAX)


class SystemRequirements(DomainModel):
    min_memory_gb: float = 0.0
    recommended_memory_gb: float = 0.0
    min_disk_space_gb: float = 0.0
    requires_gpu: bool = False
    supported_os: List[str] = Field(default_factory=list)
    supported_architectures: List[str] = Field(default_factory=list)


class AvailableModel(DomainModel):
    """A model offered by a source, installed or not."""

    id: UUID = Field(default_factory=uuid4)
    model: Model
    is_installed: bool = False
    published_at: datetime = Field(default_factory=utc_now)
    last_updated: datetime = Field(default_factory=utc_now)
    system_requirements: SystemRequirements = Field(
        default_factory=SystemRequirements
    )


class ModelStatistics(DomainModel):
    """Aggregate counts over the whole registry."""

    total_models: int = 0
    installed_count: int = 0
    official_count: int = 0
    total_size_bytes: int = 0
    models_by_type: Dict[ModelType, int] = Field(default_factory=dict)
    models_by_provider: Dict[str, int] = Field(default_factory=dict)
