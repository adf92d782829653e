"""
Remote model sources (HuggingFace, Ollama, ...), their indexes and sync history.

A source is what the storage schema calls a "model repository"
(table ``model_repositories``).
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID, uuid4

from pydantic import Field

from .enums import AuthType, ModelFileType, RepositoryType, SyncStatus
from .primitives import U32_MAX, U64_MAX, DomainModel, utc_now


class RepositoryAuth(DomainModel):
    auth_type: AuthType = AuthType.NONE
    username: Optional[str] = None
    token: Optional[str] = None
    api_key: Optional[str] = None
    extra_params: Dict[str, str] = Field(default_factory=dict)


class ModelSource(DomainModel):
    """A remote catalogue models can be fetched from."""

    id: UUID = Field(default_factory=uuid4)
    name: str = Field(..., min_length=1)
    url: str
    repo_type: RepositoryType
    enabled: bool = True
    auth_config: Optional[RepositoryAuth] = None
    last_sync: Optional[datetime] = None
    sync_status: SyncStatus = SyncStatus.NEVER
    description: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    priority: int = Field(100, ge=0, le=U32_MAX, description="Lower sorts first")
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class RepositoryIndex(DomainModel):
    """The last fetched catalogue index of a source."""

    id: UUID = Field(default_factory=uuid4)
    repository_id: UUID
    version: str
    updated_at: datetime = Field(default_factory=utc_now)
    checksum: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)


class DownloadUrl(DomainModel):
    filename: str
    url: str
    size: int = Field(0, ge=0, le=U64_MAX)
    checksum: Optional[str] = None
    checksum_algorithm: Optional[str] = None
    is_primary: bool = False


class ModelFile(DomainModel):
    filename: str
    size: int = Field(0, ge=0, le=U64_MAX)
    file_type: ModelFileType = ModelFileType.OTHER
    checksum: Optional[str] = None
    required: bool = True
    description: Optional[str] = None


class RepositoryModel(DomainModel):
    """A model as published by one source."""

    id: UUID = Field(default_factory=uuid4)
    repository_id: UUID
    model_id: UUID
    repo_model_id: str
    repo_path: str
    download_urls: List[DownloadUrl] = Field(default_factory=list)
    files: List[ModelFile] = Field(default_factory=list)
    dependencies: List[str] = Field(default_factory=list)
    installation_notes: Optional[str] = None
    usage_examples: List[str] = Field(default_factory=list)
    license_text: Optional[str] = None
    model_card: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class SyncResult(DomainModel):
    id: UUID = Field(default_factory=uuid4)
    repository_id: UUID
    started_at: datetime = Field(default_factory=utc_now)
    completed_at: Optional[datetime] = None
    status: SyncStatus = SyncStatus.SYNCING
    models_added: int = Field(0, ge=0, le=U32_MAX)
    models_updated: int = Field(0, ge=0, le=U32_MAX)
    models_removed: int = Field(0, ge=0, le=U32_MAX)
    error_message: Optional[str] = None
    log_entries: List[str] = Field(default_factory=list)
