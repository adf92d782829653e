"""Row models for remote model sources (table ``model_repositories``) and their data."""

import uuid

from sqlalchemy import (
    Boolean,
    Column,
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


class ModelSourceRow(Base):
    __tablename__ = "model_repositories"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False, unique=True)
    url = Column(Text, nullable=False)
    repo_type = Column(String(50), nullable=False)
    enabled = Column(Boolean, nullable=False, default=True, server_default=text("true"))
    auth_config = Column(JSONText(), nullable=True)
    last_sync = Column(UTCDateTime(), nullable=True)
    sync_status = Column(
        String(50), nullable=False, default="Never", server_default="Never"
    )
    description = Column(Text, nullable=True)
    tags = json_column(EMPTY_LIST)
    priority = Column(Integer, nullable=False, default=100, server_default="100")
    created_at = Column(UTCDateTime(), nullable=False, default=utc_now)
    updated_at = Column(UTCDateTime(), nullable=False, default=utc_now)

    __table_args__ = (Index("idx_model_repositories_enabled", "enabled"),)


class RepositoryIndexRow(Base):
    __tablename__ = "repository_indexes"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4)
    repository_id = Column(
        GUID(),
        ForeignKey("model_repositories.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    version = Column(String(100), nullable=False)
    updated_at = Column(UTCDateTime(), nullable=False, default=utc_now)
    checksum = Column(String(255), nullable=True)
    metadata_ = Column(
        "metadata",
        JSONText(),
        nullable=False,
        default=EMPTY_OBJECT,
        server_default=text(f"'{EMPTY_OBJECT}'"),
    )


class RepositoryModelRow(Base):
    __tablename__ = "repository_models"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4)
    repository_id = Column(
        GUID(), ForeignKey("model_repositories.id", ondelete="CASCADE"), nullable=False
    )
    model_id = Column(
        GUID(), ForeignKey("models.id", ondelete="CASCADE"), nullable=False
    )
    repo_model_id = Column(String(255), nullable=False)
    repo_path = Column(String(500), nullable=False)
    download_urls = json_column(EMPTY_LIST)
    files = json_column(EMPTY_LIST)
    dependencies = json_column(EMPTY_LIST)
    installation_notes = Column(Text, nullable=True)
    usage_examples = json_column(EMPTY_LIST)
    license_text = Column(Text, nullable=True)
    model_card = Column(Text, nullable=True)
    created_at = Column(UTCDateTime(), nullable=False, default=utc_now)
    updated_at = Column(UTCDateTime(), nullable=False, default=utc_now)

    __table_args__ = (
        UniqueConstraint(
            "repository_id", "repo_model_id", name="uq_repository_models_repo_model"
        ),
        Index("idx_repository_models_repository_id", "repository_id"),
        Index("idx_repository_models_model_id", "model_id"),
    )


class SyncResultRow(Base):
    __tablename__ = "sync_results"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4)
    repository_id = Column(
        GUID(), ForeignKey("model_repositories.id", ondelete="CASCADE"), nullable=False
    )
    started_at = Column(UTCDateTime(), nullable=False)
    completed_at = Column(UTCDateTime(), nullable=True)
    status = Column(String(50), nullable=False)
    models_added = Column(Integer, nullable=False, default=0, server_default="0")
    models_updated = Column(Integer, nullable=False, default=0, server_default="0")
    models_removed = Column(Integer, nullable=False, default=0, server_default="0")
    error_message = Column(Text, nullable=True)
    log_entries = json_column(EMPTY_LIST)

    __table_args__ = (
        Index("idx_sync_results_repository_id", "repository_id"),
        Index("idx_sync_results_started_at", "started_at"),
    )
