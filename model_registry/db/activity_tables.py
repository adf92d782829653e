"""Row-only records: user sessions, API usage, background and download tasks.

These have no domain counterpart; callers work with the rows directly.
"""

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
    text,
)

from ..domain.primitives import utc_now
from .base import Base
from .types import GUID, JSONText, UTCDateTime

TASK_STATUSES = ("pending", "running", "completed", "failed")
DOWNLOAD_STATUSES = ("pending", "downloading", "completed", "failed", "paused")


class UserSessionRow(Base):
    __tablename__ = "user_sessions"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4)
    user_id = Column(String(255), nullable=False)
    session_token = Column(String(255), nullable=False, unique=True)
    created_at = Column(UTCDateTime(), nullable=False, default=utc_now)
    expires_at = Column(UTCDateTime(), nullable=False)
    last_accessed = Column(UTCDateTime(), nullable=False, default=utc_now)
    ip_address = Column(String(45), nullable=False)
    user_agent = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, server_default=text("true"))

    __table_args__ = (
        Index("idx_user_sessions_user_id", "user_id"),
        Index("idx_user_sessions_expires_at", "expires_at"),
    )


class ApiUsageRow(Base):
    __tablename__ = "api_usage"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4)
    api_key_id = Column(GUID(), nullable=True)
    endpoint = Column(String(255), nullable=False)
    method = Column(String(10), nullable=False)
    timestamp = Column(UTCDateTime(), nullable=False, default=utc_now)
    response_time_ms = Column(Integer, nullable=False)
    status_code = Column(Integer, nullable=False)
    request_size_bytes = Column(BigInteger, nullable=False)
    response_size_bytes = Column(BigInteger, nullable=False)
    ip_address = Column(String(45), nullable=False)
    user_agent = Column(Text, nullable=True)

    __table_args__ = (
        Index("idx_api_usage_timestamp", "timestamp"),
        Index("idx_api_usage_endpoint", "endpoint"),
    )


class TaskRow(Base):
    """A queued background task."""

    __tablename__ = "tasks"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4)
    task_type = Column(String(100), nullable=False)
    payload = Column(JSONText(), nullable=False)
    status = Column(String(20), nullable=False, default="pending", server_default="pending")
    priority = Column(Integer, nullable=False, default=0, server_default="0")
    created_at = Column(UTCDateTime(), nullable=False, default=utc_now)
    started_at = Column(UTCDateTime(), nullable=True)
    completed_at = Column(UTCDateTime(), nullable=True)
    error_message = Column(Text, nullable=True)
    retry_count = Column(Integer, nullable=False, default=0, server_default="0")
    max_retries = Column(Integer, nullable=False, default=3, server_default="3")
    scheduled_at = Column(UTCDateTime(), nullable=True)

    __table_args__ = (
        Index("idx_tasks_status", "status"),
        Index("idx_tasks_task_type", "task_type"),
        Index("idx_tasks_created_at", "created_at"),
    )


class DownloadTaskRow(Base):
    __tablename__ = "download_tasks"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4)
    model_id = Column(
        GUID(), ForeignKey("models.id", ondelete="CASCADE"), nullable=False
    )
    url = Column(Text, nullable=False)
    file_path = Column(String(500), nullable=False)
    total_size = Column(BigInteger, nullable=False)
    downloaded_size = Column(BigInteger, nullable=False, default=0, server_default="0")
    status = Column(String(20), nullable=False, default="pending", server_default="pending")
    progress_percent = Column(Float, nullable=False, default=0.0, server_default="0")
    download_speed_bps = Column(BigInteger, nullable=False, default=0, server_default="0")
    estimated_time_remaining = Column(Integer, nullable=True)
    created_at = Column(UTCDateTime(), nullable=False, default=utc_now)
    started_at = Column(UTCDateTime(), nullable=True)
    completed_at = Column(UTCDateTime(), nullable=True)
    error_message = Column(Text, nullable=True)

    __table_args__ = (
        Index("idx_download_tasks_model_id", "model_id"),
        Index("idx_download_tasks_status", "status"),
    )
