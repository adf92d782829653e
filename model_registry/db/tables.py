"""Row models for registry entries and their installations.

Enum-valued columns hold the exact discriminant text and nested data is
held as JSON text; converters own the mapping to domain types.
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

EMPTY_LIST = "[]"
EMPTY_OBJECT = "{}"


def json_column(empty: str, nullable: bool = False) -> Column:
    """A JSON text column that defaults to ``empty`` on both sides."""
    if nullable:
        return Column(JSONText(), nullable=True)
    return Column(
        JSONText(), nullable=False, default=empty, server_default=text(f"'{empty}'")
    )


class ModelRow(Base):
    """A registry entry (table ``models``)."""

    __tablename__ = "models"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    display_name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    version = Column(String(100), nullable=False)
    model_type = Column(String(50), nullable=False)
    size_category = Column(String(50), nullable=False)
    file_size = Column(BigInteger, nullable=False)
    provider = Column(String(255), nullable=False)
    license = Column(String(100), nullable=True)
    tags = json_column(EMPTY_LIST)
    languages = json_column(EMPTY_LIST)
    created_at = Column(UTCDateTime(), nullable=False, default=utc_now)
    updated_at = Column(UTCDateTime(), nullable=False, default=utc_now)
    file_path = Column(String(500), nullable=True)
    checksum = Column(String(255), nullable=True)
    download_url = Column(Text, nullable=True)
    config = json_column(EMPTY_OBJECT)
    rating = Column(Float, nullable=True)
    download_count = Column(BigInteger, nullable=False, default=0, server_default="0")
    is_official = Column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )

    __table_args__ = (
        Index("idx_models_name", "name", unique=True),
        Index("idx_models_provider", "provider"),
        Index("idx_models_model_type", "model_type"),
        Index("idx_models_created_at", "created_at"),
        Index("idx_models_is_official", "is_official"),
    )

    def __repr__(self) -> str:
        return f"<ModelRow(id={self.id}, name='{self.name}')>"


class InstalledModelRow(Base):
    """A local installation of a model; at most one per model."""

    __tablename__ = "installed_models"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4)
    model_id = Column(
        GUID(), ForeignKey("models.id", ondelete="CASCADE"), nullable=False
    )
    install_path = Column(String(500), nullable=False)
    installed_at = Column(UTCDateTime(), nullable=False, default=utc_now)
    status = Column(String(50), nullable=False, default="Stopped")
    port = Column(Integer, nullable=True)
    process_id = Column(Integer, nullable=True)
    last_used = Column(UTCDateTime(), nullable=True)
    usage_count = Column(BigInteger, nullable=False, default=0, server_default="0")
    created_at = Column(UTCDateTime(), nullable=False, default=utc_now)
    updated_at = Column(UTCDateTime(), nullable=False, default=utc_now)

    __table_args__ = (
        Index("idx_installed_models_model_id", "model_id", unique=True),
        Index("idx_installed_models_status", "status"),
    )

    def __repr__(self) -> str:
        return f"<InstalledModelRow(model_id={self.model_id}, status='{self.status}')>"


class AvailableModelRow(Base):
    """A model offered for installation."""

    __tablename__ = "available_models"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4)
    model_id = Column(
        GUID(), ForeignKey("models.id", ondelete="CASCADE"), nullable=False
    )
    is_installed = Column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )
    published_at = Column(UTCDateTime(), nullable=False, default=utc_now)
    last_updated = Column(UTCDateTime(), nullable=False, default=utc_now)
    system_requirements = Column(JSONText(), nullable=False)

    __table_args__ = (
        Index("idx_available_models_model_id", "model_id", unique=True),
    )
