"""Database layer: connection handle, row models, schema and migrations."""

from .activity_tables import ApiUsageRow, DownloadTaskRow, TaskRow, UserSessionRow
from .base import Base, Database, get_database_url
from .migrations import MIGRATIONS, Migration, MigrationRunner
from .monitoring_tables import (
    AlertEventRow,
    ApplicationMetricsRow,
    GlobalConfigRow,
    ModelMetricsRow,
    SystemMetricsRow,
)
from .runtime_tables import (
    ModelRuntimeRow,
    RuntimeConfigRow,
    RuntimeEventRow,
    RuntimeMetricsRow,
)
from .schema import render_schema, verify_schema
from .source_tables import (
    ModelSourceRow,
    RepositoryIndexRow,
    RepositoryModelRow,
    SyncResultRow,
)
from .tables import AvailableModelRow, InstalledModelRow, ModelRow
from .types import GUID, JSONText, UTCDateTime

__all__ = [
    "Base",
    "Database",
    "get_database_url",
    "render_schema",
    "verify_schema",
    "MIGRATIONS",
    "Migration",
    "MigrationRunner",
    "GUID",
    "JSONText",
    "UTCDateTime",
    "ModelRow",
    "InstalledModelRow",
    "AvailableModelRow",
    "RuntimeConfigRow",
    "ModelRuntimeRow",
    "RuntimeMetricsRow",
    "RuntimeEventRow",
    "ModelSourceRow",
    "RepositoryIndexRow",
    "RepositoryModelRow",
    "SyncResultRow",
    "GlobalConfigRow",
    "SystemMetricsRow",
    "ApplicationMetricsRow",
    "ModelMetricsRow",
    "AlertEventRow",
    "UserSessionRow",
    "ApiUsageRow",
    "TaskRow",
    "DownloadTaskRow",
]
