"""Domain models of the model registry."""

from .enums import (
    AlertSeverity,
    AlertStatus,
    AlertType,
    AuthType,
    EventSeverity,
    HealthStatus,
    ModelFileType,
    ModelSize,
    ModelStatus,
    ModelType,
    RepositoryType,
    RuntimeEventType,
    SyncStatus,
    parse_enum,
)
from .models import (
    AvailableModel,
    InstalledModel,
    Model,
    ModelStatistics,
    SystemRequirements,
    classify_file_size,
)
from .monitoring import (
    AlertEvent,
    ApplicationMetrics,
    GlobalConfig,
    ModelMetrics,
    SystemMetrics,
)
from .primitives import utc_now
from .runtime import ModelRuntime, RuntimeConfig, RuntimeEvent, RuntimeMetrics
from .sources import (
    DownloadUrl,
    ModelFile,
    ModelSource,
    RepositoryAuth,
    RepositoryIndex,
    RepositoryModel,
    SyncResult,
)

__all__ = [
    # Enums
    "AlertSeverity",
    "AlertStatus",
    "AlertType",
    "AuthType",
    "EventSeverity",
    "HealthStatus",
    "ModelFileType",
    "ModelSize",
    "ModelStatus",
    "ModelType",
    "RepositoryType",
    "RuntimeEventType",
    "SyncStatus",
    "parse_enum",
    # Models
    "AvailableModel",
    "InstalledModel",
    "Model",
    "ModelStatistics",
    "SystemRequirements",
    "classify_file_size",
    # Runtime
    "ModelRuntime",
    "RuntimeConfig",
    "RuntimeEvent",
    "RuntimeMetrics",
    # Sources
    "DownloadUrl",
    "ModelFile",
    "ModelSource",
    "RepositoryAuth",
    "RepositoryIndex",
    "RepositoryModel",
    "SyncResult",
    # Monitoring
    "AlertEvent",
    "ApplicationMetrics",
    "GlobalConfig",
    "ModelMetrics",
    "SystemMetrics",
    # Primitives
    "utc_now",
]
