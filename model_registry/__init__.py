"""
Model Registry

Persistence layer for a local AI-model registry: models, installations,
runtimes, sources and monitoring data on PostgreSQL or SQLite.
"""

import importlib.metadata

__version__ = importlib.metadata.version("model-registry")

from .config import Settings, get_settings
from .db.base import Database
from .errors import (
    ConflictError,
    ConversionError,
    ModelAlreadyExistsError,
    ModelAlreadyInstalledError,
    ModelHasInstalledInstancesError,
    ModelNotFoundError,
    ModelNotInstalledError,
    RegistryError,
    ServiceError,
    StorageError,
)
from .services import (
    AvailableModelsService,
    ConfigService,
    ModelsService,
    MonitoringService,
    RuntimeService,
    SourcesService,
)

__all__ = [
    "Settings",
    "get_settings",
    "Database",
    "ModelsService",
    "AvailableModelsService",
    "RuntimeService",
    "SourcesService",
    "MonitoringService",
    "ConfigService",
    "RegistryError",
    "StorageError",
    "ConflictError",
    "ConversionError",
    "ServiceError",
    "ModelNotFoundError",
    "ModelAlreadyExistsError",
    "ModelAlreadyInstalledError",
    "ModelNotInstalledError",
    "ModelHasInstalledInstancesError",
]
