"""Business services over the repositories; domain objects in and out."""

from .available import AvailableModelsService
from .models import ModelsService
from .monitoring import ConfigService, MonitoringService
from .runtime import RuntimeService
from .sources import SourcesService

__all__ = [
    "ModelsService",
    "AvailableModelsService",
    "RuntimeService",
    "SourcesService",
    "MonitoringService",
    "ConfigService",
]
