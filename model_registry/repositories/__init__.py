"""Data-access repositories: one statement per method, rows in and rows out."""

from .activity import SessionRepository, TaskRepository
from .available import AvailableModelsRepository
from .base import BaseRepository, ModelQuery, Page, Pagination, SortBy
from .models import ModelsRepository
from .monitoring import ConfigRepository, MonitoringRepository, RetentionPolicy
from .runtime import RuntimeRepository
from .sources import SourcesRepository

__all__ = [
    "BaseRepository",
    "ModelQuery",
    "Page",
    "Pagination",
    "SortBy",
    "ModelsRepository",
    "AvailableModelsRepository",
    "RuntimeRepository",
    "SourcesRepository",
    "MonitoringRepository",
    "ConfigRepository",
    "RetentionPolicy",
    "TaskRepository",
    "SessionRepository",
]
