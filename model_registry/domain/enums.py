"""
Canonical enums of the model registry.

The enum value is the exact text stored in discriminant columns. Parsing
stored text goes through ``parse_enum`` so unknown values surface as
``InvalidEnumValueError`` instead of ``ValueError``.
"""

from enum import Enum
from typing import Type, TypeVar

from ..errors import InvalidEnumValueError

E = TypeVar("E", bound=Enum)


def parse_enum(enum_cls: Type[E], field: str, value: str) -> E:
    """Map stored text to ``enum_cls``, naming ``field`` on failure."""
    try:
        return enum_cls(value)
    except ValueError:
        raise InvalidEnumValueError(field, value) from None


class ModelType(str, Enum):
    """What a model does."""

    CHAT = "Chat"
    CODE = "Code"
    TEXT = "Text"
    EMBEDDING = "Embedding"
    MULTIMODAL = "Multimodal"
    IMAGE_GENERATION = "ImageGeneration"
    SPEECH = "Speech"
    IMAGE = "Image"
    AUDIO = "Audio"
    VIDEO = "Video"
    OTHER = "Other"


class ModelSize(str, Enum):
    """Size bucket derived from the on-disk file size."""

    SMALL = "Small"
    MEDIUM = "Medium"
    LARGE = "Large"
    XLARGE = "XLarge"


class ModelStatus(str, Enum):
    """Lifecycle state of an installed model or runtime."""

    RUNNING = "Running"
    STARTING = "Starting"
    STOPPING = "Stopping"
    STOPPED = "Stopped"
    ERROR = "Error"
    DOWNLOADING = "Downloading"
    INSTALLING = "Installing"


class RuntimeEventType(str, Enum):
    STARTED = "Started"
    STOPPED = "Stopped"
    CRASHED = "Crashed"
    RESTARTED = "Restarted"
    HEALTH_CHECK_FAILED = "HealthCheckFailed"
    CONFIG_CHANGED = "ConfigChanged"
    RESOURCE_WARNING = "ResourceWarning"


class EventSeverity(str, Enum):
    INFO = "Info"
    WARNING = "Warning"
    ERROR = "Error"
    CRITICAL = "Critical"


class RepositoryType(str, Enum):
    """Kind of remote model source."""

    HUGGING_FACE = "HuggingFace"
    MODEL_SCOPE = "ModelScope"
    OLLAMA = "Ollama"
    CUSTOM = "Custom"
    LOCAL = "Local"


class AuthType(str, Enum):
    NONE = "None"
    TOKEN = "Token"
    API_KEY = "ApiKey"
    BASIC = "Basic"
    OAUTH = "OAuth"


class SyncStatus(str, Enum):
    NEVER = "Never"
    SYNCING = "Syncing"
    SUCCESS = "Success"
    FAILED = "Failed"
    PARTIAL = "Partial"


class ModelFileType(str, Enum):
    MODEL = "Model"
    CONFIG = "Config"
    TOKENIZER = "Tokenizer"
    VOCABULARY = "Vocabulary"
    README = "Readme"
    LICENSE = "License"
    OTHER = "Other"


class HealthStatus(str, Enum):
    HEALTHY = "Healthy"
    DEGRADED = "Degraded"
    UNHEALTHY = "Unhealthy"
    UNKNOWN = "Unknown"


class AlertType(str, Enum):
    HIGH_CPU_USAGE = "HighCpuUsage"
    HIGH_MEMORY_USAGE = "HighMemoryUsage"
    HIGH_DISK_USAGE = "HighDiskUsage"
    HIGH_GPU_USAGE = "HighGpuUsage"
    MODEL_DOWN = "ModelDown"
    HIGH_ERROR_RATE = "HighErrorRate"
    SLOW_RESPONSE = "SlowResponse"
    CUSTOM = "Custom"


class AlertSeverity(str, Enum):
    INFO = "Info"
    WARNING = "Warning"
    CRITICAL = "Critical"


class AlertStatus(str, Enum):
    TRIGGERED = "Triggered"
    ACKNOWLEDGED = "Acknowledged"
    RESOLVED = "Resolved"
