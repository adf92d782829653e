"""Row <-> domain converters. Stateless; every function is pure."""

from .models import (
    available_model_to_row,
    installed_model_to_row,
    model_to_row,
    row_to_available_model,
    row_to_installed_model,
    row_to_model,
)
from .monitoring import (
    alert_event_to_row,
    application_metrics_to_row,
    global_config_to_row,
    model_metrics_to_row,
    row_to_alert_event,
    row_to_application_metrics,
    row_to_global_config,
    row_to_model_metrics,
    row_to_system_metrics,
    system_metrics_to_row,
)
from .runtime import (
    model_runtime_to_row,
    row_to_model_runtime,
    row_to_runtime_config,
    row_to_runtime_event,
    row_to_runtime_metrics,
    runtime_config_to_row,
    runtime_event_to_row,
    runtime_metrics_to_row,
)
from .sources import (
    model_source_to_row,
    repository_index_to_row,
    repository_model_to_row,
    row_to_model_source,
    row_to_repository_index,
    row_to_repository_model,
    row_to_sync_result,
    sync_result_to_row,
)

__all__ = [
    "model_to_row",
    "row_to_model",
    "installed_model_to_row",
    "row_to_installed_model",
    "available_model_to_row",
    "row_to_available_model",
    "runtime_config_to_row",
    "row_to_runtime_config",
    "model_runtime_to_row",
    "row_to_model_runtime",
    "runtime_metrics_to_row",
    "row_to_runtime_metrics",
    "runtime_event_to_row",
    "row_to_runtime_event",
    "model_source_to_row",
    "row_to_model_source",
    "repository_index_to_row",
    "row_to_repository_index",
    "repository_model_to_row",
    "row_to_repository_model",
    "sync_result_to_row",
    "row_to_sync_result",
    "global_config_to_row",
    "row_to_global_config",
    "system_metrics_to_row",
    "row_to_system_metrics",
    "application_metrics_to_row",
    "row_to_application_metrics",
    "model_metrics_to_row",
    "row_to_model_metrics",
    "alert_event_to_row",
    "row_to_alert_event",
]
