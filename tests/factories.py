"""Builders for domain objects used across the test modules."""

from datetime import datetime, timedelta, timezone

from model_registry.domain import (
    InstalledModel,
    Model,
    ModelRuntime,
    ModelSource,
    ModelStatus,
    ModelType,
    RepositoryType,
    RuntimeConfig,
)
from model_registry.domain.models import GIB

BASE_TIME = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def at(minutes: int) -> datetime:
    """A fixed timestamp ``minutes`` after BASE_TIME."""
    return BASE_TIME + timedelta(minutes=minutes)


def make_model(name: str = "llama-3-8b", **overrides) -> Model:
    values = dict(
        name=name,
        display_name=name.replace("-", " ").title(),
        description=f"{name} description",
        version="1.0",
        model_type=ModelType.CHAT,
        file_size=4 * GIB,
        provider="meta",
        tags=["chat", "general"],
        languages=["en"],
        config={"context_length": 8192},
    )
    values.update(overrides)
    return Model(**values)


def make_installed(model: Model, **overrides) -> InstalledModel:
    values = dict(
        model=model,
        install_path=f"/opt/models/{model.name}",
        status=ModelStatus.STOPPED,
        port=8080,
    )
    values.update(overrides)
    return InstalledModel(**values)


def make_config(name: str = "default", **overrides) -> RuntimeConfig:
    values = dict(
        name=name,
        max_context_length=4096,
        temperature=0.7,
        stop_sequences=["</s>"],
        gpu_device_ids=[0],
        custom_params={"threads": 8},
    )
    values.update(overrides)
    return RuntimeConfig(**values)


def make_runtime(model: Model, config: RuntimeConfig, **overrides) -> ModelRuntime:
    values = dict(
        model_id=model.id,
        runtime_config_id=config.id,
        name=f"{model.name}-runtime",
        port=9000,
        health_endpoint="http://localhost:9000/health",
        api_endpoint="http://localhost:9000/v1",
        environment={"CUDA_VISIBLE_DEVICES": "0"},
    )
    values.update(overrides)
    return ModelRuntime(**values)


def make_source(name: str = "huggingface", **overrides) -> ModelSource:
    values = dict(
        name=name,
        url=f"https://{name}.example.com",
        repo_type=RepositoryType.HUGGING_FACE,
        tags=["public"],
    )
    values.update(overrides)
    return ModelSource(**values)
