"""Converters for model sources, their indexes, published models and sync results."""

from typing import List

from pydantic import TypeAdapter

from ..db.source_tables import (
    ModelSourceRow,
    RepositoryIndexRow,
    RepositoryModelRow,
    SyncResultRow,
)
from ..domain.enums import RepositoryType, SyncStatus, parse_enum
from ..domain.sources import (
    DownloadUrl,
    ModelFile,
    ModelSource,
    RepositoryAuth,
    RepositoryIndex,
    RepositoryModel,
    SyncResult,
)
from .common import (
    JSON_OBJECT,
    STR_LIST,
    build,
    dump_json,
    load_json,
    load_optional_json,
    optional_text,
    to_signed,
    to_unsigned,
)

AUTH = TypeAdapter(RepositoryAuth)
DOWNLOAD_URLS = TypeAdapter(List[DownloadUrl])
MODEL_FILES = TypeAdapter(List[ModelFile])


def _check_sizes(field: str, entries) -> None:
    for entry in entries:
        to_signed(field, entry.size, 64)


def model_source_to_row(source: ModelSource) -> ModelSourceRow:
    return ModelSourceRow(
        id=source.id,
        name=source.name,
        url=source.url,
        repo_type=source.repo_type.value,
        enabled=source.enabled,
        auth_config=(
            None if source.auth_config is None else dump_json(AUTH, source.auth_config)
        ),
        last_sync=source.last_sync,
        sync_status=source.sync_status.value,
        description=source.description,
        tags=dump_json(STR_LIST, source.tags),
        priority=to_signed("priority", source.priority, 32),
        created_at=source.created_at,
        updated_at=source.updated_at,
    )


def row_to_model_source(row: ModelSourceRow) -> ModelSource:
    return build(
        ModelSource,
        id=row.id,
        name=row.name,
        url=row.url,
        repo_type=parse_enum(RepositoryType, "repo_type", row.repo_type),
        enabled=bool(row.enabled),
        auth_config=load_optional_json(AUTH, "auth_config", row.auth_config),
        last_sync=row.last_sync,
        sync_status=parse_enum(SyncStatus, "sync_status", row.sync_status),
        description=optional_text(row.description),
        tags=load_json(STR_LIST, "tags", row.tags),
        priority=to_unsigned("priority", row.priority, 32),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def repository_index_to_row(index: RepositoryIndex) -> RepositoryIndexRow:
    return RepositoryIndexRow(
        id=index.id,
        repository_id=index.repository_id,
        version=index.version,
        updated_at=index.updated_at,
        checksum=index.checksum,
        metadata_=dump_json(JSON_OBJECT, index.metadata),
    )


def row_to_repository_index(row: RepositoryIndexRow) -> RepositoryIndex:
    return build(
        RepositoryIndex,
        id=row.id,
        repository_id=row.repository_id,
        version=row.version,
        updated_at=row.updated_at,
        checksum=optional_text(row.checksum),
        metadata=load_json(JSON_OBJECT, "metadata", row.metadata_),
    )


def repository_model_to_row(published: RepositoryModel) -> RepositoryModelRow:
    _check_sizes("download_urls", published.download_urls)
    _check_sizes("files", published.files)
    return RepositoryModelRow(
        id=published.id,
        repository_id=published.repository_id,
        model_id=published.model_id,
        repo_model_id=published.repo_model_id,
        repo_path=published.repo_path,
        download_urls=dump_json(DOWNLOAD_URLS, published.download_urls),
        files=dump_json(MODEL_FILES, published.files),
        dependencies=dump_json(STR_LIST, published.dependencies),
        installation_notes=published.installation_notes,
        usage_examples=dump_json(STR_LIST, published.usage_examples),
        license_text=published.license_text,
        model_card=published.model_card,
        created_at=published.created_at,
        updated_at=published.updated_at,
    )


def row_to_repository_model(row: RepositoryModelRow) -> RepositoryModel:
    return build(
        RepositoryModel,
        id=row.id,
        repository_id=row.repository_id,
        model_id=row.model_id,
        repo_model_id=row.repo_model_id,
        repo_path=row.repo_path,
        download_urls=load_json(DOWNLOAD_URLS, "download_urls", row.download_urls),
        files=load_json(MODEL_FILES, "files", row.files),
        dependencies=load_json(STR_LIST, "dependencies", row.dependencies),
        installation_notes=optional_text(row.installation_notes),
        usage_examples=load_json(STR_LIST, "usage_examples", row.usage_examples),
        license_text=optional_text(row.license_text),
        model_card=optional_text(row.model_card),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def sync_result_to_row(result: SyncResult) -> SyncResultRow:
    return SyncResultRow(
        id=result.id,
        repository_id=result.repository_id,
        started_at=result.started_at,
        completed_at=result.completed_at,
        status=result.status.value,
        models_added=to_signed("models_added", result.models_added, 32),
        models_updated=to_signed("models_updated", result.models_updated, 32),
        models_removed=to_signed("models_removed", result.models_removed, 32),
        error_message=result.error_message,
        log_entries=dump_json(STR_LIST, result.log_entries),
    )


def row_to_sync_result(row: SyncResultRow) -> SyncResult:
    return build(
        SyncResult,
        id=row.id,
        repository_id=row.repository_id,
        started_at=row.started_at,
        completed_at=row.completed_at,
        status=parse_enum(SyncStatus, "status", row.status),
        models_added=to_unsigned("models_added", row.models_added, 32),
        models_updated=to_unsigned("models_updated", row.models_updated, 32),
        models_removed=to_unsigned("models_removed", row.models_removed, 32),
        error_message=optional_text(row.error_message),
        log_entries=load_json(STR_LIST, "log_entries", row.log_entries),
    )
