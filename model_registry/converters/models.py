"""
Converters between registry domain models and their rows.

Domain to row always recomputes ``size_category`` from ``file_size``; a
caller-supplied category never reaches storage.
"""

from pydantic import TypeAdapter

from ..db.tables import AvailableModelRow, InstalledModelRow, ModelRow
from ..domain.enums import ModelSize, ModelStatus, ModelType, parse_enum
from ..domain.models import (
    AvailableModel,
    InstalledModel,
    Model,
    SystemRequirements,
    classify_file_size,
)
from ..domain.primitives import utc_now
from .common import (
    JSON_OBJECT,
    STR_LIST,
    build,
    dump_json,
    load_json,
    optional_text,
    to_signed,
    to_unsigned,
)

SYSTEM_REQUIREMENTS = TypeAdapter(SystemRequirements)


def model_to_row(model: Model) -> ModelRow:
    return ModelRow(
        id=model.id,
        name=model.name,
        display_name=model.display_name,
        description=model.description,
        version=model.version,
        model_type=model.model_type.value,
        size_category=classify_file_size(model.file_size).value,
        file_size=to_signed("file_size", model.file_size, 64),
        provider=model.provider,
        license=model.license,
        tags=dump_json(STR_LIST, model.tags),
        languages=dump_json(STR_LIST, model.languages),
        created_at=model.created_at,
        updated_at=model.updated_at,
        file_path=model.file_path,
        checksum=model.checksum,
        download_url=model.download_url,
        config=dump_json(JSON_OBJECT, model.config),
        rating=model.rating,
        download_count=to_signed("download_count", model.download_count, 64),
        is_official=model.is_official,
    )


def row_to_model(row: ModelRow) -> Model:
    return build(
        Model,
        id=row.id,
        name=row.name,
        display_name=row.display_name,
        description=optional_text(row.description),
        version=row.version,
        model_type=parse_enum(ModelType, "model_type", row.model_type),
        size_category=parse_enum(ModelSize, "size_category", row.size_category),
        file_size=to_unsigned("file_size", row.file_size, 64),
        provider=row.provider,
        license=optional_text(row.license),
        tags=load_json(STR_LIST, "tags", row.tags),
        languages=load_json(STR_LIST, "languages", row.languages),
        file_path=optional_text(row.file_path),
        checksum=optional_text(row.checksum),
        download_url=optional_text(row.download_url),
        config=load_json(JSON_OBJECT, "config", row.config),
        rating=row.rating,
        download_count=to_unsigned("download_count", row.download_count, 64),
        is_official=bool(row.is_official),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def installed_model_to_row(installed: InstalledModel) -> InstalledModelRow:
    return InstalledModelRow(
        id=installed.id,
        model_id=installed.model.id,
        install_path=installed.install_path,
        installed_at=installed.installed_at,
        status=installed.status.value,
        port=to_signed("port", installed.port, 32),
        process_id=to_signed("process_id", installed.process_id, 32),
        last_used=installed.last_used,
        usage_count=to_signed("usage_count", installed.usage_count, 64),
        created_at=installed.installed_at,
        updated_at=utc_now(),
    )


def row_to_installed_model(row: InstalledModelRow, model_row: ModelRow) -> InstalledModel:
    """Rebuild an installation; ``model_row`` is the row ``row.model_id`` points at."""
    return build(
        InstalledModel,
        id=row.id,
        model=row_to_model(model_row),
        install_path=row.install_path,
        installed_at=row.installed_at,
        status=parse_enum(ModelStatus, "status", row.status),
        port=to_unsigned("port", row.port, 32),
        process_id=to_unsigned("process_id", row.process_id, 32),
        last_used=row.last_used,
        usage_count=to_unsigned("usage_count", row.usage_count, 64),
    )


def available_model_to_row(available: AvailableModel) -> AvailableModelRow:
    return AvailableModelRow(
        id=available.id,
        model_id=available.model.id,
        is_installed=available.is_installed,
        published_at=available.published_at,
        last_updated=available.last_updated,
        system_requirements=dump_json(
            SYSTEM_REQUIREMENTS, available.system_requirements
        ),
    )


def row_to_available_model(
    row: AvailableModelRow, model_row: ModelRow
) -> AvailableModel:
    return build(
        AvailableModel,
        id=row.id,
        model=row_to_model(model_row),
        is_installed=bool(row.is_installed),
        published_at=row.published_at,
        last_updated=row.last_updated,
        system_requirements=load_json(
            SYSTEM_REQUIREMENTS, "system_requirements", row.system_requirements
        ),
    )
