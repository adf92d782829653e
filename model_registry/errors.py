"""
Error hierarchy for the model registry.

Repositories raise only the StorageError family. Converters raise
ConversionError. Services add the business-rule errors on top of both.
"""

from typing import Any, Dict, Optional
from uuid import UUID


class RegistryError(Exception):
    """Root of every error raised by this package."""

    code = "REGISTRY_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.code, "message": self.message}


# --- storage -----------------------------------------------------------------


class StorageError(RegistryError):
    """A statement failed in the database driver or pool."""

    code = "STORAGE_ERROR"


class ConflictError(StorageError):
    """A unique constraint rejected the write."""

    code = "CONFLICT"


class SchemaMismatchError(StorageError):
    """The live database does not match the mapped tables."""

    code = "SCHEMA_MISMATCH"

    def __init__(self, missing_tables: list, missing_columns: Dict[str, list]):
        self.missing_tables = missing_tables
        self.missing_columns = missing_columns
        parts = []
        if missing_tables:
            parts.append(f"missing tables: {', '.join(sorted(missing_tables))}")
        for table, columns in sorted(missing_columns.items()):
            parts.append(f"{table} missing columns: {', '.join(sorted(columns))}")
        super().__init__("; ".join(parts) or "schema mismatch")

    def to_dict(self) -> Dict[str, Any]:
        return {
            **super().to_dict(),
            "missing_tables": sorted(self.missing_tables),
            "missing_columns": {k: sorted(v) for k, v in self.missing_columns.items()},
        }


# --- conversion --------------------------------------------------------------


class ConversionError(RegistryError):
    """A stored value could not be mapped to or from the domain shape."""

    code = "CONVERSION_ERROR"

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "field": self.field}


class InvalidEnumValueError(ConversionError):
    code = "INVALID_ENUM_VALUE"

    def __init__(self, field: str, value: Any):
        self.value = value
        super().__init__(field, f"Invalid value {value!r} for {field}")

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "value": self.value}


class MalformedJsonError(ConversionError):
    code = "MALFORMED_JSON"

    def __init__(self, field: str, cause: Optional[Exception] = None):
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(field, f"Malformed JSON in {field}{detail}")


class NumericOverflowError(ConversionError):
    """An integer does not fit the target width or sign."""

    code = "NUMERIC_OVERFLOW"

    def __init__(self, field: str, value: int, bits: int):
        self.value = value
        self.bits = bits
        super().__init__(
            field, f"Value {value} for {field} does not fit in {bits} bits"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "value": self.value, "bits": self.bits}


# --- business rules ----------------------------------------------------------


class ServiceError(RegistryError):
    code = "SERVICE_ERROR"


class ModelNotFoundError(ServiceError):
    code = "MODEL_NOT_FOUND"

    def __init__(self, model_ref: Any):
        self.model_ref = str(model_ref)
        super().__init__(f"Model not found: {self.model_ref}")

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "model": self.model_ref}


class ModelAlreadyExistsError(ServiceError):
    code = "MODEL_ALREADY_EXISTS"

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Model already exists: {name}")

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "name": self.name}


class ModelAlreadyInstalledError(ServiceError):
    code = "MODEL_ALREADY_INSTALLED"

    def __init__(self, model_id: UUID):
        self.model_id = model_id
        super().__init__(f"Model already installed: {model_id}")

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "model_id": str(self.model_id)}


class ModelNotInstalledError(ServiceError):
    code = "MODEL_NOT_INSTALLED"

    def __init__(self, model_id: UUID):
        self.model_id = model_id
        super().__init__(f"Model not installed: {model_id}")

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "model_id": str(self.model_id)}


class ModelHasInstalledInstancesError(ServiceError):
    code = "MODEL_HAS_INSTALLED_INSTANCES"

    def __init__(self, model_id: UUID):
        self.model_id = model_id
        super().__init__(
            f"Cannot delete model {model_id}: it has installed instances"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "model_id": str(self.model_id)}


class RecordNotFoundError(ServiceError):
    """A secondary entity (runtime, source, alert...) does not exist."""

    code = "RECORD_NOT_FOUND"

    def __init__(self, kind: str, record_id: Any):
        self.kind = kind
        self.record_id = str(record_id)
        super().__init__(f"{kind} not found: {self.record_id}")

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "kind": self.kind, "id": self.record_id}


class SourceAlreadyExistsError(ServiceError):
    code = "SOURCE_ALREADY_EXISTS"

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Model source already exists: {name}")

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "name": self.name}
