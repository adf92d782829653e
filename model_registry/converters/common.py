"""
Shared conversion helpers: integer narrowing, typed JSON text, optional text.
"""

from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from ..errors import ConversionError, MalformedJsonError, NumericOverflowError

M = TypeVar("M", bound=BaseModel)

STR_LIST = TypeAdapter(List[str])
INT_LIST = TypeAdapter(List[int])
STR_MAP = TypeAdapter(Dict[str, str])
JSON_OBJECT = TypeAdapter(Dict[str, Any])
JSON_ANY = TypeAdapter(Any)


def to_signed(field: str, value: Optional[int], bits: int) -> Optional[int]:
    """Narrow an unsigned domain integer into a signed ``bits``-wide column."""
    if value is None:
        return None
    if value < 0 or value > 2 ** (bits - 1) - 1:
        raise NumericOverflowError(field, value, bits)
    return value


def to_unsigned(field: str, value: Optional[int], bits: int) -> Optional[int]:
    """Widen a stored signed integer back to its unsigned domain type."""
    if value is None:
        return None
    if value < 0:
        raise NumericOverflowError(field, value, bits)
    return value


def dump_json(adapter: TypeAdapter, value: Any) -> str:
    """Compact JSON text; empty collections become ``[]`` / ``{}``."""
    return adapter.dump_json(value).decode("utf-8")


def load_json(adapter: TypeAdapter, field: str, raw: Optional[str]) -> Any:
    """Parse JSON text into the shape ``adapter`` describes."""
    if raw is None:
        raise MalformedJsonError(field)
    try:
        return adapter.validate_json(raw)
    except ValidationError as exc:
        raise MalformedJsonError(field, exc) from exc


def load_optional_json(adapter: TypeAdapter, field: str, raw: Optional[str]) -> Any:
    if raw is None:
        return None
    return load_json(adapter, field, raw)


def optional_text(value: Optional[str]) -> Optional[str]:
    """Empty stored text reads back as ``None``."""
    if value is None or value == "":
        return None
    return value


def build(model_cls: Type[M], **values: Any) -> M:
    """Construct a domain model from stored values.

    Values that pass the column types but violate a domain constraint
    (a rating above 5, say) surface as ConversionError.
    """
    try:
        return model_cls(**values)
    except ValidationError as exc:
        errors = exc.errors()
        field = ".".join(str(part) for part in errors[0]["loc"]) if errors else ""
        raise ConversionError(field or model_cls.__name__, str(exc)) from exc
