"""
Schema registry: DDL rendering per dialect and live-schema verification.
"""

from typing import Dict, List, Tuple

import structlog
from sqlalchemy import inspect
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.schema import CreateIndex, CreateTable

from ..errors import SchemaMismatchError, StorageError
from . import (  # noqa: F401
    activity_tables,
    monitoring_tables,
    runtime_tables,
    source_tables,
    tables,
)
from .base import Base, Database

logger = structlog.get_logger(__name__)

_DIALECTS = {
    "postgresql": postgresql.dialect,
    "sqlite": sqlite.dialect,
}


def render_schema(dialect_name: str) -> str:
    """Return the CREATE TABLE / CREATE INDEX statements for ``dialect_name``.

    Supported dialects are ``"postgresql"`` and ``"sqlite"``.
    """
    try:
        dialect = _DIALECTS[dialect_name]()
    except KeyError:
        raise ValueError(f"Unsupported dialect: {dialect_name}") from None

    statements = []
    for table in Base.metadata.sorted_tables:
        statements.append(str(CreateTable(table).compile(dialect=dialect)).strip() + ";")
        for index in sorted(table.indexes, key=lambda i: i.name):
            statements.append(str(CreateIndex(index).compile(dialect=dialect)) + ";")
    return "\n\n".join(statements) + "\n"


def _find_missing(sync_conn) -> Tuple[List[str], Dict[str, List[str]]]:
    inspector = inspect(sync_conn)
    existing = set(inspector.get_table_names())

    missing_tables = []
    missing_columns = {}
    for table in Base.metadata.sorted_tables:
        if table.name not in existing:
            missing_tables.append(table.name)
            continue
        live = {column["name"] for column in inspector.get_columns(table.name)}
        absent = [column.name for column in table.columns if column.name not in live]
        if absent:
            missing_columns[table.name] = absent
    return missing_tables, missing_columns


async def verify_schema(database: Database) -> None:
    """Check every mapped table and column exists in the live database.

    Raises SchemaMismatchError listing what is missing.
    """
    try:
        async with database.engine.connect() as conn:
            missing_tables, missing_columns = await conn.run_sync(_find_missing)
    except SQLAlchemyError as exc:
        raise StorageError(f"Schema inspection failed: {exc}") from exc

    if missing_tables or missing_columns:
        raise SchemaMismatchError(missing_tables, missing_columns)
    logger.info("schema_verified", tables=len(Base.metadata.tables))
