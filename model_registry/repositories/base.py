"""
Shared plumbing for the repositories.

Each public repository method runs one statement in its own session.
Driver errors are translated here, at a single seam: unique violations
become ConflictError, everything else StorageError, with the original
exception chained as ``__cause__``.
"""

from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import AsyncIterator, Generic, List, Optional, TypeVar

from sqlalchemy import delete, insert, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.base import Base, Database
from ..domain.primitives import utc_now
from ..errors import ConflictError, StorageError

R = TypeVar("R", bound=Base)
T = TypeVar("T")

SORTABLE_MODEL_FIELDS = (
    "name",
    "created_at",
    "updated_at",
    "file_size",
    "download_count",
    "rating",
)


@dataclass
class Pagination:
    offset: int = 0
    limit: Optional[int] = None

    def __post_init__(self):
        if self.offset < 0:
            raise ValueError("offset must be >= 0")
        if self.limit is not None and self.limit < 1:
            raise ValueError("limit must be >= 1")


@dataclass
class SortBy:
    field: str = "created_at"
    descending: bool = True

    def __post_init__(self):
        if self.field not in SORTABLE_MODEL_FIELDS:
            raise ValueError(f"Cannot sort models by {self.field!r}")


@dataclass
class ModelQuery:
    """Filters for a paged model listing; unset fields do not filter."""

    search: Optional[str] = None
    model_type: Optional[str] = None
    provider: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    created_after: Optional[datetime] = None
    created_before: Optional[datetime] = None


@dataclass
class Page(Generic[T]):
    items: List[T]
    total_count: int
    offset: int
    limit: int

    @property
    def has_more(self) -> bool:
        return self.offset + self.limit < self.total_count


def _is_unique_violation(exc: IntegrityError) -> bool:
    message = str(exc.orig).lower()
    return "unique" in message or "duplicate key" in message


class BaseRepository:
    """Statement helpers over a ``Database`` handle."""

    def __init__(self, database: Database):
        self.database = database
        self.settings = database.settings

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        try:
            async with self.database.session() as session:
                yield session
        except IntegrityError as exc:
            if _is_unique_violation(exc):
                raise ConflictError(f"Unique constraint violated: {exc.orig}") from exc
            raise StorageError(f"Integrity error: {exc.orig}") from exc
        except SQLAlchemyError as exc:
            raise StorageError(str(exc)) from exc

    async def _all(self, stmt) -> list:
        async with self._session() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def _first(self, stmt):
        async with self._session() as session:
            result = await session.execute(stmt)
            return result.scalars().first()

    async def _tuples(self, stmt) -> list:
        async with self._session() as session:
            result = await session.execute(stmt)
            return [tuple(row) for row in result.all()]

    async def _scalar(self, stmt):
        async with self._session() as session:
            return (await session.execute(stmt)).scalar()

    async def _execute(self, stmt) -> int:
        """Run a write statement and return the affected row count."""
        async with self._session() as session:
            result = await session.execute(stmt)
            await session.commit()
            return result.rowcount

    async def _insert(self, row: R) -> R:
        table = type(row).__table__
        values = row.column_values()
        await self._execute(insert(table).values(values))
        return row

    async def _update(self, row: R) -> R:
        """Replace every column of the row with ``row.id``; stamps ``updated_at``.

        No matching row is not an error.
        """
        table = type(row).__table__
        if "updated_at" in table.c:
            row.updated_at = utc_now()
        values = row.column_values()
        values.pop("id")
        values.pop("created_at", None)
        await self._execute(update(table).where(table.c.id == row.id).values(values))
        return row

    async def _delete_by_id(self, model_cls, record_id) -> bool:
        table = model_cls.__table__
        return await self._execute(delete(table).where(table.c.id == record_id)) > 0
