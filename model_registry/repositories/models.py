"""
Repository for registry entries (``models``) and installations
(``installed_models``).
"""

from typing import List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy import asc, cast, delete, desc, exists, func, or_, select, update
from sqlalchemy.dialects.postgresql import JSONB

from ..db.tables import InstalledModelRow, ModelRow
from ..domain.primitives import utc_now
from .base import BaseRepository, ModelQuery, Page, Pagination, SortBy

models_table = ModelRow.__table__
installed_table = InstalledModelRow.__table__


class ModelsRepository(BaseRepository):
    """Row-level access to models and their installations."""

    # --- models --------------------------------------------------------------

    async def create_model(self, row: ModelRow) -> ModelRow:
        """Insert a model row. Raises ConflictError on a duplicate name or id."""
        return await self._insert(row)

    async def get_model_by_id(self, model_id: UUID) -> Optional[ModelRow]:
        return await self._first(select(ModelRow).where(ModelRow.id == model_id))

    async def get_model_by_name(self, name: str) -> Optional[ModelRow]:
        return await self._first(select(ModelRow).where(ModelRow.name == name))

    async def update_model(self, row: ModelRow) -> ModelRow:
        return await self._update(row)

    async def delete_model(self, model_id: UUID) -> bool:
        return await self._delete_by_id(ModelRow, model_id)

    async def list_models(self) -> List[ModelRow]:
        return await self._all(select(ModelRow).order_by(desc(ModelRow.created_at)))

    async def search_models(
        self, query: str, limit: Optional[int] = None
    ) -> List[ModelRow]:
        """Case-insensitive substring match on name, display name and description.

        ``%`` and ``_`` in ``query`` match literally.
        """
        if limit is None:
            limit = self.settings.search_default_limit
        if limit < 1:
            raise ValueError("limit must be >= 1")
        stmt = (
            select(ModelRow)
            .where(self._search_clause(query))
            .order_by(desc(ModelRow.created_at))
            .limit(limit)
        )
        return await self._all(stmt)

    async def list_models_by_type(self, model_type: str) -> List[ModelRow]:
        stmt = (
            select(ModelRow)
            .where(ModelRow.model_type == model_type)
            .order_by(desc(ModelRow.created_at))
        )
        return await self._all(stmt)

    async def list_models_by_provider(self, provider: str) -> List[ModelRow]:
        stmt = (
            select(ModelRow)
            .where(ModelRow.provider == provider)
            .order_by(desc(ModelRow.created_at))
        )
        return await self._all(stmt)

    async def list_official_models(self) -> List[ModelRow]:
        stmt = (
            select(ModelRow)
            .where(ModelRow.is_official.is_(True))
            .order_by(desc(ModelRow.created_at))
        )
        return await self._all(stmt)

    async def list_models_page(
        self,
        query: Optional[ModelQuery] = None,
        pagination: Optional[Pagination] = None,
        sort: Optional[SortBy] = None,
    ) -> Page[ModelRow]:
        """Filtered, sorted page of models plus the total match count."""
        query = query or ModelQuery()
        pagination = pagination or Pagination()
        sort = sort or SortBy()
        limit = pagination.limit or self.settings.page_default_limit

        conditions = self._query_conditions(query)
        sort_column = getattr(ModelRow, sort.field)
        order = desc(sort_column) if sort.descending else asc(sort_column)

        total = await self._scalar(
            select(func.count()).select_from(ModelRow).where(*conditions)
        )
        items = await self._all(
            select(ModelRow)
            .where(*conditions)
            .order_by(order, ModelRow.id)
            .offset(pagination.offset)
            .limit(limit)
        )
        return Page(
            items=items,
            total_count=total or 0,
            offset=pagination.offset,
            limit=limit,
        )

    async def increment_download_count(self, model_id: UUID) -> bool:
        stmt = (
            update(models_table)
            .where(models_table.c.id == model_id)
            .values(
                download_count=models_table.c.download_count + 1,
                updated_at=utc_now(),
            )
        )
        return await self._execute(stmt) > 0

    # --- installations -------------------------------------------------------

    async def install_model(self, row: InstalledModelRow) -> InstalledModelRow:
        """Insert an installation. Raises ConflictError if the model already has one."""
        return await self._insert(row)

    async def get_installed_by_model_id(
        self, model_id: UUID
    ) -> Optional[InstalledModelRow]:
        return await self._first(
            select(InstalledModelRow).where(InstalledModelRow.model_id == model_id)
        )

    async def list_installed_models(self) -> List[InstalledModelRow]:
        return await self._all(
            select(InstalledModelRow).order_by(desc(InstalledModelRow.installed_at))
        )

    async def list_installed_by_status(self, status: str) -> List[InstalledModelRow]:
        stmt = (
            select(InstalledModelRow)
            .where(InstalledModelRow.status == status)
            .order_by(desc(InstalledModelRow.installed_at))
        )
        return await self._all(stmt)

    async def update_installed_model(self, row: InstalledModelRow) -> InstalledModelRow:
        return await self._update(row)

    async def uninstall_model(self, model_id: UUID) -> bool:
        stmt = delete(installed_table).where(installed_table.c.model_id == model_id)
        return await self._execute(stmt) > 0

    async def mark_model_used(self, model_id: UUID) -> bool:
        """Bump usage_count and stamp last_used in one statement."""
        now = utc_now()
        stmt = (
            update(installed_table)
            .where(installed_table.c.model_id == model_id)
            .values(
                usage_count=installed_table.c.usage_count + 1,
                last_used=now,
                updated_at=now,
            )
        )
        return await self._execute(stmt) > 0

    async def count_installed(self) -> int:
        return await self._scalar(select(func.count()).select_from(InstalledModelRow))

    async def list_orphaned_installations(self) -> List[InstalledModelRow]:
        """Installations whose model row no longer exists."""
        stmt = select(InstalledModelRow).where(
            ~exists().where(ModelRow.id == InstalledModelRow.model_id)
        )
        return await self._all(stmt)

    async def delete_installed_by_ids(self, ids: Sequence[UUID]) -> int:
        if not ids:
            return 0
        stmt = delete(installed_table).where(installed_table.c.id.in_(list(ids)))
        return await self._execute(stmt)

    # --- joins ---------------------------------------------------------------

    async def list_models_with_install_info(
        self,
    ) -> List[Tuple[ModelRow, Optional[InstalledModelRow]]]:
        """Every model paired with its installation, or None, in one LEFT JOIN."""
        stmt = (
            select(ModelRow, InstalledModelRow)
            .outerjoin(InstalledModelRow, InstalledModelRow.model_id == ModelRow.id)
            .order_by(desc(ModelRow.created_at))
        )
        return await self._tuples(stmt)

    async def list_installed_with_models(
        self, status: Optional[str] = None
    ) -> List[Tuple[InstalledModelRow, ModelRow]]:
        stmt = select(InstalledModelRow, ModelRow).join(
            ModelRow, InstalledModelRow.model_id == ModelRow.id
        )
        if status is not None:
            stmt = stmt.where(InstalledModelRow.status == status)
        stmt = stmt.order_by(desc(InstalledModelRow.installed_at))
        return await self._tuples(stmt)

    # --- helpers -------------------------------------------------------------

    @staticmethod
    def _search_clause(query: str):
        return or_(
            ModelRow.name.icontains(query, autoescape=True),
            ModelRow.display_name.icontains(query, autoescape=True),
            ModelRow.description.icontains(query, autoescape=True),
        )

    def _has_tag(self, tag: str):
        """Whole-element match against the stored JSON tag array."""
        if self.database.dialect_name == "postgresql":
            return cast(ModelRow.tags, JSONB).contains([tag])
        elements = func.json_each(ModelRow.tags).table_valued("value")
        return (
            select(elements.c.value)
            .where(elements.c.value == tag)
            .correlate(ModelRow)
            .exists()
        )

    def _query_conditions(self, query: ModelQuery) -> list:
        conditions = []
        if query.search:
            conditions.append(self._search_clause(query.search))
        if query.model_type is not None:
            conditions.append(ModelRow.model_type == query.model_type)
        if query.provider is not None:
            conditions.append(ModelRow.provider == query.provider)
        for tag in query.tags:
            conditions.append(self._has_tag(tag))
        if query.created_after is not None:
            conditions.append(ModelRow.created_at >= query.created_after)
        if query.created_before is not None:
            conditions.append(ModelRow.created_at < query.created_before)
        return conditions
