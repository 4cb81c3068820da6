"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, cast

from sqlalchemy import select

from catalog_import.adapters.sqlalchemy.mappings import category_table
from catalog_import.adapters.sqlalchemy.nested_set import TreeNode, compute_nested_intervals
from catalog_import.domain.importing.errors import BatchNotFoundError, CategoryNotFoundError
from catalog_import.domain.model import (
    BatchState,
    BatchSummary,
    Category,
    CategorySummary,
    ImportBatch,
)

if TYPE_CHECKING:
    from collections.abc import Collection

    from sqlalchemy import Select
    from sqlalchemy.orm import Session

    from catalog_import.domain.importing.rows import CategoryFields

log = logging.getLogger(__name__)


class SqlAlchemyCategoryRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def find_by_id(self, category_id: int) -> Category | None:
        return self.session.get(Category, category_id)

    def find_by_slug(self, slug: str) -> Category | None:
        stmt = select(Category).where(category_table.c.slug == slug).limit(1)
        return self.session.execute(stmt).scalar_one_or_none()

    def create(self, fields: CategoryFields) -> Category:
        category = Category(**fields)
        self.session.add(category)
        self.session.flush()
        return category

    def update(self, category_id: int, fields: CategoryFields) -> Category:
        category = self.find_by_id(category_id)
        if category is None:
            raise CategoryNotFoundError(f"Category {category_id} does not exist")
        for name, value in fields.items():
            setattr(category, name, value)
        self.session.flush()
        return category

    def list_all(self) -> list[CategorySummary]:
        return self._summaries(self._summary_select())

    def list_by_slugs(self, slugs: Collection[str]) -> list[CategorySummary]:
        if not slugs:
            return []
        stmt = self._summary_select().where(category_table.c.slug.in_(list(slugs)))
        return self._summaries(stmt)

    def rebuild_tree(self) -> None:
        """Recompute ``lft``/``rgt`` for every category in the table."""

        categories = self.session.execute(select(Category)).scalars().all()
        intervals = compute_nested_intervals(
            TreeNode(id=category.id, parent_id=category.parent_id, position=category.position)
            for category in categories
            if category.id is not None
        )
        for category in categories:
            if category.id is None:
                continue
            category.lft, category.rgt = intervals.bounds[category.id]
            if category.id in intervals.detached:
                category.parent_id = None
        if intervals.detached:
            log.warning(
                "Detached %s categories with a missing or cyclic parent: %s",
                len(intervals.detached),
                sorted(intervals.detached),
            )
        self.session.flush()
        log.debug("Rebuilt nested set for %s categories", len(categories))

    @staticmethod
    def _summary_select() -> Select[tuple[int, str, str, int | None]]:
        return select(
            category_table.c.id,
            category_table.c.slug,
            category_table.c.name,
            category_table.c.parent_id,
        ).order_by(category_table.c.id)

    def _summaries(
        self,
        stmt: Select[tuple[int, str, str, int | None]],
    ) -> list[CategorySummary]:
        return [
            CategorySummary(id=row.id, slug=row.slug, name=row.name, parent_id=row.parent_id)
            for row in self.session.execute(stmt)
        ]


class SqlAlchemyImportBatchRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, batch: ImportBatch) -> None:
        self.session.add(batch)
        self.session.flush()

    def get(self, batch_id: int) -> ImportBatch | None:
        return self.session.get(ImportBatch, batch_id)

    def update_batch(
        self,
        batch_id: int,
        *,
        state: BatchState,
        summary: BatchSummary | None = None,
    ) -> None:
        batch = self.get(batch_id)
        if batch is None:
            raise BatchNotFoundError(f"Import batch {batch_id} does not exist")
        batch.state = state
        if summary is not None:
            batch.summary = summary.as_dict()
        self.session.flush()


if TYPE_CHECKING:
    from catalog_import.domain.ports.persistence import (
        CategoryRepository,
        ImportBatchRepository,
    )

    _session_stub = cast("Session", object())
    _category_repo: CategoryRepository = SqlAlchemyCategoryRepository(_session_stub)
    _batch_repo: ImportBatchRepository = SqlAlchemyImportBatchRepository(_session_stub)
