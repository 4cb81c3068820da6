"""In-memory lookup of categories by slug.

The cache answers "does slug X exist, and what is its id/parent?" without a
store query per row. It is a denormalised read model owned by one import run,
rebuilt from the store on demand and never persisted. It is not thread-safe.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Self

if TYPE_CHECKING:
    from collections.abc import Collection

    from catalog_import.domain.ports import CategoryRepository


@dataclass(frozen=True, slots=True)
class CacheEntry:
    id: int
    name: str | None = None
    parent_id: int | None = None


class CategoryLookupCache:
    """Slug-keyed cache of ``(id, name, parent_id)`` for existing categories."""

    def __init__(self, categories: CategoryRepository) -> None:
        self._categories = categories
        self._items: dict[str, CacheEntry] = {}
        self._slugs_by_id: dict[int, str] = {}

    def init(self) -> None:
        """Drop every entry and reload the whole tree from the store."""
        self._items.clear()
        self._slugs_by_id.clear()
        self.load()

    def load(self, slugs: Collection[str] | None = None) -> None:
        """Upsert categories from the store; all of them unless ``slugs`` is given."""
        if slugs:
            summaries = self._categories.list_by_slugs(slugs)
        else:
            summaries = self._categories.list_all()
        for summary in summaries:
            self.set(summary.slug, summary.id, summary.name, summary.parent_id)

    def set(
        self,
        slug: str,
        category_id: int,
        name: str | None = None,
        parent_id: int | None = None,
    ) -> Self:
        previous = self._items.get(slug)
        if previous is not None and previous.id != category_id:
            self._slugs_by_id.pop(previous.id, None)
        self._items[slug] = CacheEntry(id=category_id, name=name, parent_id=parent_id)
        self._slugs_by_id[category_id] = slug
        return self

    def has(self, slug: str) -> bool:
        return slug in self._items

    def get(self, slug: str) -> CacheEntry | None:
        return self._items.get(slug)

    def has_id(self, category_id: int) -> bool:
        return category_id in self._slugs_by_id

    def find_by_name(self, name: str) -> CacheEntry | None:
        """Return the first entry named ``name``.

        Linear in the number of cached categories, and only finds categories
        that were loaded, so it expects the tree to be preloaded with ``init``.
        """
        for entry in self._items.values():
            if entry.name == name:
                return entry
        return None

    def is_empty(self) -> bool:
        return not self._items

    def __len__(self) -> int:
        return len(self._items)
