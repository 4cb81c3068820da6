"""Category tree entities.

Categories form a rooted tree through ``parent_id``. The ``lft``/``rgt`` pair is
a nested-interval encoding of that tree used for subtree range queries; it is
never maintained incrementally and only holds after a global rebuild.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(eq=False, kw_only=True)
class Category:
    slug: str
    name: str
    status: bool = True
    parent_id: int | None = None
    position: int | None = None
    description: str | None = None
    meta_title: str | None = None
    meta_description: str | None = None
    meta_keywords: str | None = None
    locale: str | None = None
    display_mode: str | None = None
    logo_path: str | None = None
    banner_path: str | None = None

    # assigned by the store on creation
    id: int | None = None

    lft: int = 0
    rgt: int = 0

    def contains(self, other: Category) -> bool:
        """Return whether ``other`` lies in this category's subtree (after a rebuild)."""
        return self.lft < other.lft and other.rgt < self.rgt

    def summary(self) -> CategorySummary:
        if self.id is None:
            raise ValueError("category has not been persisted yet")
        return CategorySummary(
            id=self.id,
            slug=self.slug,
            name=self.name,
            parent_id=self.parent_id,
        )


@dataclass(frozen=True, slots=True)
class CategorySummary:
    """Projection of the columns needed to resolve slug and parent references."""

    id: int
    slug: str
    name: str
    parent_id: int | None = None
