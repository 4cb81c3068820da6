"""Decoding of raw source rows into typed category rows.

Rows arrive as a bag of string columns. Only the recognised columns are read;
anything else is ignored. Presence matters: a recognised column that is absent
from the row is left out of the projected fields so that an update does not
overwrite the stored value.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Final, Literal, TypedDict

from pydantic import BaseModel, ConfigDict, Field, field_validator

VALID_COLUMN_NAMES: Final[tuple[str, ...]] = (
    "name",
    "slug",
    "parent_id",
    "position",
    "status",
    "description",
    "meta_title",
    "meta_description",
    "meta_keywords",
    "locale",
)
OPTIONAL_COLUMN_NAMES: Final[tuple[str, ...]] = ("display_mode", "logo_path", "banner_path")
REQUIRED_COLUMN_NAMES: Final[tuple[str, ...]] = ("name", "slug", "status")

# stored integer columns are signed 64-bit
MAX_STORED_INT: Final[int] = 2**63 - 1
MIN_STORED_INT: Final[int] = -(2**63)


class CategoryFields(TypedDict, total=False):
    """Field values written to the category store."""

    slug: str
    name: str
    status: bool
    parent_id: int | None
    position: int | None
    description: str | None
    meta_title: str | None
    meta_description: str | None
    meta_keywords: str | None
    locale: str | None
    display_mode: str | None
    logo_path: str | None
    banner_path: str | None


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def parse_category_id(value: str | None) -> int | None:
    """Return the category id referenced by ``value``; blank means no reference.

    Raises ``ValueError`` for anything that is not an integer id the store could hold.
    """
    if value is None or not value.strip():
        return None
    category_id = int(value)
    if not 0 <= category_id <= MAX_STORED_INT:
        raise ValueError(f"category id out of range: {value.strip()}")
    # 0 is never assigned, sources use it for "no parent"
    return category_id or None


class CategoryRow(BaseModel):
    """One source row after structural validation."""

    model_config = ConfigDict(extra="ignore", frozen=True, str_strip_whitespace=True)

    name: str = Field(min_length=1)
    slug: str = Field(min_length=1)
    status: Literal["0", "1"]
    parent_id: str | None = None
    position: int | None = Field(default=None, ge=MIN_STORED_INT, le=MAX_STORED_INT)
    description: str | None = None
    meta_title: str | None = None
    meta_description: str | None = None
    meta_keywords: str | None = None
    locale: str | None = None
    display_mode: str | None = None
    logo_path: str | None = None
    banner_path: str | None = None

    _normalize_position = field_validator("position", mode="before")(_blank_to_none)

    @property
    def is_active(self) -> bool:
        return self.status == "1"

    def present_columns(self) -> frozenset[str]:
        return frozenset(self.model_fields_set)

    def to_fields(self) -> CategoryFields:
        """Project the row onto the recognised columns it actually carries."""

        present = self.model_fields_set
        fields: CategoryFields = {
            "name": self.name,
            "slug": self.slug,
            "status": self.is_active,
        }
        if "parent_id" in present:
            fields["parent_id"] = parse_category_id(self.parent_id)
        if "position" in present:
            fields["position"] = self.position
        if "description" in present:
            fields["description"] = self.description
        if "meta_title" in present:
            fields["meta_title"] = self.meta_title
        if "meta_description" in present:
            fields["meta_description"] = self.meta_description
        if "meta_keywords" in present:
            fields["meta_keywords"] = self.meta_keywords
        if "locale" in present:
            fields["locale"] = self.locale
        # optional columns are carried whenever the row has them, blank included
        if "display_mode" in present:
            fields["display_mode"] = self.display_mode
        if "logo_path" in present:
            fields["logo_path"] = self.logo_path
        if "banner_path" in present:
            fields["banner_path"] = self.banner_path
        return fields


def missing_required_columns(columns: Iterable[str]) -> list[str]:
    """Return the required columns absent from a source header."""
    available = set(columns)
    return [name for name in REQUIRED_COLUMN_NAMES if name not in available]


def ignored_columns(columns: Iterable[str]) -> list[str]:
    """Return the header columns the importer does not read."""
    known = set(VALID_COLUMN_NAMES) | set(OPTIONAL_COLUMN_NAMES)
    return [name for name in columns if name not in known]
