"""SQLAlchemy mapping metadata for the catalog import domain model."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    TypeDecorator,
    orm,
)
from sqlalchemy.orm import configure_mappers

from catalog_import.domain.model import BatchState, Category, ImportBatch

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

category_table = Table(
    "category",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("slug", String(255), nullable=False, unique=True),
    Column("name", String(255), nullable=False),
    Column(
        "parent_id",
        Integer,
        ForeignKey("category.id", ondelete="SET NULL"),
        nullable=True,
    ),
    Column("position", Integer, nullable=True),
    Column("status", Boolean, nullable=False, default=True),
    Column("description", Text, nullable=True),
    Column("meta_title", String(255), nullable=True),
    Column("meta_description", Text, nullable=True),
    Column("meta_keywords", Text, nullable=True),
    Column("locale", String(16), nullable=True),
    Column("display_mode", String(32), nullable=True),
    Column("logo_path", String(1024), nullable=True),
    Column("banner_path", String(1024), nullable=True),
    # nested-set bounds, only valid after a tree rebuild
    Column("_lft", Integer, key="lft", nullable=False, default=0),
    Column("_rgt", Integer, key="rgt", nullable=False, default=0),
    Index("ix_category_nested_set", "lft", "rgt"),
    Index("ix_category_parent_id", "parent_id"),
)

import_batch_table = Table(
    "import_batch",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("state", Enum(BatchState, native_enum=False), nullable=False),
    Column("data", JSON, nullable=False),
    Column("summary", JSON, nullable=True),
    Column("row_offset", Integer, nullable=False, default=0),
    Column("created_at", UTCDateTime(), nullable=False),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Category, category_table)
    mapper_registry.map_imperatively(ImportBatch, import_batch_table)

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
