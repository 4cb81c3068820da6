"""SQLAlchemy engine lifecycle and the import unit of work.

The engine is bound once per process with ``startup`` and released with
``shutdown``; every ``SqlAlchemyImportUnitOfWork`` opens a fresh session on it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from catalog_import.adapters.sqlalchemy.mappings import create_all_tables, start_mappers
from catalog_import.adapters.sqlalchemy.repositories import (
    SqlAlchemyCategoryRepository,
    SqlAlchemyImportBatchRepository,
)
from catalog_import.config.storage import get_database_uri
from catalog_import.domain.ports.unit_of_work import ImportRepositories

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine


class StartupError(RuntimeError):
    """Raised when the store is used before ``startup`` or bound twice."""


@dataclass(frozen=True, slots=True)
class _Binding:
    engine: Engine
    sessions: sessionmaker[Session]


class _EngineRegistry:
    def __init__(self) -> None:
        self._binding: _Binding | None = None

    @property
    def engine(self) -> Engine | None:
        return self._binding.engine if self._binding is not None else None

    def bind(self, engine: Engine) -> None:
        self._binding = _Binding(
            engine=engine,
            sessions=sessionmaker(bind=engine, expire_on_commit=False),
        )

    def release(self) -> Engine | None:
        engine = self.engine
        self._binding = None
        return engine

    def sessions(self) -> sessionmaker[Session]:
        if self._binding is None:
            raise StartupError(
                "No database bound. Call catalog_import.adapters.sqlalchemy.startup() "
                "before opening a unit of work."
            )
        return self._binding.sessions


_REGISTRY = _EngineRegistry()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    replace: bool = False,
) -> Engine:
    """Bind the category store: map the model, create missing tables, keep the engine."""

    if _REGISTRY.engine is not None and not replace:
        raise StartupError("A database is already bound. Pass replace=True to rebind.")

    resolved = engine or create_engine(database_uri or get_database_uri(), future=True)
    start_mappers()
    create_all_tables(resolved)
    _REGISTRY.bind(resolved)
    return resolved


def current_engine() -> Engine | None:
    return _REGISTRY.engine


def is_started() -> bool:
    return _REGISTRY.engine is not None


def shutdown() -> None:
    """Dispose the bound engine, if any."""

    engine = _REGISTRY.release()
    if engine is not None:
        engine.dispose()


class SqlAlchemyImportUnitOfWork:
    """Session-per-context unit of work over the category and batch tables."""

    def __init__(self) -> None:
        self._sessions = _REGISTRY.sessions()
        self._session: Session | None = None
        self._repositories: ImportRepositories | None = None

    def __enter__(self) -> SqlAlchemyImportUnitOfWork:
        if self._session is not None:
            raise StartupError("Unit of work is already open")
        session = self._sessions()
        self._session = session
        self._repositories = ImportRepositories(
            categories=SqlAlchemyCategoryRepository(session),
            import_batches=SqlAlchemyImportBatchRepository(session),
        )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session = self.session
        try:
            if exc_type is not None:
                session.rollback()
        finally:
            session.close()
            self._session = None
            self._repositories = None
        return False

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work is not open; use it as a context manager")
        return self._session

    @property
    def repositories(self) -> ImportRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work is not open; use it as a context manager")
        return self._repositories

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


if TYPE_CHECKING:
    from catalog_import.domain.ports.unit_of_work import ImportUnitOfWork

    _uow_check: ImportUnitOfWork = SqlAlchemyImportUnitOfWork()
