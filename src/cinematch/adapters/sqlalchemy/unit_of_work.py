"""Process-wide SQLAlchemy engine and the catalog unit of work built on it.

``startup()`` binds one engine (creating the catalog tables) and every
``SqlAlchemyCatalogUnitOfWork`` opens its session from that engine. Tests call
``startup(engine=..., force=True)`` and ``shutdown()`` around each case.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from cinematch.config.storage import get_database_config
from cinematch.domain.ports.unit_of_work import CatalogRepositories

from .repositories import (
    SqlAlchemyImportStateRepository,
    SqlAlchemyLocalIdRepository,
    SqlAlchemyLookupMetricRepository,
)
from .tables import create_all_tables, movie_table, person_table

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine


class StartupError(RuntimeError):
    """The database layer was used before ``startup()`` or outside an open unit of work."""


class _EngineRegistry:
    def __init__(self) -> None:
        self.engine: Engine | None = None
        self.sessions: sessionmaker[Session] | None = None

    def bind(self, engine: Engine) -> None:
        self.engine = engine
        self.sessions = sessionmaker(bind=engine, expire_on_commit=False)

    def clear(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
        self.engine = None
        self.sessions = None


_registry = _EngineRegistry()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Bind the engine used by every unit of work and make sure the tables exist.

    Without ``engine`` one is created from ``database_uri`` or ``DATABASE_URI``.
    A second call raises unless ``force`` is set.
    """

    if _registry.engine is not None and not force:
        raise StartupError("Database already started; pass force=True to rebind")
    if engine is None:
        engine = create_engine(database_uri or get_database_config().uri, future=True)
    create_all_tables(engine)
    _registry.bind(engine)


def shutdown() -> None:
    _registry.clear()


def is_started() -> bool:
    return _registry.engine is not None


def configured_engine() -> Engine | None:
    return _registry.engine


class SqlAlchemyCatalogUnitOfWork:
    """One session spanning local catalog IDs, import state and lookup metrics."""

    def __init__(self) -> None:
        if _registry.sessions is None:
            raise StartupError(
                "Database not started; call cinematch.adapters.sqlalchemy.startup() first"
            )
        self._sessions = _registry.sessions
        self._session: Session | None = None
        self._repositories: CatalogRepositories | None = None

    def __enter__(self) -> SqlAlchemyCatalogUnitOfWork:
        if self._session is not None:
            raise StartupError("Unit of work is already open")
        session = self._sessions()
        self._session = session
        self._repositories = CatalogRepositories(
            movie_ids=SqlAlchemyLocalIdRepository(session, movie_table),
            person_ids=SqlAlchemyLocalIdRepository(session, person_table),
            import_state=SqlAlchemyImportStateRepository(session),
            lookup_metrics=SqlAlchemyLookupMetricRepository(session),
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
            raise StartupError("Unit of work is not open")
        return self._session

    @property
    def repositories(self) -> CatalogRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work is not open")
        return self._repositories

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


if TYPE_CHECKING:
    from cinematch.domain.ports.unit_of_work import CatalogUnitOfWork

    _conformance: CatalogUnitOfWork = SqlAlchemyCatalogUnitOfWork()
