"""SQLAlchemy-backed unit of work for the turbine registry."""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Generic, Literal, TypeVar

from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from masterdata.adapters.sqlalchemy.mappings import start_mappers
from masterdata.adapters.sqlalchemy.migrations import upgrade_head
from masterdata.adapters.sqlalchemy.repositories import (
    SqlAlchemySiteRepository,
    SqlAlchemyWindTurbineRepository,
)
from masterdata.config.storage import get_database_config
from masterdata.domain.ports.unit_of_work import RegistryRepositories, RepositoryCollection

if TYPE_CHECKING:
    from collections.abc import Iterator
    from types import TracebackType

    from sqlalchemy.engine import Connection, Engine
    from sqlalchemy.pool import ConnectionPoolEntry

log = getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when a SQLAlchemy unit of work is used before initialisation."""


@dataclass(slots=True)
class _AdapterState:
    _engine: Engine | None = None
    _session_factory: sessionmaker[Session] | None = None

    @property
    def engine(self) -> Engine | None:
        return self._engine

    @engine.setter
    def engine(self, value: Engine | None) -> None:
        self._session_factory = None
        self._engine = value

    @property
    def session_factory(self) -> sessionmaker[Session]:
        if self._engine is None:
            raise StartupError(
                "SQLAlchemy adapter not initialised. Call masterdata.adapters.sqlalchemy."
                "unit_of_work.startup() before requesting a unit of work."
            )
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        return self._session_factory


_STATE = _AdapterState()


def _on_sqlite_connect(dbapi_connection: object, _record: ConnectionPoolEntry) -> None:
    # hand transaction control to SQLAlchemy so SAVEPOINT nests inside BEGIN
    dbapi_connection.isolation_level = None  # type: ignore[attr-defined]
    cursor = dbapi_connection.cursor()  # type: ignore[attr-defined]
    try:
        cursor.execute("PRAGMA foreign_keys=ON")
    finally:
        cursor.close()


def _on_sqlite_begin(connection: Connection) -> None:
    connection.exec_driver_sql("BEGIN")


def prepare_engine(engine: Engine) -> Engine:
    """Install the SQLite connection hooks once; other dialects pass through."""

    if engine.dialect.name != "sqlite" or event.contains(engine, "connect", _on_sqlite_connect):
        return engine
    event.listen(engine, "connect", _on_sqlite_connect)
    event.listen(engine, "begin", _on_sqlite_begin)
    return engine


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Initialise the SQLAlchemy engine, run migrations and build the session factory."""

    if _STATE.engine is not None and not force:
        raise StartupError(
            "SQLAlchemy adapter already initialised. Pass force=True to reconfigure."
        )

    resolved_engine = engine or create_engine(
        database_uri or get_database_config().uri, future=True
    )
    prepare_engine(resolved_engine)
    start_mappers()
    upgrade_head(engine=resolved_engine)

    _STATE.engine = resolved_engine
    log.debug("Database ready at %s", resolved_engine.url.render_as_string(hide_password=True))


def is_started() -> bool:
    """Return whether the adapter has been initialised."""

    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the managed engine and reset state (primarily for tests)."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.engine = None


TRepositories = TypeVar("TRepositories", bound=RepositoryCollection)


class BaseSqlAlchemyUnitOfWork(ABC, Generic[TRepositories]):
    """Generic SQLAlchemy unit of work with pluggable repository collections."""

    def __init__(self) -> None:
        self.session_factory: sessionmaker[Session] = _STATE.session_factory
        self._session: Session | None = None

    @abstractmethod
    def _build_repositories(self, session: Session) -> TRepositories: ...

    def __enter__(self) -> BaseSqlAlchemyUnitOfWork[TRepositories]:
        self.session = self.session_factory()
        self._repositories = self._build_repositories(self.session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if exc_type is not None:
            self.rollback()
        self.session.close()
        self.session = None
        return False

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    @contextmanager
    def savepoint(self) -> Iterator[object]:
        with self.session.begin_nested() as nested:
            yield nested

    @property
    def repositories(self) -> TRepositories:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._repositories

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._session

    @session.setter
    def session(self, session: Session | None) -> None:
        if self._session is not None and session is not None:
            raise StartupError("Unit of work session already initialised")
        self._session = session


class SqlAlchemyRegistryUnitOfWork(BaseSqlAlchemyUnitOfWork[RegistryRepositories]):
    """Unit of work for importing and enriching the turbine registry."""

    def _build_repositories(self, session: Session) -> RegistryRepositories:
        return RegistryRepositories(
            turbines=SqlAlchemyWindTurbineRepository(session),
            sites=SqlAlchemySiteRepository(session),
        )


if TYPE_CHECKING:
    from masterdata.domain.ports import RegistryUnitOfWork

    _uow_check: RegistryUnitOfWork = SqlAlchemyRegistryUnitOfWork()
