import logging
from typing import Callable, NamedTuple, Optional, TypeVar, Union

import portalocker
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine, Row
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.sql import Executable

from coursewatcher.config import Settings, settings as default_settings
from coursewatcher.core.exceptions import StorageInitError

Base = declarative_base()

T = TypeVar("T")
Query = Union[str, Executable]

logger = logging.getLogger(__name__)


def set_sqlite_pragma(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


class MutationResult(NamedTuple):
    rowcount: int
    last_id: Optional[int] = None


class Store:
    """
    Owns the SQLite database that lives in the course's data folder.

    One store is opened per process and handed to every service. All services
    share its single session; writes are serialized by running requests one at
    a time on the event loop, and across processes by an exclusive lock file.
    """

    def __init__(self, settings: Settings = default_settings):
        self.settings = settings
        self.engine: Optional[Engine] = None
        self._session: Optional[Session] = None
        self._lock_file = None
        self._atomic_depth = 0

    def __enter__(self):
        return self.initialize()

    def __exit__(self, exc_type, exc, tb):
        self.close()

    @property
    def course_path(self):
        return self.settings.course_path

    @property
    def is_open(self) -> bool:
        return self._session is not None

    @property
    def session(self) -> Session:
        if self._session is None:
            raise RuntimeError("Store is not initialized")
        return self._session

    def initialize(self) -> "Store":
        """
        Create the data folder, open the database and create the schema.
        Safe to run on every startup: tables and indexes are only created if missing.
        """
        if self.is_open:
            return self

        # Register all tables on Base.metadata
        import coursewatcher.models  # noqa: F401

        try:
            self.settings.data_folder.mkdir(parents=True, exist_ok=True)
            self._acquire_lock()

            self.engine = create_engine(
                f"sqlite:///{self.settings.db_path}",
                connect_args={"check_same_thread": False}
            )
            event.listen(self.engine, "connect", set_sqlite_pragma)

            Base.metadata.create_all(bind=self.engine)

            self._session = sessionmaker(bind=self.engine, autoflush=False)()
        except (OSError, SQLAlchemyError, portalocker.LockException) as e:
            self.close()
            raise StorageInitError(f"Failed to initialize database: {e}") from e

        logger.info(f"Opened database at {self.settings.db_path}")
        return self

    def _acquire_lock(self):
        # LOCK_EX = Exclusive, LOCK_NB = Non-Blocking
        # SQLite handles a single writer, so a course is only opened by one process at a time
        self._lock_file = open(self.settings.lock_path, "w")
        try:
            portalocker.lock(self._lock_file, portalocker.LOCK_EX | portalocker.LOCK_NB)
        except portalocker.LockException:
            self._lock_file.close()
            self._lock_file = None
            raise

    def _release_lock(self):
        if self._lock_file is None:
            return
        try:
            portalocker.unlock(self._lock_file)
        finally:
            self._lock_file.close()
            self._lock_file = None

    @staticmethod
    def _prepare(query: Query) -> Executable:
        # Raw SQL only ever runs with bound parameters
        return text(query) if isinstance(query, str) else query

    def fetch_one(self, query: Query, params: Optional[dict] = None) -> Optional[Row]:
        """Single row (or None) from a parameterized query"""
        return self.session.execute(self._prepare(query), params or {}).first()

    def fetch_all(self, query: Query, params: Optional[dict] = None) -> list[Row]:
        """All rows from a parameterized query"""
        return list(self.session.execute(self._prepare(query), params or {}).all())

    def mutate(self, query: Query, params: Optional[dict] = None) -> MutationResult:
        """
        Run an INSERT / UPDATE / DELETE.
        Commits immediately, unless running inside run_atomic().
        """
        try:
            result = self.session.execute(self._prepare(query), params or {})
            # Read before commit, the cursor is released afterwards
            outcome = MutationResult(
                rowcount=result.rowcount,
                last_id=getattr(result, "lastrowid", None)
            )
            if self._atomic_depth == 0:
                self.session.commit()
        except Exception:
            if self._atomic_depth == 0:
                self.session.rollback()
            raise

        return outcome

    def commit(self):
        """Commit pending ORM changes. Inside run_atomic() this only flushes."""
        if self._atomic_depth:
            self.session.flush()
            return
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    def run_atomic(self, body: Callable[[Session], T]) -> T:
        """
        Run body(session) as one transaction.
        Everything is committed together, or rolled back and the error re-raised.
        """
        if self._atomic_depth:
            # Already inside a transaction: the outer block decides
            return body(self.session)

        self._atomic_depth += 1
        try:
            result = body(self.session)
            self.session.commit()
            return result
        except Exception:
            self.session.rollback()
            raise
        finally:
            self._atomic_depth -= 1

    def close(self):
        """Release the connection and the lock. Safe to call repeatedly."""
        if self._session is not None:
            self._session.close()
            self._session = None
        if self.engine is not None:
            self.engine.dispose()
            self.engine = None
            logger.info("Database closed")
        self._release_lock()
