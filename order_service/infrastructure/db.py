import time
from contextlib import contextmanager
from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker, Session

from order_service.core.logging_config import get_logger
from order_service.core_settings import Settings
from order_service.domain.errors import DatabaseUnavailableError
from order_service.domain.models import Base

logger = get_logger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Store client owning the engine and session factory.

    Constructed once at process start and handed to the application;
    ``dispose()`` releases the connection pool at shutdown.
    """

    def __init__(self, url: str, **engine_options):
        engine_options.setdefault("pool_pre_ping", True)
        self.url = url
        self.engine: Engine = create_engine(url, echo=False, future=True, **engine_options)
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)
        self.SessionLocal = sessionmaker(bind=self.engine, autoflush=False, autocommit=False, expire_on_commit=False)

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(settings.database_url)

    def session(self) -> Iterator[Session]:
        db = self.SessionLocal()
        try:
            yield db
        finally:
            db.close()

    def ping(self) -> None:
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))

    def wait_until_ready(self, max_attempts: int = 5, delay: float = 1.0) -> None:
        for attempt in range(1, max_attempts + 1):
            try:
                self.ping()
                logger.info(f"Database ready after {attempt} attempt(s)")
                return
            except OperationalError as e:
                logger.warning(f"Database not ready (attempt {attempt}/{max_attempts}): {e}")
                if attempt < max_attempts:
                    time.sleep(delay)
        raise DatabaseUnavailableError(f"Database not ready after {max_attempts} attempt(s)")

    def init_models(self) -> None:
        Base.metadata.create_all(self.engine)

    def dispose(self) -> None:
        self.engine.dispose()


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """Commit on success, roll back and re-raise on any failure."""
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        logger.warning("Transaction rolled back")
        raise


def get_db(request: Request) -> Iterator[Session]:
    yield from request.app.state.database.session()
