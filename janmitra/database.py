from contextlib import contextmanager
from typing import Iterator
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool
from janmitra.exceptions import StoreUnavailable
import logging

logger = logging.getLogger(__name__)


def create_db_engine(database_url: str) -> Engine:
    """
    Function responsible for creating the engine for given database url.

    SQLite needs to be shared between the threads FastAPI runs sync code in,
    an in-memory database additionally has to live on a single connection.
    """

    if database_url.startswith("sqlite"):
        options = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            options["poolclass"] = StaticPool

        engine = create_engine(database_url, **options)

        @event.listens_for(engine, "connect")
        def enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    return create_engine(database_url, pool_pre_ping=True)


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@contextmanager
def atomic(db: Session) -> Iterator[Session]:
    """
    Runs the block as one transaction.

    Commits when the block finishes, rolls back on any exception.
    Storage errors are reported as `StoreUnavailable`, nothing is retried.
    """

    try:
        yield db
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Storage error, transaction rolled back: {e}")
        raise StoreUnavailable() from e
    except Exception:
        db.rollback()
        raise
