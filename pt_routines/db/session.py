from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager

from loguru import logger
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from pt_routines.config.settings import settings
from pt_routines.db.models import Base

# Lazy initialization to avoid import-time database connections
_SessionLocal: sessionmaker[Session] | None = None


def create_db_engine(database_url: str) -> Engine:
    """Create an engine and make sure all tables exist.

    In-memory SQLite uses a single shared connection so every session sees
    the same database.
    """
    connect_args: dict[str, object] = {}
    engine_kwargs: dict[str, object] = {}
    if database_url.startswith("sqlite"):
        connect_args = {"check_same_thread": False}
        if ":memory:" in database_url or database_url == "sqlite://":
            engine_kwargs["poolclass"] = StaticPool

    engine = create_engine(database_url, connect_args=connect_args, echo=False, **engine_kwargs)
    Base.metadata.create_all(engine)
    logger.debug("Database engine initialized", dialect=engine.dialect.name)
    return engine


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    return sessionmaker(autocommit=False, autoflush=False, bind=create_db_engine(database_url))


def get_session_factory() -> sessionmaker[Session]:
    """Get or create the session factory for settings.database_url."""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = create_session_factory(settings.database_url)
        logger.info("Database session factory initialized")
    return _SessionLocal


@contextmanager
def session_scope(factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    """Session context manager: commit on success, roll back and re-raise on error."""
    session = factory()
    try:
        yield session
        session.commit()
    except SQLAlchemyError as e:
        logger.error(
            "Database session error, rolling back",
            error_type=type(e).__name__,
            error=str(e),
        )
        session.rollback()
        raise
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
