"""Database configuration for the weekly planner."""
import os
from typing import Generator

from dotenv import load_dotenv
from sqlalchemy import event
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from weekly_planner.utils.logger import get_logger

load_dotenv()

logger = get_logger(__name__)

# Use the DATABASE_URL from environment variable, with fallback to SQLite for local dev
DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./weekly_planner.db")
IS_SQLITE = DATABASE_URL.startswith("sqlite")


def build_engine(database_url: str):
    """Create an engine for the given URL.

    In-memory SQLite (``sqlite://``) shares one connection through a static
    pool so every session sees the same tables.
    """
    if not database_url.startswith("sqlite"):
        return create_engine(database_url, echo=False, pool_pre_ping=True)

    kwargs = {"connect_args": {"check_same_thread": False}}
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        kwargs["poolclass"] = StaticPool
    sqlite_engine = create_engine(database_url, echo=False, **kwargs)

    @event.listens_for(sqlite_engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return sqlite_engine


if IS_SQLITE:
    logger.info("Using SQLite database", url=DATABASE_URL)
else:
    logger.info("Using server database", dialect=DATABASE_URL.split(":", 1)[0])

engine = build_engine(DATABASE_URL)


def get_session() -> Generator[Session, None, None]:
    """Dependency for getting database sessions."""
    with Session(engine) as session:
        yield session
