"""SQLite database engine and session factory using SQLModel."""

import logging

from sqlmodel import Session, SQLModel, create_engine

from task_api.config import DATABASE_URL

logger = logging.getLogger(__name__)

_connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, echo=False, connect_args=_connect_args)


def create_db_and_tables() -> None:
    """Create all tables from SQLModel metadata."""
    logger.info("Creating tables on %s", engine.url)
    SQLModel.metadata.create_all(engine)


def get_session():
    """Yield a database session for FastAPI dependency injection."""
    with Session(engine) as session:
        yield session
