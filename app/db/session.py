# app/db/session.py
import logging
from typing import Generator

from sqlalchemy import event
from sqlmodel import SQLModel, Session, create_engine

from app.core.config import settings
from app.db import models  # noqa: F401  (registers tables on SQLModel.metadata)

logger = logging.getLogger(__name__)


def build_engine(database_url: str, echo: bool = False, **kwargs):
    """Create an engine; SQLite connections get foreign keys enabled"""
    is_sqlite = database_url.startswith("sqlite")
    connect_args = {"check_same_thread": False} if is_sqlite else {}
    engine = create_engine(database_url, echo=echo, connect_args=connect_args, **kwargs)

    if is_sqlite:
        @event.listens_for(engine, "connect")
        def _set_sqlite_pragma(dbapi_conn, connection_record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


engine = build_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)


def get_session() -> Generator[Session, None, None]:
    """FastAPI dependency yielding a session bound to the application engine"""
    with Session(engine) as session:
        yield session


def init_db(bind=None) -> None:
    """Create all tables (initial setup or tests)"""
    SQLModel.metadata.create_all(bind or engine)
    logger.info("Database tables created")
