"""Database configuration and session management.

This module initializes the SQLAlchemy engine, session factory,
and declarative base, and provides a database session dependency
for FastAPI routes.
"""

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base

from .core import get_settings


settings = get_settings()


def _set_sqlite_pragmas(dbapi_conn, connection_record) -> None:
    """Turn on foreign key enforcement so address rows cascade with contacts.

    Set per-connection because SQLite PRAGMAs are not inherited by new
    connections from the pool.
    """
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def enable_sqlite_foreign_keys(target: Engine) -> None:
    """Install the foreign key PRAGMA on every connection of ``target``."""
    if target.dialect.name == "sqlite":
        event.listen(target, "connect", _set_sqlite_pragmas)


def build_engine(url: str, **kwargs) -> Engine:
    """Create an engine for ``url`` with SQLite-specific options applied."""
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    target = create_engine(url, future=True, **kwargs)
    enable_sqlite_foreign_keys(target)
    return target


engine = build_engine(settings.DATABASE_URL)
"""SQLAlchemy engine bound to the configured database URL."""


SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
    future=True,
)
"""Factory for database sessions."""


Base = declarative_base()
"""Declarative base class for SQLAlchemy models."""


def get_db():
    """
    Provide a SQLAlchemy database session.

    This function is used as a FastAPI dependency.
    It yields a database session and ensures it is
    properly closed after the request is completed.
    """

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
