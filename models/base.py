"""
Database configuration and base model.

Uses SQLAlchemy 2.0 declarative style with SQLite.
"""

from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from config import get_database_url


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


def make_engine(database_url: str) -> Engine:
    """Create an engine; in-memory SQLite shares one connection."""
    kwargs = {
        "echo": False,
        "connect_args": {"check_same_thread": False},  # Allow multi-threaded access
    }
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        kwargs["poolclass"] = StaticPool
    return create_engine(database_url, **kwargs)


def make_session_factory(bind: Engine) -> sessionmaker:
    return sessionmaker(bind=bind, autocommit=False, autoflush=False, expire_on_commit=False)


DATABASE_URL = get_database_url()
engine = make_engine(DATABASE_URL)

# Session factory
SessionLocal = make_session_factory(engine)


@contextmanager
def get_session(factory: Optional[sessionmaker] = None) -> Generator[Session, None, None]:
    """Context manager for database sessions."""
    session = (factory or SessionLocal)()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(bind: Optional[Engine] = None) -> None:
    """Initialize the database, creating all tables."""
    Base.metadata.create_all(bind=bind or engine)

