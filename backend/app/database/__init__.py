"""
Database engine, session factory, and metadata shared across the application.
"""

from __future__ import annotations

import logging
from typing import Any, Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeMeta, Session, declarative_base, sessionmaker

from app.core.config import settings

logger = logging.getLogger(__name__)


def _engine_kwargs(url: str) -> dict[str, Any]:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_size": 5,
        "max_overflow": 10,
        "pool_recycle": 300,
        "pool_pre_ping": True,
    }


def build_engine(url: str, *, echo: bool = False, **overrides: Any) -> Engine:
    kwargs = _engine_kwargs(url)
    kwargs.update(overrides)
    built = create_engine(url, echo=echo, future=True, **kwargs)
    if url.startswith("sqlite"):
        event.listen(built, "connect", _enable_sqlite_foreign_keys)
    return built


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _record: Any) -> None:
    # SQLite ignores FK cascades unless the pragma is set per connection.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


engine = build_engine(settings.database_url, echo=settings.database_echo)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)

Base: DeclarativeMeta = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """Get database session with proper cleanup."""
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def get_dialect_name(session: Session) -> str:
    bind = session.get_bind()
    return bind.dialect.name if bind is not None else ""


__all__ = ["Base", "SessionLocal", "engine", "build_engine", "get_db", "get_dialect_name"]
