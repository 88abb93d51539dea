"""Database engine and session management."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from functools import lru_cache
from typing import Iterator

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from common.config import require_env
from pulse_store.models import Base

logger = logging.getLogger(__name__)


@lru_cache(maxsize=None)
def get_engine(database_url: str | None = None) -> Engine:
    """Create (once per URL) the engine for DATABASE_URL or the given URL.

    Raises:
        ConfigurationError: If no URL is given and DATABASE_URL is not set.
    """
    url = database_url or require_env("DATABASE_URL")
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, connect_args=connect_args, pool_pre_ping=True)


@contextmanager
def get_session(engine: Engine | None = None) -> Iterator[Session]:
    """Yield a session bound to the engine; rolls back on error and always closes."""
    factory = sessionmaker(bind=engine or get_engine(), expire_on_commit=False)
    session = factory()
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(engine: Engine | None = None) -> None:
    """Create tables that do not exist yet."""
    engine = engine or get_engine()
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ensured on %s", engine.url.render_as_string(hide_password=True))
