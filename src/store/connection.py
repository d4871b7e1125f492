"""SQLAlchemy engine and session helpers."""

from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager

from dotenv import load_dotenv
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

DEFAULT_DATABASE_URL = "sqlite:///newsdesk.db"

_engines: dict[str, Engine] = {}


def get_database_url() -> str:
    load_dotenv()
    return os.environ.get("DATABASE_URL") or DEFAULT_DATABASE_URL


def get_engine(url: str | None = None) -> Engine:
    """Return a cached engine for the given URL (default: DATABASE_URL)."""
    url = url or get_database_url()
    engine = _engines.get(url)
    if engine is None:
        engine = create_engine(url, pool_pre_ping=True)
        _engines[url] = engine
    return engine


def session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, expire_on_commit=False)


@contextmanager
def get_session(url: str | None = None) -> Iterator[Session]:
    """Yield a session bound to the configured database; rolls back on error."""
    session = session_factory(get_engine(url))()
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
