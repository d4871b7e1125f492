"""Shared fixtures: an in-memory SQLite store with all tables created."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from common.hashing import generate_item_key, sha256_hex
from ingest_items.models import NormalizedEntry
from store.models import init_db


@pytest.fixture
def engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_maker(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, expire_on_commit=False)


@pytest.fixture
def session(session_maker: sessionmaker[Session]) -> Iterator[Session]:
    session = session_maker()
    yield session
    session.close()


@pytest.fixture
def make_entry():
    """Build a NormalizedEntry for a URL and headline."""

    def _make(url: str, title: str, published_at: str | None = None) -> NormalizedEntry:
        return NormalizedEntry(
            source_url=url,
            normalized_url=url,
            item_key=generate_item_key(url),
            title=title,
            title_hash=sha256_hex(title),
            published_at=published_at,
            snippet=None,
            date_confidence="high" if published_at else "low",
        )

    return _make
