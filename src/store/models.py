"""Table definitions for the pipeline store.

Timestamps are ISO-8601 UTC strings (see common.datetime.to_iso).
"""

from __future__ import annotations

from sqlalchemy import Engine, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class Item(Base):
    __tablename__ = "items"

    item_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    item_key: Mapped[str] = mapped_column(String(64), unique=True)
    source_id: Mapped[str] = mapped_column(String(64), index=True)
    source_url: Mapped[str] = mapped_column(Text)
    normalized_url: Mapped[str] = mapped_column(Text)
    title: Mapped[str] = mapped_column(Text)
    title_hash: Mapped[str] = mapped_column(String(64))
    snippet: Mapped[str | None] = mapped_column(Text, nullable=True)
    published_at: Mapped[str | None] = mapped_column(String(32), nullable=True)
    date_confidence: Mapped[str] = mapped_column(String(8), server_default="low")
    ingested_at: Mapped[str] = mapped_column(String(32))


class Story(Base):
    __tablename__ = "stories"

    story_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    start_at: Mapped[str] = mapped_column(String(32))
    last_update_at: Mapped[str] = mapped_column(String(32), index=True)
    state: Mapped[str] = mapped_column(String(16), server_default="draft")
    editorial_hold: Mapped[int] = mapped_column(Integer, server_default="0")
    category: Mapped[str] = mapped_column(String(32), server_default="other")
    risk_level: Mapped[str] = mapped_column(String(8), server_default="low")
    title: Mapped[str | None] = mapped_column(Text, nullable=True)
    summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    summary_hash: Mapped[str | None] = mapped_column(String(64), nullable=True)
    summary_version: Mapped[int] = mapped_column(Integer, server_default="0")


class StoryItem(Base):
    __tablename__ = "story_items"
    __table_args__ = (UniqueConstraint("item_id", name="uq_story_items_item"),)

    story_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    item_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    added_at: Mapped[str] = mapped_column(String(32))
    rank: Mapped[int] = mapped_column(Integer, server_default="0")


class Publication(Base):
    __tablename__ = "publications"

    story_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    web_status: Mapped[str] = mapped_column(String(16), server_default="pending")
    web_published_at: Mapped[str | None] = mapped_column(String(32), nullable=True)
    fb_status: Mapped[str] = mapped_column(String(16), server_default="disabled")
    fb_post_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
    fb_attempts: Mapped[int] = mapped_column(Integer, server_default="0")
    fb_error_last: Mapped[str | None] = mapped_column(Text, nullable=True)
    fb_posted_at: Mapped[str | None] = mapped_column(String(32), nullable=True)
    created_at: Mapped[str] = mapped_column(String(32))
    updated_at: Mapped[str] = mapped_column(String(32))


class Run(Base):
    __tablename__ = "runs"

    run_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    started_at: Mapped[str] = mapped_column(String(32), index=True)
    finished_at: Mapped[str | None] = mapped_column(String(32), nullable=True)
    status: Mapped[str] = mapped_column(String(24), server_default="in_progress")
    sources_ok: Mapped[int] = mapped_column(Integer, server_default="0")
    sources_failed: Mapped[int] = mapped_column(Integer, server_default="0")
    items_found: Mapped[int] = mapped_column(Integer, server_default="0")
    items_new: Mapped[int] = mapped_column(Integer, server_default="0")
    stories_new: Mapped[int] = mapped_column(Integer, server_default="0")
    stories_updated: Mapped[int] = mapped_column(Integer, server_default="0")
    published_web: Mapped[int] = mapped_column(Integer, server_default="0")
    published_fb: Mapped[int] = mapped_column(Integer, server_default="0")
    errors_total: Mapped[int] = mapped_column(Integer, server_default="0")
    duration_ms: Mapped[int] = mapped_column(Integer, server_default="0")


class ErrorEvent(Base):
    __tablename__ = "error_events"
    __table_args__ = (Index("ix_error_events_source_created", "source_id", "created_at"),)

    event_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    run_id: Mapped[str] = mapped_column(String(64), index=True)
    phase: Mapped[str] = mapped_column(String(32))
    source_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    story_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    code: Mapped[str | None] = mapped_column(String(64), nullable=True)
    message: Mapped[str] = mapped_column(Text)
    created_at: Mapped[str] = mapped_column(String(32))


class RunLock(Base):
    __tablename__ = "run_lock"

    lock_name: Mapped[str] = mapped_column(String(32), primary_key=True)
    lease_owner: Mapped[str] = mapped_column(String(64))
    lease_until: Mapped[str] = mapped_column(String(32))


def init_db(engine: Engine) -> None:
    """Create all tables that do not exist yet."""
    Base.metadata.create_all(engine)
