"""Story reads and guarded writes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sqlalchemy import text
from sqlalchemy.orm import Session

from common.datetime import utc_now_iso

CANDIDATE_LIMIT = 100


@dataclass
class StoryCandidate:
    """A recent story with the title of its founding item."""

    story_id: str
    last_update_at: str
    founding_title: str


@dataclass
class DraftStory:
    story_id: str
    risk_level: str
    summary_hash: str | None


@dataclass
class SummaryItem:
    """Item fields handed to summary providers."""

    item_id: str
    title: str
    source_id: str
    published_at: str | None


def find_recent_stories(session: Session, since: str) -> list[StoryCandidate]:
    """Return non-hidden stories updated at or after `since`, most recent first.

    The founding item is the earliest attachment (ties broken by rank, then item_id).
    """
    rows = session.execute(
        text(
            """
            SELECT s.story_id, s.last_update_at, si.added_at, si.item_id, i.title
            FROM stories s
            JOIN story_items si ON si.story_id = s.story_id
            JOIN items i ON i.item_id = si.item_id
            WHERE s.last_update_at >= :since
              AND s.state != 'hidden'
            ORDER BY s.last_update_at DESC, s.story_id, si.added_at, si.rank, si.item_id
            """
        ),
        {"since": since},
    ).mappings().all()

    candidates: dict[str, StoryCandidate] = {}
    for row in rows:
        if row["story_id"] in candidates:
            continue
        candidates[row["story_id"]] = StoryCandidate(
            story_id=row["story_id"],
            last_update_at=row["last_update_at"],
            founding_title=row["title"],
        )
        if len(candidates) >= CANDIDATE_LIMIT:
            break
    return list(candidates.values())


def create_story(session: Session, story_id: str, start_at: str, now: str) -> bool:
    """Insert a draft story; returns False if the id already exists."""
    result = session.execute(
        text(
            """
            INSERT INTO stories
                (story_id, start_at, last_update_at, state, editorial_hold,
                 category, risk_level, summary_version)
            VALUES (:story_id, :start_at, :now, 'draft', 0, 'other', 'low', 0)
            ON CONFLICT DO NOTHING
            """
        ),
        {"story_id": story_id, "start_at": start_at, "now": now},
    )
    session.commit()
    return result.rowcount > 0


def update_story_last_update(session: Session, story_id: str, last_update_at: str) -> None:
    session.execute(
        text("UPDATE stories SET last_update_at = :ts WHERE story_id = :story_id"),
        {"ts": last_update_at, "story_id": story_id},
    )
    session.commit()


def get_stories_needing_summary(session: Session, limit: int) -> list[DraftStory]:
    """Draft stories without an editorial hold, most recently updated first."""
    rows = session.execute(
        text(
            """
            SELECT story_id, risk_level, summary_hash
            FROM stories
            WHERE state = 'draft'
              AND editorial_hold = 0
            ORDER BY last_update_at DESC
            LIMIT :limit
            """
        ),
        {"limit": limit},
    ).mappings().all()
    return [
        DraftStory(
            story_id=row["story_id"],
            risk_level=row["risk_level"],
            summary_hash=row["summary_hash"],
        )
        for row in rows
    ]


def get_story_items_for_summary(
    session: Session, story_id: str, limit: int = 10
) -> list[SummaryItem]:
    """Items attached to a story, most recent first."""
    rows = session.execute(
        text(
            """
            SELECT i.item_id, i.title, i.source_id, i.published_at
            FROM story_items si
            JOIN items i ON i.item_id = si.item_id
            WHERE si.story_id = :story_id
            ORDER BY COALESCE(i.published_at, i.ingested_at) DESC, i.item_id
            LIMIT :limit
            """
        ),
        {"story_id": story_id, "limit": limit},
    ).mappings().all()
    return [
        SummaryItem(
            item_id=row["item_id"],
            title=row["title"],
            source_id=row["source_id"],
            published_at=row["published_at"],
        )
        for row in rows
    ]


def update_story_summary(
    session: Session,
    story_id: str,
    title: str,
    summary: str,
    summary_hash: str,
) -> bool:
    """Publish a generated summary and mark the web publication as published.

    Both writes are committed together. The story update is guarded on
    state = 'draft'; returns False (and writes nothing) when the story has
    already left draft.
    """
    now = utc_now_iso()
    result = session.execute(
        text(
            """
            UPDATE stories
            SET title = :title,
                summary = :summary,
                summary_hash = :summary_hash,
                summary_version = summary_version + 1,
                state = 'published'
            WHERE story_id = :story_id
              AND state = 'draft'
            """
        ),
        {
            "title": title,
            "summary": summary,
            "summary_hash": summary_hash,
            "story_id": story_id,
        },
    )
    if result.rowcount == 0:
        session.rollback()
        return False

    session.execute(
        text(
            """
            INSERT INTO publications
                (story_id, web_status, web_published_at, fb_status, fb_attempts,
                 created_at, updated_at)
            VALUES (:story_id, 'published', :now, 'disabled', 0, :now, :now)
            ON CONFLICT (story_id) DO UPDATE
            SET web_status = 'published',
                web_published_at = excluded.web_published_at,
                updated_at = excluded.updated_at
            """
        ),
        {"story_id": story_id, "now": now},
    )
    session.commit()
    return True


def get_story(session: Session, story_id: str) -> dict[str, Any] | None:
    row = session.execute(
        text("SELECT * FROM stories WHERE story_id = :story_id"),
        {"story_id": story_id},
    ).mappings().first()
    return dict(row) if row else None
