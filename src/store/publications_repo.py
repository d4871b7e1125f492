"""Publication state for web and Facebook crossposting.

Facebook status values: disabled (never attempted), pending, posted,
failed (transient, retried), auth_error and rate_limited (not retried
automatically).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sqlalchemy import text
from sqlalchemy.orm import Session

from common.datetime import utc_now_iso

MAX_FB_ATTEMPTS = 5

RETRYABLE_FB_STATUSES = ("disabled", "failed")


@dataclass
class FbStoryRow:
    story_id: str
    title: str | None
    summary: str | None


def get_stories_for_fb_posting(
    session: Session,
    limit: int,
    max_attempts: int = MAX_FB_ATTEMPTS,
) -> list[FbStoryRow]:
    """Published stories eligible for a Facebook attempt, most recently updated first.

    A set fb_post_id means a previous attempt already reached Facebook, so the
    story is never selected again.
    """
    rows = session.execute(
        text(
            """
            SELECT p.story_id, s.title, s.summary
            FROM publications p
            JOIN stories s ON s.story_id = p.story_id
            WHERE p.web_status = 'published'
              AND p.fb_status IN ('disabled', 'failed')
              AND p.fb_attempts < :max_attempts
              AND p.fb_post_id IS NULL
              AND s.title IS NOT NULL
              AND s.summary IS NOT NULL
            ORDER BY s.last_update_at DESC
            LIMIT :limit
            """
        ),
        {"max_attempts": max_attempts, "limit": limit},
    ).mappings().all()
    return [
        FbStoryRow(story_id=row["story_id"], title=row["title"], summary=row["summary"])
        for row in rows
    ]


def get_publication(session: Session, story_id: str) -> dict[str, Any] | None:
    row = session.execute(
        text("SELECT * FROM publications WHERE story_id = :story_id"),
        {"story_id": story_id},
    ).mappings().first()
    return dict(row) if row else None


def mark_fb_posted(session: Session, story_id: str, post_id: str) -> bool:
    """Record a successful post. The post id is written once and never overwritten."""
    now = utc_now_iso()
    result = session.execute(
        text(
            """
            UPDATE publications
            SET fb_status = 'posted',
                fb_post_id = :post_id,
                fb_posted_at = :now,
                updated_at = :now
            WHERE story_id = :story_id
              AND fb_post_id IS NULL
            """
        ),
        {"post_id": post_id, "now": now, "story_id": story_id},
    )
    session.commit()
    return result.rowcount > 0


def mark_fb_failed(session: Session, story_id: str, status: str, error_message: str) -> bool:
    """Record a failed attempt with status failed, auth_error or rate_limited."""
    if status not in ("failed", "auth_error", "rate_limited"):
        raise ValueError(f"Invalid failure status: {status}")
    result = session.execute(
        text(
            """
            UPDATE publications
            SET fb_status = :status,
                fb_error_last = :error,
                fb_attempts = fb_attempts + 1,
                updated_at = :now
            WHERE story_id = :story_id
              AND fb_post_id IS NULL
            """
        ),
        {"status": status, "error": error_message, "now": utc_now_iso(), "story_id": story_id},
    )
    session.commit()
    return result.rowcount > 0


def reset_fb_status(session: Session, story_id: str) -> bool:
    """Make a story eligible again after an operator fixed credentials or throttling."""
    result = session.execute(
        text(
            """
            UPDATE publications
            SET fb_status = 'disabled',
                fb_attempts = 0,
                fb_error_last = NULL,
                updated_at = :now
            WHERE story_id = :story_id
              AND fb_post_id IS NULL
            """
        ),
        {"now": utc_now_iso(), "story_id": story_id},
    )
    session.commit()
    return result.rowcount > 0
