"""Story-item links."""

from __future__ import annotations

from sqlalchemy import text
from sqlalchemy.orm import Session


def attach_item(
    session: Session, story_id: str, item_id: str, added_at: str, rank: int = 0
) -> bool:
    """Link an item to a story.

    The founding item is attached with rank 0 and later items with rank 1, so
    the founder stays first among links sharing the same added_at.

    Returns True only if a new link was written. An item already linked to
    this (or any) story is left untouched.
    """
    result = session.execute(
        text(
            """
            INSERT INTO story_items (story_id, item_id, added_at, rank)
            VALUES (:story_id, :item_id, :added_at, :rank)
            ON CONFLICT DO NOTHING
            """
        ),
        {"story_id": story_id, "item_id": item_id, "added_at": added_at, "rank": rank},
    )
    session.commit()
    return result.rowcount > 0


def find_story_for_item(session: Session, item_id: str) -> str | None:
    return session.execute(
        text("SELECT story_id FROM story_items WHERE item_id = :item_id"),
        {"item_id": item_id},
    ).scalar()


def list_story_item_ids(session: Session, story_id: str) -> list[str]:
    return list(
        session.execute(
            text(
                """
                SELECT item_id FROM story_items
                WHERE story_id = :story_id
                ORDER BY added_at, rank, item_id
                """
            ),
            {"story_id": story_id},
        ).scalars()
    )
