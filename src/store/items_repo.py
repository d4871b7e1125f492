"""Deduplicating upsert of normalized feed entries."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sqlalchemy import text
from sqlalchemy.orm import Session

from common.datetime import utc_now_iso
from ingest_items.models import NormalizedEntry

logger = logging.getLogger(__name__)


@dataclass
class UpsertResult:
    found: int = 0
    inserted: int = 0
    new_keys: list[str] = field(default_factory=list)


def upsert_items(
    session: Session,
    entries: list[NormalizedEntry],
    source_id: str,
) -> UpsertResult:
    """Insert entries keyed by item_key, ignoring ones already stored.

    item_id equals item_key so re-inserting the same URL is a no-op.
    All inserts of one batch are committed together.

    Returns:
        UpsertResult with the keys that were new in this call, in input order.
    """
    if not entries:
        return UpsertResult()

    now = utc_now_iso()
    stmt = text(
        """
        INSERT INTO items
            (item_id, item_key, source_id, source_url, normalized_url, title,
             title_hash, snippet, published_at, date_confidence, ingested_at)
        VALUES
            (:item_key, :item_key, :source_id, :source_url, :normalized_url, :title,
             :title_hash, :snippet, :published_at, :date_confidence, :ingested_at)
        ON CONFLICT DO NOTHING
        """
    )

    result = UpsertResult(found=len(entries))
    for entry in entries:
        outcome = session.execute(
            stmt,
            {
                "item_key": entry.item_key,
                "source_id": source_id,
                "source_url": entry.source_url,
                "normalized_url": entry.normalized_url,
                "title": entry.title,
                "title_hash": entry.title_hash,
                "snippet": entry.snippet,
                "published_at": entry.published_at,
                "date_confidence": entry.date_confidence,
                "ingested_at": now,
            },
        )
        if outcome.rowcount > 0 and entry.item_key not in result.new_keys:
            result.new_keys.append(entry.item_key)
    session.commit()

    result.inserted = len(result.new_keys)
    logger.info(
        "Upserted %d entries for %s (%d new)", result.found, source_id, result.inserted
    )
    return result
