"""Read-side operational aggregates.

These never raise: a store error is logged and surfaced as an empty result.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from common.datetime import to_iso, utc_now

logger = logging.getLogger(__name__)


def get_last_run(session: Session) -> dict[str, Any] | None:
    """Most recent run with its counters, or None."""
    try:
        row = session.execute(
            text(
                """
                SELECT run_id, started_at, finished_at, status,
                       sources_ok, sources_failed, items_found, items_new,
                       stories_new, stories_updated, published_web, published_fb,
                       errors_total, duration_ms
                FROM runs
                ORDER BY started_at DESC
                LIMIT 1
                """
            )
        ).mappings().first()
    except SQLAlchemyError as exc:
        logger.warning("Failed to load last run: %s", exc)
        session.rollback()
        return None

    if row is None:
        return None
    counter_keys = [
        key for key in row.keys()
        if key not in ("run_id", "started_at", "finished_at", "status")
    ]
    return {
        "run_id": row["run_id"],
        "started_at": row["started_at"],
        "finished_at": row["finished_at"],
        "status": row["status"],
        "counters": {key: row[key] for key in counter_keys},
    }


def get_top_failing_sources(session: Session, hours: int = 24) -> list[dict[str, Any]]:
    """Sources with the most error events in the last `hours`, top 5."""
    since = to_iso(utc_now() - timedelta(hours=hours))
    try:
        rows = session.execute(
            text(
                """
                SELECT source_id, COUNT(*) AS error_count
                FROM error_events
                WHERE created_at > :since
                  AND source_id IS NOT NULL
                GROUP BY source_id
                ORDER BY error_count DESC
                LIMIT 5
                """
            ),
            {"since": since},
        ).mappings().all()
    except SQLAlchemyError as exc:
        logger.warning("Failed to load failing sources: %s", exc)
        session.rollback()
        return []
    return [dict(row) for row in rows]
