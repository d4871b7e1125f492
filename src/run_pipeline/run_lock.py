"""Single named lease that keeps scheduled runs from overlapping."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import text
from sqlalchemy.orm import Session

from common.datetime import to_iso, utc_now

logger = logging.getLogger(__name__)

LOCK_NAME = "cron"
DEFAULT_TTL_SEC = 300


def acquire_lock(
    session: Session,
    run_id: str,
    ttl_sec: int = DEFAULT_TTL_SEC,
    now: Optional[datetime] = None,
) -> bool:
    """Take the lease for `run_id` unless another unexpired lease exists.

    Deletes an expired lease and inserts the new one in a single commit.
    Returns True iff the insert took effect.
    """
    now = now or utc_now()
    session.execute(
        text("DELETE FROM run_lock WHERE lock_name = :name AND lease_until < :now"),
        {"name": LOCK_NAME, "now": to_iso(now)},
    )
    result = session.execute(
        text(
            """
            INSERT INTO run_lock (lock_name, lease_owner, lease_until)
            VALUES (:name, :owner, :until)
            ON CONFLICT DO NOTHING
            """
        ),
        {"name": LOCK_NAME, "owner": run_id, "until": to_iso(now + timedelta(seconds=ttl_sec))},
    )
    session.commit()
    acquired = result.rowcount > 0
    if not acquired:
        logger.info("Lease %r held by another run", LOCK_NAME)
    return acquired


def release_lock(session: Session, run_id: str) -> None:
    """Drop the lease if `run_id` still owns it."""
    session.execute(
        text("DELETE FROM run_lock WHERE lock_name = :name AND lease_owner = :owner"),
        {"name": LOCK_NAME, "owner": run_id},
    )
    session.commit()
