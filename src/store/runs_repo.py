"""Run records."""

from __future__ import annotations

from dataclasses import asdict, dataclass

from sqlalchemy import text
from sqlalchemy.orm import Session

from common.datetime import utc_now_iso


@dataclass
class RunCounters:
    sources_ok: int = 0
    sources_failed: int = 0
    items_found: int = 0
    items_new: int = 0
    stories_new: int = 0
    stories_updated: int = 0
    published_web: int = 0
    published_fb: int = 0
    errors_total: int = 0
    duration_ms: int = 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


def derive_run_status(counters: RunCounters) -> str:
    """success if no source failed, partial_failure if some did, failure if all did."""
    if counters.sources_failed == 0:
        return "success"
    if counters.sources_ok > 0:
        return "partial_failure"
    return "failure"


def start_run(session: Session, run_id: str) -> None:
    session.execute(
        text(
            """
            INSERT INTO runs (run_id, started_at, status)
            VALUES (:run_id, :now, 'in_progress')
            """
        ),
        {"run_id": run_id, "now": utc_now_iso()},
    )
    session.commit()


def finish_run(session: Session, run_id: str, counters: RunCounters) -> str:
    """Write final counters and the derived status; returns the status."""
    status = derive_run_status(counters)
    session.execute(
        text(
            """
            UPDATE runs
            SET finished_at = :finished_at,
                status = :status,
                sources_ok = :sources_ok,
                sources_failed = :sources_failed,
                items_found = :items_found,
                items_new = :items_new,
                stories_new = :stories_new,
                stories_updated = :stories_updated,
                published_web = :published_web,
                published_fb = :published_fb,
                errors_total = :errors_total,
                duration_ms = :duration_ms
            WHERE run_id = :run_id
            """
        ),
        {"finished_at": utc_now_iso(), "status": status, "run_id": run_id, **counters.to_dict()},
    )
    session.commit()
    return status
