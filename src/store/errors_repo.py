"""Structured error events."""

from __future__ import annotations

import logging
from uuid import uuid4

from sqlalchemy import text
from sqlalchemy.orm import Session

from common.datetime import utc_now_iso

logger = logging.getLogger(__name__)


def _error_code(err: BaseException | str) -> str | None:
    code = getattr(err, "code", None)
    return code if isinstance(code, str) else None


def record_error(
    session: Session,
    run_id: str,
    phase: str,
    source_id: str | None,
    story_id: str | None,
    err: BaseException | str,
) -> None:
    """Insert one error event for the run; `err.code` is kept when it is a string."""
    message = str(err)
    logger.warning(
        "[%s] source=%s story=%s: %s", phase, source_id or "-", story_id or "-", message
    )
    session.execute(
        text(
            """
            INSERT INTO error_events
                (event_id, run_id, phase, source_id, story_id, code, message, created_at)
            VALUES (:event_id, :run_id, :phase, :source_id, :story_id, :code, :message, :now)
            """
        ),
        {
            "event_id": uuid4().hex,
            "run_id": run_id,
            "phase": phase,
            "source_id": source_id,
            "story_id": story_id,
            "code": _error_code(err),
            "message": message,
            "now": utc_now_iso(),
        },
    )
    session.commit()
