"""Summary pipeline: generate, validate and publish summaries for draft stories."""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.orm import Session

from common.hashing import content_fingerprint
from run_pipeline.budget import RunBudget
from store.errors_repo import record_error
from store.stories_repo import (
    get_stories_needing_summary,
    get_story_items_for_summary,
    update_story_summary,
)
from summarize_stories.format import format_body, format_full, parse_sections
from summarize_stories.glossary import apply_glossary
from summarize_stories.guards import run_guards
from summarize_stories.models import SummaryConfig, SummaryCounters
from summarize_stories.provider_chain import ProviderChain

logger = logging.getLogger(__name__)

PHASE = "summary"

# Worst-case time one story can take (a full provider fallback).
STORY_RESERVE_MS = 5000


def run_summary_pipeline(
    session: Session,
    run_id: str,
    chain: ProviderChain,
    config: SummaryConfig,
    budget: Optional[RunBudget] = None,
    reserve_ms: int = STORY_RESERVE_MS,
) -> SummaryCounters:
    """Summarize up to `config.max_stories_per_run` draft stories.

    A failure on one story is recorded as an error event and the story stays
    in draft; the remaining stories are still processed. When a budget is
    given, no new story is started once it has less than `reserve_ms` left.
    """
    counters = SummaryCounters()
    stories = get_stories_needing_summary(session, config.max_stories_per_run)
    logger.info("Found %d draft stories needing a summary", len(stories))

    for story in stories:
        if budget is not None and not budget.has_time(reserve_ms):
            logger.info("Run budget low, deferring remaining stories")
            break

        counters.attempted += 1
        try:
            items = get_story_items_for_summary(
                session, story.story_id, config.max_items_per_story
            )
            if not items:
                counters.skipped += 1
                continue

            fingerprint = content_fingerprint([i.item_id for i in items], story.risk_level)
            if story.summary_hash == fingerprint:
                logger.debug("Story %s unchanged since last summary", story.story_id)
                counters.skipped += 1
                continue

            result = chain.generate(items, story.risk_level, budget)
            parsed = parse_sections(apply_glossary(result.text))
            if parsed is None:
                record_error(session, run_id, PHASE, None, story.story_id, "format_parse_failed")
                counters.failed += 1
                continue

            body = format_body(parsed)
            full_text = format_full(parsed)
            verdict = run_guards(
                body,
                full_text,
                [i.title for i in items],
                story.risk_level,
                config.target_min,
                config.target_max,
                relaxed=result.relaxed_guards,
            )
            if not verdict.ok:
                record_error(
                    session, run_id, PHASE, None, story.story_id, verdict.reason or "guard_failed"
                )
                counters.failed += 1
                continue

            if update_story_summary(session, story.story_id, parsed.title, full_text, fingerprint):
                counters.published += 1
                logger.info("Published story %s via %s", story.story_id, result.provider_name)
            else:
                counters.skipped += 1
        except Exception as exc:
            session.rollback()
            record_error(session, run_id, PHASE, None, story.story_id, exc)
            counters.failed += 1

    logger.info(
        "Summary pass: attempted=%d published=%d skipped=%d failed=%d",
        counters.attempted, counters.published, counters.skipped, counters.failed,
    )
    return counters
