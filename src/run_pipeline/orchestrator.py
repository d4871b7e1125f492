"""Scheduled run: lease -> ingest + cluster -> summaries -> crosspost -> finalize."""

from __future__ import annotations

import logging
import time
from contextlib import ExitStack
from typing import Callable, Optional
from uuid import uuid4

from sqlalchemy.orm import Session

from cluster_stories.cluster import cluster_new_items, load_candidate_tokens
from crosspost.policy import Poster, run_fb_crosspost
from ingest_items.fetch_feed import fetch_feed
from ingest_items.models import NormalizedEntry
from ingest_items.sources import get_enabled_sources, load_sources
from run_pipeline.budget import RunBudget
from run_pipeline.config import PipelineConfig
from run_pipeline.run_lock import acquire_lock, release_lock
from store.connection import get_session
from store.errors_repo import record_error
from store.items_repo import upsert_items
from store.runs_repo import RunCounters, finish_run, start_run
from summarize_stories.pipeline import run_summary_pipeline
from summarize_stories.provider_chain import ProviderChain, build_chain

logger = logging.getLogger(__name__)

Fetcher = Callable[[str, int, float], list[NormalizedEntry]]

# Minimum time left before starting each unit of work.
SOURCE_RESERVE_MS = 3000
SUMMARY_RESERVE_MS = 5000
CROSSPOST_RESERVE_MS = 2000


def _ingest_sources(
    session: Session,
    run_id: str,
    config: PipelineConfig,
    counters: RunCounters,
    budget: RunBudget,
    fetcher: Fetcher,
) -> None:
    sources = [s for s in get_enabled_sources(load_sources(config.sources_file)) if s.type == "rss"]
    logger.info("Ingesting %d sources", len(sources))

    # Run-local: discarded when the run ends.
    candidate_tokens = load_candidate_tokens(session)

    for source in sources:
        if not budget.has_time(SOURCE_RESERVE_MS):
            logger.info("Run budget low, skipping remaining sources")
            break
        try:
            max_items = source.max_items_per_run or config.max_new_items_per_run
            timeout = budget.timeout_sec(config.fetch_timeout_ms / 1000)
            entries = fetcher(source.url, max_items, timeout)
            upserted = upsert_items(session, entries, source.id)
            counters.items_found += upserted.found
            counters.items_new += upserted.inserted

            if upserted.new_keys:
                new_keys = set(upserted.new_keys)
                new_entries = [e for e in entries if e.item_key in new_keys]
                clustered = cluster_new_items(session, new_entries, candidate_tokens)
                counters.stories_new += clustered.stories_new
                counters.stories_updated += clustered.stories_updated

            counters.sources_ok += 1
        except Exception as exc:
            session.rollback()
            counters.sources_failed += 1
            counters.errors_total += 1
            record_error(session, run_id, "ingest", source.id, None, exc)


def run_once(
    config: PipelineConfig,
    session: Optional[Session] = None,
    fetcher: Fetcher = fetch_feed,
    chain: Optional[ProviderChain] = None,
    poster: Optional[Poster] = None,
    clock: Callable[[], float] = time.monotonic,
) -> Optional[RunCounters]:
    """Execute one pipeline run.

    Returns the run counters, or None when another run holds the lease.
    The run record is finalized and the lease released whatever phase fails.
    """
    with ExitStack() as stack:
        if session is None:
            session = stack.enter_context(get_session(config.database_url))

        budget = RunBudget(config.run_budget_ms, clock=clock)
        run_id = uuid4().hex

        if not acquire_lock(session, run_id, config.lock_ttl_sec):
            return None

        logger.info("Run %s started", run_id)
        counters = RunCounters()
        try:
            start_run(session, run_id)

            _ingest_sources(session, run_id, config, counters, budget, fetcher)

            if chain is None:
                chain = build_chain(config.summary, load_sources(config.sources_file))
            if len(chain) and budget.has_time(SUMMARY_RESERVE_MS):
                try:
                    summarized = run_summary_pipeline(
                        session, run_id, chain, config.summary, budget, SUMMARY_RESERVE_MS
                    )
                    counters.published_web += summarized.published
                    counters.errors_total += summarized.failed
                except Exception as exc:
                    session.rollback()
                    counters.errors_total += 1
                    record_error(session, run_id, "summary", None, None, exc)

            if config.crosspost.active and budget.has_time(CROSSPOST_RESERVE_MS):
                try:
                    posted = run_fb_crosspost(
                        session, run_id, config.crosspost, poster, budget, CROSSPOST_RESERVE_MS
                    )
                    counters.published_fb += posted.posted
                    counters.errors_total += posted.failed
                except Exception as exc:
                    session.rollback()
                    counters.errors_total += 1
                    record_error(session, run_id, "fb_crosspost", None, None, exc)
        finally:
            session.rollback()
            counters.duration_ms = budget.elapsed_ms()
            try:
                status = finish_run(session, run_id, counters)
                logger.info("Run %s finished: %s %s", run_id, status, counters.to_dict())
            finally:
                release_lock(session, run_id)

        return counters
