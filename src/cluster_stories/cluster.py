"""Incremental clustering of newly ingested items into stories."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Protocol
from uuid import uuid4

from sqlalchemy.orm import Session

from cluster_stories.title_tokens import jaccard_similarity, tokenize
from common.datetime import to_iso, utc_now
from store.stories_repo import create_story, find_recent_stories, update_story_last_update
from store.story_items_repo import attach_item, find_story_for_item

logger = logging.getLogger(__name__)

# Candidate stories must have been updated within this window.
CLUSTER_WINDOW = timedelta(hours=24)

# A candidate must score strictly above this to be attached to.
SIMILARITY_THRESHOLD = 0.25


class ClusterItem(Protocol):
    item_key: str
    title: str
    published_at: str | None


@dataclass
class ClusterCounters:
    stories_new: int = 0
    stories_updated: int = 0


def best_candidate(
    item_tokens: set[str],
    candidate_tokens: dict[str, set[str]],
    threshold: float = SIMILARITY_THRESHOLD,
) -> str | None:
    """Return the candidate with the highest score above `threshold`.

    Ties keep the first candidate in iteration order.
    """
    best_story_id = None
    best_score = threshold
    for story_id, tokens in candidate_tokens.items():
        score = jaccard_similarity(item_tokens, tokens)
        if score > best_score:
            best_score = score
            best_story_id = story_id
    return best_story_id


def load_candidate_tokens(session: Session, now: datetime | None = None) -> dict[str, set[str]]:
    """Seed the run-local candidate map from the founding items of recent stories."""
    since = to_iso((now or utc_now()) - CLUSTER_WINDOW)
    candidates = find_recent_stories(session, since)
    return {c.story_id: tokenize(c.founding_title) for c in candidates}


def cluster_new_items(
    session: Session,
    items: list[ClusterItem],
    candidate_tokens: dict[str, set[str]] | None = None,
    now: datetime | None = None,
) -> ClusterCounters:
    """Attach each item to the most similar recent story or found a new one.

    Items are processed in the given order. `candidate_tokens` is the run-local
    map of story id to token set; it is loaded from the store when not given
    and is updated in place as items attach, so later items in the same batch
    match against enriched topics and freshly created stories.

    Items already linked to a story are skipped, so re-running a batch creates
    neither duplicate links nor duplicate stories.
    """
    counters = ClusterCounters()
    if not items:
        return counters

    now = now or utc_now()
    now_iso = to_iso(now)
    if candidate_tokens is None:
        candidate_tokens = load_candidate_tokens(session, now)

    for item in items:
        if find_story_for_item(session, item.item_key) is not None:
            logger.debug("Item %s already clustered, skipping", item.item_key)
            continue

        item_tokens = tokenize(item.title)
        story_id = best_candidate(item_tokens, candidate_tokens)

        if story_id is not None:
            if attach_item(session, story_id, item.item_key, now_iso, rank=1):
                update_story_last_update(session, story_id, now_iso)
                candidate_tokens.setdefault(story_id, set()).update(item_tokens)
                counters.stories_updated += 1
            continue

        story_id = uuid4().hex
        create_story(session, story_id, item.published_at or now_iso, now_iso)
        attach_item(session, story_id, item.item_key, now_iso)
        candidate_tokens[story_id] = set(item_tokens)
        counters.stories_new += 1

    logger.info(
        "Clustered %d items: %d new stories, %d updated",
        len(items), counters.stories_new, counters.stories_updated,
    )
    return counters
