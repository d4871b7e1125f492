"""Crosspost pass: select eligible stories, post them, classify failures.

Status transitions per story:
    disabled/failed -> posted                       (terminal)
    disabled/failed -> failed                       (retried next run while attempts < 5)
    disabled/failed -> auth_error / rate_limited    (not retried automatically)
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from sqlalchemy.orm import Session

from crosspost.facebook import FacebookPostError, post_to_facebook
from crosspost.models import CrosspostConfig, CrosspostCounters
from run_pipeline.budget import RunBudget
from store.errors_repo import record_error
from store.publications_repo import (
    get_publication,
    get_stories_for_fb_posting,
    mark_fb_failed,
    mark_fb_posted,
)

logger = logging.getLogger(__name__)

PHASE = "fb_crosspost"

AUTH_ERROR_CODES = {190, 102}
RATE_LIMIT_CODES = {4, 32}

# Worst-case time for one post (Graph API timeout).
POST_RESERVE_MS = 2000

# poster(page_id, token, message, link, timeout=seconds) -> post id
Poster = Callable[..., str]


def classify_error(fb_code: Optional[int]) -> str:
    """Map a Graph API error code to the publication failure status."""
    if fb_code in AUTH_ERROR_CODES:
        return "auth_error"
    if fb_code in RATE_LIMIT_CODES:
        return "rate_limited"
    return "failed"


def build_story_url(site_base_url: str, story_id: str) -> str:
    return f"{site_base_url.rstrip('/')}/story/{story_id}"


def build_message(title: Optional[str], summary: Optional[str], story_url: str) -> str:
    """Headline, the first two non-empty summary lines, then the story link."""
    parts = [f"📌 {title or 'Новость'}"]
    if summary:
        excerpt = "\n".join([line for line in summary.split("\n") if line.strip()][:2])
        if excerpt:
            parts.append(excerpt)
    parts.append(f"Читать полностью → {story_url}")
    return "\n\n".join(parts)


def run_fb_crosspost(
    session: Session,
    run_id: str,
    config: CrosspostConfig,
    poster: Optional[Poster] = None,
    budget: Optional[RunBudget] = None,
    reserve_ms: int = POST_RESERVE_MS,
) -> CrosspostCounters:
    """Post eligible published stories to the Facebook page.

    The pass stops at the first auth_error; rate_limited and failed stories
    are recorded and the pass moves on to the next story.
    """
    counters = CrosspostCounters()
    if not config.active:
        logger.debug("Facebook crossposting disabled")
        return counters

    if poster is None:
        poster = post_to_facebook

    stories = get_stories_for_fb_posting(session, config.max_posts_per_run)
    logger.info("Found %d stories eligible for Facebook", len(stories))

    for story in stories:
        if budget is not None and not budget.has_time(reserve_ms):
            logger.info("Run budget low, deferring remaining crossposts")
            break

        publication = get_publication(session, story.story_id)
        if publication is None or publication.get("fb_post_id"):
            counters.skipped += 1
            continue

        story_url = build_story_url(config.site_base_url, story.story_id)
        message = build_message(story.title, story.summary, story_url)

        timeout = config.timeout_sec if budget is None else budget.timeout_sec(config.timeout_sec)
        try:
            post_id = poster(
                config.page_id, config.access_token, message, story_url, timeout=timeout
            )
        except Exception as exc:
            fb_code = exc.fb_code if isinstance(exc, FacebookPostError) else None
            status = classify_error(fb_code)
            counters.failed += 1
            mark_fb_failed(session, story.story_id, status, str(exc))
            record_error(session, run_id, PHASE, None, story.story_id, exc)
            if status == "auth_error":
                logger.error("Facebook auth error, stopping crosspost pass: %s", exc)
                break
            continue

        mark_fb_posted(session, story.story_id, post_id)
        counters.posted += 1
        logger.info("Posted story %s to Facebook as %s", story.story_id, post_id)

    return counters
