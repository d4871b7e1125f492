"""RSS/Atom feed fetching and normalization."""

from __future__ import annotations

import html
import logging
import re
from datetime import datetime, timedelta, timezone

import feedparser
from dateutil.parser import parse as parse_date

from common.datetime import to_iso
from common.hashing import generate_item_key, sha256_hex
from common.http import get_with_retry
from ingest_items.models import NormalizedEntry
from ingest_items.url import normalize_url, validate_url_for_fetch

logger = logging.getLogger(__name__)

SNIPPET_MAX_CHARS = 500

# Timezone abbreviations for date parsing
TZINFOS = {
    "GMT": timezone.utc,
    "UTC": timezone.utc,
    "IST": timezone(timedelta(hours=2)),
    "IDT": timezone(timedelta(hours=3)),
    "EST": timezone(timedelta(hours=-5)),
    "EDT": timezone(timedelta(hours=-4)),
}


class FeedFetchError(RuntimeError):
    """Raised when a feed responds with a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.code = f"http_{status_code}" if status_code else None


def strip_html(value: str | None) -> str:
    """Strip tags, decode entities and collapse whitespace."""
    if not value:
        return ""
    text = re.sub(r"<[^>]+>", " ", value)
    text = html.unescape(text)
    return re.sub(r"\s+", " ", text).strip()


def _is_http_url(value: str | None) -> bool:
    return bool(value) and value.startswith(("http://", "https://"))


def _extract_link(entry) -> str:
    link = entry.get("link")
    if _is_http_url(link):
        return link
    for candidate in entry.get("links") or []:
        href = candidate.get("href")
        if _is_http_url(href):
            return href
    guid = entry.get("id") or entry.get("guid")
    if _is_http_url(guid):
        return guid
    return ""


def _extract_snippet(entry) -> str:
    raw = entry.get("summary") or entry.get("description") or ""
    if not raw:
        content = entry.get("content") or []
        if content:
            raw = content[0].get("value", "")
    return strip_html(raw)[:SNIPPET_MAX_CHARS]


def _parse_published_date(entry) -> str | None:
    """Parse the entry date to a UTC ISO string, or None if missing or unparseable."""
    published = entry.get("published") or entry.get("updated") or entry.get("dc_date")
    if not published:
        return None
    try:
        dt = parse_date(published, tzinfos=TZINFOS)
    except (ValueError, OverflowError):
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return to_iso(dt)


def normalize_entry(entry) -> NormalizedEntry | None:
    """Turn one parsed feed entry into a NormalizedEntry.

    Entries without a resolvable http(s) link or with an empty title are dropped.
    """
    raw_url = _extract_link(entry)
    if not raw_url:
        return None

    title = strip_html(entry.get("title"))
    if not title:
        return None

    normalized = normalize_url(raw_url)
    published_at = _parse_published_date(entry)
    snippet = _extract_snippet(entry)

    return NormalizedEntry(
        source_url=raw_url,
        normalized_url=normalized,
        item_key=generate_item_key(normalized),
        title=title,
        title_hash=sha256_hex(title),
        published_at=published_at,
        snippet=snippet or None,
        date_confidence="high" if published_at else "low",
    )


def parse_feed(content: bytes | str, max_items: int) -> list[NormalizedEntry]:
    """Parse RSS 2.0 or Atom content, keeping at most `max_items` raw entries."""
    feed = feedparser.parse(content)
    entries = []
    for raw in feed.entries[:max_items]:
        entry = normalize_entry(raw)
        if entry is not None:
            entries.append(entry)
    return entries


def fetch_feed(url: str, max_items: int, timeout: float = 10.0) -> list[NormalizedEntry]:
    """Fetch a feed and return up to `max_items` normalized entries.

    Raises:
        UnsafeUrlError: If the URL is not a public http(s) target.
        FeedFetchError: If the feed responds with a non-2xx status.
    """
    validate_url_for_fetch(url)

    response = get_with_retry(url, timeout=timeout)
    if not response.ok:
        raise FeedFetchError(f"Feed HTTP {response.status_code}: {url}", response.status_code)

    entries = parse_feed(response.content, max_items)
    logger.info("Fetched %d entries from %s", len(entries), url)
    return entries
