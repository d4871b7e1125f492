"""Tests for ingest_items.fetch_feed module."""

from unittest.mock import Mock, patch

import pytest

from common.hashing import generate_item_key
from ingest_items.fetch_feed import (
    FeedFetchError,
    fetch_feed,
    normalize_entry,
    parse_feed,
    strip_html,
)
from ingest_items.url import UnsafeUrlError

RSS = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>ynet</title>
    <item>
      <title>צה"ל תקף בדרום לבנון</title>
      <link>https://www.ynet.co.il/news/article/a1?utm_source=rss</link>
      <description>&lt;p&gt;כוחות צה"ל &lt;b&gt;תקפו&lt;/b&gt; הלילה&lt;/p&gt;</description>
      <pubDate>Mon, 01 Jan 2024 12:00:00 GMT</pubDate>
    </item>
    <item>
      <title>ללא קישור</title>
    </item>
    <item>
      <title>הכנסת אישרה את התקציב</title>
      <link>https://www.ynet.co.il/news/article/a2</link>
    </item>
  </channel>
</rss>
"""


class TestStripHtml:
    def test_strips_tags_and_entities(self) -> None:
        assert strip_html("<p>Hello&nbsp;<b>world</b></p>") == "Hello world"

    def test_none_is_empty(self) -> None:
        assert strip_html(None) == ""


class TestNormalizeEntry:
    def test_missing_link_is_dropped(self) -> None:
        assert normalize_entry({"title": "כותרת"}) is None

    def test_empty_title_is_dropped(self) -> None:
        assert normalize_entry({"title": "  ", "link": "https://example.com/1"}) is None

    def test_falls_back_to_guid_link(self) -> None:
        entry = normalize_entry({"title": "כותרת", "id": "https://example.com/guid"})
        assert entry is not None
        assert entry.source_url == "https://example.com/guid"

    def test_unparseable_date_is_low_confidence(self) -> None:
        entry = normalize_entry(
            {"title": "כותרת", "link": "https://example.com/1", "published": "not a date"}
        )
        assert entry.published_at is None
        assert entry.date_confidence == "low"

    def test_snippet_truncated(self) -> None:
        entry = normalize_entry(
            {"title": "כותרת", "link": "https://example.com/1", "summary": "א" * 800}
        )
        assert len(entry.snippet) == 500


class TestParseFeed:
    def test_parses_rss_items(self) -> None:
        entries = parse_feed(RSS, max_items=10)

        assert [e.title for e in entries] == ['צה"ל תקף בדרום לבנון', "הכנסת אישרה את התקציב"]
        first = entries[0]
        assert first.normalized_url == "https://www.ynet.co.il/news/article/a1"
        assert first.item_key == generate_item_key(first.normalized_url)
        assert first.published_at == "2024-01-01T12:00:00.000+00:00"
        assert first.date_confidence == "high"
        assert first.snippet == 'כוחות צה"ל תקפו הלילה'
        assert entries[1].date_confidence == "low"

    def test_respects_max_items(self) -> None:
        entries = parse_feed(RSS, max_items=1)
        assert len(entries) == 1


class TestFetchFeed:
    @patch("ingest_items.fetch_feed.get_with_retry")
    def test_returns_entries(self, mock_get) -> None:
        mock_get.return_value = Mock(ok=True, status_code=200, content=RSS.encode("utf-8"))
        entries = fetch_feed("https://www.ynet.co.il/rss", max_items=5, timeout=3.0)
        assert len(entries) == 2
        mock_get.assert_called_once_with("https://www.ynet.co.il/rss", timeout=3.0)

    @patch("ingest_items.fetch_feed.get_with_retry")
    def test_non_2xx_raises_with_code(self, mock_get) -> None:
        mock_get.return_value = Mock(ok=False, status_code=500)
        with pytest.raises(FeedFetchError) as exc_info:
            fetch_feed("https://www.ynet.co.il/rss", max_items=5)
        assert exc_info.value.code == "http_500"

    @patch("ingest_items.fetch_feed.get_with_retry")
    def test_unsafe_url_never_fetched(self, mock_get) -> None:
        with pytest.raises(UnsafeUrlError):
            fetch_feed("http://127.0.0.1/rss", max_items=5)
        mock_get.assert_not_called()
