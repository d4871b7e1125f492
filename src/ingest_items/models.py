"""Data models for the ingest_items pipeline stage."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class Source:
    """A configured news source."""
    id: str
    name: str
    url: str
    type: str = "rss"
    lang: str = "he"
    enabled: bool = True
    max_items_per_run: Optional[int] = None
    category_hints: list[str] = field(default_factory=list)


@dataclass
class NormalizedEntry:
    """Feed entry normalized and ready for the deduplicating upsert."""
    source_url: str
    normalized_url: str
    item_key: str
    title: str
    title_hash: str
    published_at: Optional[str]
    snippet: Optional[str]
    date_confidence: str
