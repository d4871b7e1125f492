"""Data models for the summarize_stories pipeline stage."""

from dataclasses import dataclass, field
from typing import Optional

DEFAULT_PROVIDER_ORDER = ["gemini", "claude", "openai", "google_translate", "rule_based"]


@dataclass
class SummaryConfig:
    provider_order: list[str] = field(default_factory=lambda: list(DEFAULT_PROVIDER_ORDER))
    target_min: int = 400
    target_max: int = 700
    max_stories_per_run: int = 5
    max_items_per_story: int = 10
    request_timeout_sec: float = 20.0
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.0-flash"
    anthropic_api_key: Optional[str] = None
    anthropic_model: str = "claude-haiku-4-5-20251001"
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"


@dataclass
class ParsedSummary:
    """The five mandatory sections of a generated summary."""
    title: str
    what_happened: str
    why_important: str
    whats_next: str
    sources: str


@dataclass
class GuardResult:
    ok: bool
    reason: Optional[str] = None


@dataclass
class SummaryCounters:
    attempted: int = 0
    published: int = 0
    skipped: int = 0
    failed: int = 0
