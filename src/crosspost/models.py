"""Data models for the crosspost stage."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class CrosspostConfig:
    enabled: bool = False
    page_id: Optional[str] = None
    access_token: Optional[str] = None
    site_base_url: str = ""
    max_posts_per_run: int = 5
    timeout_sec: float = 10.0

    @property
    def active(self) -> bool:
        """Posting runs only when switched on and both credentials are present."""
        return bool(self.enabled and self.page_id and self.access_token)


@dataclass
class CrosspostCounters:
    posted: int = 0
    failed: int = 0
    skipped: int = 0
