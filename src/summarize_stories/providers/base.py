"""Summary provider interface."""

from abc import ABC, abstractmethod
from typing import Optional

from ingest_items.models import Source
from ingest_items.sources import get_source_by_id
from store.stories_repo import SummaryItem

UNKNOWN_SOURCE = "источник не определён"


class ProviderError(RuntimeError):
    """A single provider could not produce text."""


class SummaryProvider(ABC):
    """A backend that turns story items into the five-section summary text.

    `relaxed_guards` marks the deterministic last-resort provider, whose
    output is exempt from the length guard. `timeout` is the default per-call
    network timeout in seconds; None for providers that make no calls.
    """

    name: str = ""
    relaxed_guards: bool = False
    timeout: Optional[float] = None

    @abstractmethod
    def generate(
        self, items: list[SummaryItem], risk_level: str, timeout: Optional[float] = None
    ) -> str:
        """Return raw summary text or raise ProviderError.

        `timeout` overrides the provider default for this call.
        """


def source_names_line(items: list[SummaryItem], sources: list[Source] | None = None) -> str:
    """Comma-separated display names of the distinct sources behind the items."""
    names = []
    seen = set()
    for item in items:
        if item.source_id in seen:
            continue
        seen.add(item.source_id)
        source = get_source_by_id(item.source_id, sources)
        if source is not None:
            names.append(source.name)
    return ", ".join(names) if names else UNKNOWN_SOURCE


def why_important_line(risk_level: str) -> str:
    if risk_level == "high":
        return "По данным источников, событие требует повышенного внимания."
    return "По данным источников, ситуация находится под наблюдением."
