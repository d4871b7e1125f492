"""Deterministic last-resort provider.

Makes no external calls. Headlines stay untranslated and the text is marked
"Данные уточняются." so editors can spot it.
"""

from typing import Optional

from ingest_items.models import Source
from store.stories_repo import SummaryItem
from summarize_stories.format import render_sections
from summarize_stories.providers.base import (
    SummaryProvider,
    source_names_line,
    why_important_line,
)


class RuleBasedProvider(SummaryProvider):
    name = "rule_based"
    relaxed_guards = True

    def __init__(self, sources: list[Source] | None = None) -> None:
        self.sources = sources

    def generate(
        self, items: list[SummaryItem], risk_level: str, timeout: Optional[float] = None
    ) -> str:
        headline = items[0].title if items else "Новость"
        what_happened = ". ".join(item.title for item in items[:3]) + ". Данные уточняются."
        return render_sections(
            headline,
            what_happened,
            why_important_line(risk_level),
            "Ожидается обновление.",
            source_names_line(items, self.sources),
        )
