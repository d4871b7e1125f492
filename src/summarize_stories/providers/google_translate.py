"""Machine-translation provider.

Translates headlines through the keyless Google Translate endpoint and lays
them out in the five-section format.
"""

import time
from typing import Optional

import requests

from ingest_items.models import Source
from store.stories_repo import SummaryItem
from summarize_stories.format import render_sections
from summarize_stories.providers.base import (
    ProviderError,
    SummaryProvider,
    source_names_line,
    why_important_line,
)

GT_BASE = "https://translate.googleapis.com/translate_a/single"


def translate_text(text: str, source_lang: str = "he", target_lang: str = "ru", timeout: float = 10.0) -> str:
    """Translate one string; raises ProviderError on HTTP or shape errors."""
    params = {"client": "gtx", "sl": source_lang, "tl": target_lang, "dt": "t", "q": text}
    try:
        response = requests.get(GT_BASE, params=params, timeout=timeout)
    except requests.RequestException as exc:
        raise ProviderError(f"Google Translate request failed: {exc}") from exc
    if not response.ok:
        raise ProviderError(f"Google Translate HTTP {response.status_code}")

    # Response: [[[segment_translated, segment_source, ...], ...], null, "iw"]
    try:
        data = response.json()
    except ValueError as exc:
        raise ProviderError(f"Google Translate returned invalid JSON: {exc}") from exc
    outer = data[0] if isinstance(data, list) and data else None
    if not isinstance(outer, list):
        raise ProviderError("Google Translate: unexpected response shape")

    segments = [seg[0] for seg in outer if isinstance(seg, list) and seg and isinstance(seg[0], str)]
    if not segments:
        raise ProviderError("Google Translate: no translation segments returned")
    return "".join(segments)


class GoogleTranslateProvider(SummaryProvider):
    name = "google_translate"

    def __init__(self, sources: list[Source] | None = None, timeout: float = 10.0) -> None:
        self.sources = sources
        self.timeout = timeout

    def generate(
        self, items: list[SummaryItem], risk_level: str, timeout: Optional[float] = None
    ) -> str:
        if not items:
            raise ProviderError("No items to translate")

        deadline = time.monotonic() + (self.timeout if timeout is None else timeout)
        translated = []
        for item in items:
            left = deadline - time.monotonic()
            if left <= 0:
                raise ProviderError("Google Translate timed out")
            translated.append(translate_text(item.title, timeout=left))

        return render_sections(
            translated[0],
            ". ".join(translated[:3]) + ".",
            why_important_line(risk_level),
            "Ожидается обновление.",
            source_names_line(items, self.sources),
        )
