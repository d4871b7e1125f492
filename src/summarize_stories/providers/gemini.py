"""Gemini provider (REST generateContent)."""

from typing import Optional

import requests

from store.stories_repo import SummaryItem
from summarize_stories.instructions import build_system_prompt, build_user_message
from summarize_stories.providers.base import ProviderError, SummaryProvider

GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta/models"


class GeminiProvider(SummaryProvider):
    name = "gemini"

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.0-flash",
        timeout: float = 20.0,
        target_min: int = 400,
        target_max: int = 700,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.target_min = target_min
        self.target_max = target_max

    def generate(
        self, items: list[SummaryItem], risk_level: str, timeout: Optional[float] = None
    ) -> str:
        if not self.api_key:
            raise ProviderError("GEMINI_API_KEY not configured")

        payload = {
            "systemInstruction": {
                "parts": [{"text": build_system_prompt(risk_level, self.target_min, self.target_max)}]
            },
            "contents": [{"role": "user", "parts": [{"text": build_user_message(items)}]}],
            "generationConfig": {"maxOutputTokens": 600, "temperature": 0.3},
        }
        try:
            response = requests.post(
                f"{GEMINI_API_BASE}/{self.model}:generateContent",
                params={"key": self.api_key},
                json=payload,
                timeout=self.timeout if timeout is None else timeout,
            )
        except requests.RequestException as exc:
            raise ProviderError(f"Gemini request failed: {exc}") from exc

        if not response.ok:
            raise ProviderError(f"Gemini API {response.status_code}: {response.text[:200]}")

        try:
            data = response.json()
        except ValueError as exc:
            raise ProviderError(f"Gemini returned invalid JSON: {exc}") from exc
        try:
            text = data["candidates"][0]["content"]["parts"][0].get("text")
        except (KeyError, IndexError, TypeError):
            text = None
        if not text:
            raise ProviderError("Gemini returned no text content")
        return text
