"""Claude provider (Anthropic Messages API)."""

from typing import Optional

import anthropic
from anthropic import Anthropic

from store.stories_repo import SummaryItem
from summarize_stories.instructions import build_system_prompt, build_user_message
from summarize_stories.providers.base import ProviderError, SummaryProvider


class ClaudeProvider(SummaryProvider):
    name = "claude"

    def __init__(
        self,
        api_key: str,
        model: str = "claude-haiku-4-5-20251001",
        timeout: float = 20.0,
        target_min: int = 400,
        target_max: int = 700,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.target_min = target_min
        self.target_max = target_max
        self._client = None

    def _get_client(self) -> Anthropic:
        if self._client is None:
            self._client = Anthropic(api_key=self.api_key, timeout=self.timeout, max_retries=0)
        return self._client

    def generate(
        self, items: list[SummaryItem], risk_level: str, timeout: Optional[float] = None
    ) -> str:
        if not self.api_key:
            raise ProviderError("ANTHROPIC_API_KEY not configured")

        try:
            response = self._get_client().messages.create(
                model=self.model,
                timeout=self.timeout if timeout is None else timeout,
                max_tokens=600,
                system=build_system_prompt(risk_level, self.target_min, self.target_max),
                messages=[{"role": "user", "content": build_user_message(items)}],
            )
        except anthropic.APIError as exc:
            raise ProviderError(f"Claude API error: {exc}") from exc

        text = "".join(block.text for block in response.content if block.type == "text")
        if not text:
            raise ProviderError("Claude returned no text content")
        return text
