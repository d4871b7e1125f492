"""OpenAI chat completions provider."""

from typing import Optional

import openai
from openai import OpenAI

from store.stories_repo import SummaryItem
from summarize_stories.instructions import build_system_prompt, build_user_message
from summarize_stories.providers.base import ProviderError, SummaryProvider


class OpenAIProvider(SummaryProvider):
    name = "openai"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
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

    def _get_client(self) -> OpenAI:
        if self._client is None:
            self._client = OpenAI(api_key=self.api_key, timeout=self.timeout, max_retries=0)
        return self._client

    def generate(
        self, items: list[SummaryItem], risk_level: str, timeout: Optional[float] = None
    ) -> str:
        if not self.api_key:
            raise ProviderError("OPENAI_API_KEY not configured")

        try:
            response = self._get_client().chat.completions.create(
                model=self.model,
                timeout=self.timeout if timeout is None else timeout,
                max_tokens=600,
                temperature=0.3,
                messages=[
                    {
                        "role": "system",
                        "content": build_system_prompt(risk_level, self.target_min, self.target_max),
                    },
                    {"role": "user", "content": build_user_message(items)},
                ],
            )
        except openai.OpenAIError as exc:
            raise ProviderError(f"OpenAI API error: {exc}") from exc

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise ProviderError("OpenAI returned no text content")
        return content
