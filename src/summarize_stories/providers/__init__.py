"""Summary generation backends."""

from summarize_stories.providers.base import ProviderError, SummaryProvider
from summarize_stories.providers.claude import ClaudeProvider
from summarize_stories.providers.gemini import GeminiProvider
from summarize_stories.providers.google_translate import GoogleTranslateProvider
from summarize_stories.providers.openai_chat import OpenAIProvider
from summarize_stories.providers.rule_based import RuleBasedProvider

__all__ = [
    "ProviderError",
    "SummaryProvider",
    "ClaudeProvider",
    "GeminiProvider",
    "GoogleTranslateProvider",
    "OpenAIProvider",
    "RuleBasedProvider",
]
