"""Ordered fallback over summary providers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ingest_items.models import Source
from run_pipeline.budget import RunBudget
from store.stories_repo import SummaryItem
from summarize_stories.models import SummaryConfig
from summarize_stories.providers import (
    ClaudeProvider,
    GeminiProvider,
    GoogleTranslateProvider,
    OpenAIProvider,
    ProviderError,
    RuleBasedProvider,
    SummaryProvider,
)

logger = logging.getLogger(__name__)


class ProviderChainError(RuntimeError):
    """Every provider in the chain failed."""

    def __init__(self, failures: list[tuple[str, str]]):
        self.failures = failures
        detail = " | ".join(f"{name}: {reason}" for name, reason in failures)
        super().__init__(f"All providers failed - {detail}")


@dataclass
class ChainResult:
    text: str
    provider_name: str
    relaxed_guards: bool = False


class ProviderChain:
    """Tries providers strictly in order; the first success wins."""

    def __init__(self, providers: list[SummaryProvider]):
        self.providers = list(providers)

    @property
    def names(self) -> list[str]:
        return [p.name for p in self.providers]

    def __len__(self) -> int:
        return len(self.providers)

    def generate(
        self,
        items: list[SummaryItem],
        risk_level: str,
        budget: Optional[RunBudget] = None,
    ) -> ChainResult:
        """Return the first provider output; raise ProviderChainError if all fail.

        With a budget, each network call is capped at the time left in the run
        and providers that would get no time are skipped.
        """
        failures: list[tuple[str, str]] = []
        for provider in self.providers:
            timeout = provider.timeout
            if budget is not None and timeout is not None:
                timeout = budget.timeout_sec(timeout)
                if timeout <= 0:
                    failures.append((provider.name, "run budget exhausted"))
                    continue
            try:
                text = provider.generate(items, risk_level, timeout=timeout)
            except ProviderError as exc:
                logger.warning("Provider %s failed: %s", provider.name, exc)
                failures.append((provider.name, str(exc)))
                continue
            except Exception as exc:
                logger.exception("Provider %s raised unexpectedly", provider.name)
                failures.append((provider.name, f"{type(exc).__name__}: {exc}"))
                continue
            logger.info("Summary generated by %s", provider.name)
            return ChainResult(
                text=text,
                provider_name=provider.name,
                relaxed_guards=provider.relaxed_guards,
            )
        raise ProviderChainError(failures)


def build_chain(config: SummaryConfig, sources: list[Source] | None = None) -> ProviderChain:
    """Build the chain from the configured order, dropping providers without credentials.

    Unknown names are ignored with a warning.
    """
    providers: list[SummaryProvider] = []
    for name in config.provider_order:
        name = name.strip()
        if name == "gemini":
            if config.gemini_api_key:
                providers.append(GeminiProvider(
                    config.gemini_api_key, config.gemini_model,
                    config.request_timeout_sec, config.target_min, config.target_max,
                ))
        elif name == "claude":
            if config.anthropic_api_key:
                providers.append(ClaudeProvider(
                    config.anthropic_api_key, config.anthropic_model,
                    config.request_timeout_sec, config.target_min, config.target_max,
                ))
        elif name == "openai":
            if config.openai_api_key:
                providers.append(OpenAIProvider(
                    config.openai_api_key, config.openai_model,
                    config.request_timeout_sec, config.target_min, config.target_max,
                ))
        elif name == "google_translate":
            providers.append(GoogleTranslateProvider(sources, config.request_timeout_sec))
        elif name == "rule_based":
            providers.append(RuleBasedProvider(sources))
        elif name:
            logger.warning("Unknown summary provider %r ignored", name)

    logger.info("Provider chain: %s", ", ".join(p.name for p in providers) or "(empty)")
    return ProviderChain(providers)
