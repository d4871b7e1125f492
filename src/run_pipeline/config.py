"""Run configuration loaded from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from dotenv import load_dotenv

from common.utils import parse_bool, parse_int
from crosspost.models import CrosspostConfig
from store.connection import DEFAULT_DATABASE_URL
from summarize_stories.models import DEFAULT_PROVIDER_ORDER, SummaryConfig


@dataclass
class PipelineConfig:
    database_url: str = DEFAULT_DATABASE_URL
    run_budget_ms: int = 25_000
    lock_ttl_sec: int = 300
    max_new_items_per_run: int = 25
    fetch_timeout_ms: int = 10_000
    sources_file: Optional[str] = None
    summary: SummaryConfig = field(default_factory=SummaryConfig)
    crosspost: CrosspostConfig = field(default_factory=CrosspostConfig)


def _parse_provider_order(value: Optional[str]) -> list[str]:
    if not value:
        return list(DEFAULT_PROVIDER_ORDER)
    names = [part.strip() for part in value.split(",") if part.strip()]
    return names or list(DEFAULT_PROVIDER_ORDER)


def load_config(env: Optional[Mapping[str, str]] = None) -> PipelineConfig:
    """Build the config from `env` (default: os.environ after loading .env)."""
    if env is None:
        load_dotenv()
        env = os.environ

    summary = SummaryConfig(
        provider_order=_parse_provider_order(env.get("SUMMARY_PROVIDERS")),
        target_min=parse_int(env.get("SUMMARY_TARGET_MIN"), 400),
        target_max=parse_int(env.get("SUMMARY_TARGET_MAX"), 700),
        max_stories_per_run=parse_int(env.get("MAX_SUMMARIES_PER_RUN"), 5),
        gemini_api_key=env.get("GEMINI_API_KEY") or None,
        gemini_model=env.get("GEMINI_MODEL") or SummaryConfig.gemini_model,
        anthropic_api_key=env.get("ANTHROPIC_API_KEY") or None,
        anthropic_model=env.get("ANTHROPIC_MODEL") or SummaryConfig.anthropic_model,
        openai_api_key=env.get("OPENAI_API_KEY") or None,
        openai_model=env.get("OPENAI_MODEL") or SummaryConfig.openai_model,
    )
    crosspost = CrosspostConfig(
        enabled=parse_bool(env.get("FB_POSTING_ENABLED")),
        page_id=env.get("FB_PAGE_ID") or None,
        access_token=env.get("FB_PAGE_ACCESS_TOKEN") or None,
        site_base_url=env.get("PUBLIC_SITE_BASE_URL") or "",
        max_posts_per_run=parse_int(env.get("MAX_FB_POSTS_PER_RUN"), 5),
    )
    return PipelineConfig(
        database_url=env.get("DATABASE_URL") or DEFAULT_DATABASE_URL,
        run_budget_ms=parse_int(env.get("RUN_BUDGET_MS"), 25_000),
        lock_ttl_sec=parse_int(env.get("LOCK_TTL_SEC"), 300),
        max_new_items_per_run=parse_int(env.get("MAX_NEW_ITEMS_PER_RUN"), 25),
        fetch_timeout_ms=parse_int(env.get("FETCH_TIMEOUT_MS"), 10_000),
        sources_file=env.get("SOURCES_FILE") or None,
        summary=summary,
        crosspost=crosspost,
    )
