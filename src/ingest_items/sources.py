"""Source registry.

The built-in list can be replaced by a YAML file (SOURCES_FILE) with a
top-level `sources:` list using the same field names as `Source`.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

import yaml

from common.utils import parse_bool
from ingest_items.models import Source

logger = logging.getLogger(__name__)


class RegistryLoader(yaml.SafeLoader):
    """SafeLoader that reads only true/false as booleans, so ids like `off` stay strings."""


RegistryLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != "tag:yaml.org,2002:bool"]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
RegistryLoader.add_implicit_resolver(
    "tag:yaml.org,2002:bool",
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)

SOURCES: list[Source] = [
    Source(
        id="ynet_main",
        name="ynet (ראשי)",
        url="https://www.ynet.co.il/Integration/StoryRss1854.xml",
        max_items_per_run=25,
        category_hints=["politics", "security", "economy", "society", "tech", "health"],
    ),
    Source(
        id="haaretz_rss_directory",
        name="Haaretz RSS directory",
        url="https://www.haaretz.co.il/misc/rss",
        max_items_per_run=15,
        category_hints=["politics", "security", "economy", "society", "culture"],
    ),
    Source(
        id="israelhayom_rss",
        name="ישראל היום (RSS)",
        url="https://www.israelhayom.co.il/rss",
        max_items_per_run=20,
    ),
    Source(
        id="mako_news",
        name="mako חדשות (RSS)",
        url="https://rcs.mako.co.il/rss/31750a2610f26110VgnVCM1000005201000aRCRD.xml",
        max_items_per_run=20,
    ),
    Source(
        id="mako_breaking",
        name="mako מבזקים (RSS)",
        url="https://storage.googleapis.com/mako-sitemaps/rssFlash.xml",
        max_items_per_run=25,
    ),
    Source(
        id="mako_military",
        name="mako צבא וביטחון (RSS)",
        url="https://rcs.mako.co.il/rss/news-military.xml",
        max_items_per_run=15,
        category_hints=["security"],
    ),
    Source(
        id="walla_news",
        name="וואלה! חדשות (RSS)",
        url="https://rss.walla.co.il/feed/22",
        max_items_per_run=20,
    ),
    Source(
        id="maariv_breaking",
        name="מעריב מבזקים (RSS)",
        url="https://www.maariv.co.il/Rss/RssFeedsMivzakiChadashot",
        max_items_per_run=20,
    ),
    Source(
        id="ynet_rss_index",
        name="ynet RSS index (directory)",
        url="https://z.ynet.co.il/short/content/RSS/index.html",
        type="html",
        enabled=False,
        max_items_per_run=10,
    ),
]


def load_sources(path: str | Path | None = None) -> list[Source]:
    """Return the YAML registry at `path`, or the built-in list when no path is given."""
    if not path:
        return list(SOURCES)

    with open(path, encoding="utf-8") as f:
        data = yaml.load(f, Loader=RegistryLoader) or {}

    sources = []
    for raw in data.get("sources", []):
        if raw.get("id") is None or raw.get("url") is None:
            logger.warning("Skipping source without id or url: %s", raw)
            continue
        source_id = str(raw["id"])
        sources.append(
            Source(
                id=source_id,
                name=str(raw["name"]) if raw.get("name") is not None else source_id,
                url=str(raw["url"]),
                type=raw.get("type", "rss"),
                lang=raw.get("lang", "he"),
                enabled=parse_bool(raw.get("enabled"), default=True),
                max_items_per_run=raw.get("max_items_per_run"),
                category_hints=list(raw.get("category_hints") or []),
            )
        )
    logger.info("Loaded %d sources from %s", len(sources), path)
    return sources


def get_enabled_sources(sources: list[Source] | None = None) -> list[Source]:
    return [s for s in (SOURCES if sources is None else sources) if s.enabled]


def get_source_by_id(source_id: str, sources: list[Source] | None = None) -> Source | None:
    for source in SOURCES if sources is None else sources:
        if source.id == source_id:
            return source
    return None
