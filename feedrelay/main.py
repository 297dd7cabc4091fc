"""Command-line entrypoint for the feedrelay aggregator.

1) load configuration
2) fetch page 1 of a source and follow pagination up to ``--pages``
3) optionally backfill full text and AI summaries
4) print one JSON object per article on stdout
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import List

from dotenv import load_dotenv

from .activity import ActivityBroadcaster
from .ai import summarize_content
from .cache import FeedCache
from .fetchers import RelayClient
from .models import Article, Source
from .orchestrator import FeedFetcher
from .pagination import StrategyTable
from .processors import ArticleExtractor
from .utils.config_loader import ConfigError, FeedConfig, load_config
from .utils.logging import configure_logging, get_logger
from .utils.pipeline_config import PipelineConfig


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="feedrelay - fetch, paginate and extract articles from feeds")
    parser.add_argument(
        "--config",
        default="config/sources.yaml",
        help="Path to sources configuration file (YAML)",
    )
    parser.add_argument(
        "--source",
        action="append",
        dest="sources",
        help="Source id to load (repeatable; default: all configured sources)",
    )
    parser.add_argument(
        "--pages",
        type=int,
        default=1,
        help="Maximum number of pages to load per source",
    )
    parser.add_argument(
        "--full-text",
        action="store_true",
        help="Replace stub content with text extracted from the article page",
    )
    parser.add_argument(
        "--summarize",
        action="store_true",
        help="Attach an AI summary to every article (needs an AI backend)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging verbosity",
    )
    return parser.parse_args(argv)


def build_cache(config: FeedConfig, settings: PipelineConfig) -> FeedCache:
    relay = RelayClient(
        config.relays,
        timeout=settings.relay_timeout,
        no_cache_bust_domains=settings.no_cache_bust_domains,
    )
    strategies = StrategyTable()
    strategies.update(config.strategies)
    extractor = ArticleExtractor(
        relay,
        min_paragraphs=settings.min_paragraphs,
        min_link_ratio=settings.min_link_ratio,
        full_text_threshold=settings.full_text_threshold,
    )
    return FeedCache(FeedFetcher(relay, strategies, extractor), stale_after=settings.stale_after_seconds)


async def _load_source(cache: FeedCache, source: Source, pages: int) -> List[Article]:
    state = await cache.load(source)
    if state.error:
        raise RuntimeError(state.error)
    while state.has_more and state.page < pages:
        state = await cache.load_more(source)
    return list(state.articles)


async def run(args: argparse.Namespace, config: FeedConfig, settings: PipelineConfig) -> int:
    logger = get_logger("feedrelay.cli")
    cache = build_cache(config, settings)
    activity = ActivityBroadcaster()
    sources = [config.source(sid) for sid in args.sources] if args.sources else config.sources

    results = await asyncio.gather(
        *(_load_source(cache, s, args.pages) for s in sources),
        return_exceptions=True,
    )

    failures = 0
    for source, result in zip(sources, results):
        if isinstance(result, BaseException):
            failures += 1
            logger.error("Could not load %s: %s", source.name, result)
            continue
        for article in result:
            if args.full_text:
                article = await cache.fetcher.extractor.enrich(article)
                activity.announce("read", article.title, article.link, source.id)
            record = article.to_dict()
            if args.summarize:
                record["summary"] = await asyncio.to_thread(summarize_content, article.content or article.snippet)
            sys.stdout.write(json.dumps(record, ensure_ascii=False) + "\n")
    return 1 if failures else 0


def main(argv: List[str] | None = None) -> int:
    load_dotenv(override=False)
    args = parse_args(argv)
    configure_logging(level=args.log_level, output="stderr")
    logger = get_logger("feedrelay.agent")

    config_path = Path(args.config)
    logger.info("Loading sources configuration from %s", config_path)
    try:
        config = load_config(config_path)
        if args.sources:
            for sid in args.sources:
                config.source(sid)
    except ConfigError as exc:
        logger.error("Failed to load configuration: %s", exc)
        return 1

    logger.info("Loaded %d source(s)", len(config.sources))
    return asyncio.run(run(args, config, PipelineConfig()))


if __name__ == "__main__":  # pragma: no cover - script entrypoint
    raise SystemExit(main())
