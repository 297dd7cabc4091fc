from __future__ import annotations

from typing import List, Optional

from .errors import FeedError, FeedFetchError, FeedParseError
from .fetchers import RelayClient
from .models import Article, Source
from .pagination import (
    ApiStrategy,
    PaginationStrategy,
    ScrapeStrategy,
    StrategyTable,
    SyndicationStrategy,
    generic_page_url,
)
from .parsers import GENERIC_LISTING_SELECTORS, parse_api_payload, parse_feed, scrape_listing
from .processors import ArticleExtractor
from .utils.logging import get_logger

logger = get_logger("feedrelay.orchestrator")


class FeedFetcher:
    """Resolve, fetch and parse one page of one source.

    Page 1 reads the source's canonical URL with the parser its type
    declares. Later pages use the source's pagination strategy, or the
    generic ``page``/``p`` query fallback with a listing scrape as last resort.

    Only page 1 raises. Any failure on a later page is the normal end of the
    stream and yields an empty batch.
    """

    def __init__(
        self,
        relay: RelayClient,
        strategies: StrategyTable | None = None,
        extractor: ArticleExtractor | None = None,
    ) -> None:
        self.relay = relay
        self.strategies = strategies if strategies is not None else StrategyTable()
        self.extractor = extractor or ArticleExtractor(relay)

    async def fetch_page(self, source: Source, page: int = 1) -> List[Article]:
        if page < 1:
            raise ValueError(f"Page numbers start at 1, got {page}")
        try:
            if page == 1:
                return await self._fetch_first_page(source)
            return await self._fetch_later_page(source, page)
        except Exception as exc:  # noqa: BLE001 - later pages end pagination quietly
            if page > 1:
                logger.info("Page %d of %s unavailable (%s); treating as end of stream", page, source.id, exc)
                return []
            if isinstance(exc, FeedError):
                raise
            logger.exception("Unexpected failure loading %s", source.id)
            raise FeedFetchError(f"Failed to load {source.name}: {exc}") from exc

    async def _fetch_first_page(self, source: Source) -> List[Article]:
        strategy = self.strategies.get(source.id)
        if source.type == "scrape":
            selector = strategy.selector if isinstance(strategy, ScrapeStrategy) else None
            first = ScrapeStrategy(url_template=source.url, selector=selector or "")
        elif source.type == "api":
            if not isinstance(strategy, ApiStrategy) or strategy.mapper is None:
                raise FeedFetchError(f"Source {source.id} is an API source without a JSON mapper")
            first = ApiStrategy(url_template=source.url, mapper=strategy.mapper)
        else:
            first = SyndicationStrategy(url_template=source.url)
        return await self._run(source, first, source.url, page=1)

    async def _fetch_later_page(self, source: Source, page: int) -> List[Article]:
        strategy = self.strategies.get(source.id)
        if strategy is not None:
            return await self._run(source, strategy, strategy.url_for(page, source.url), page=page)

        target = generic_page_url(source.url, page)
        text = await self._fetch(source, target, page)
        try:
            return parse_feed(text, source)
        except FeedParseError:
            logger.info("Generic page %d of %s is not a feed; trying a listing scrape", page, source.id)
            return scrape_listing(text, target, GENERIC_LISTING_SELECTORS[0], source.id)

    async def _run(self, source: Source, strategy: PaginationStrategy, target: str, *, page: int) -> List[Article]:
        text = await self._fetch(source, target, page)
        if isinstance(strategy, ScrapeStrategy):
            return scrape_listing(text, target, strategy.selector, source.id)
        if isinstance(strategy, ApiStrategy):
            return parse_api_payload(text, source, strategy.mapper, strict=page == 1)
        return parse_feed(text, source)

    async def _fetch(self, source: Source, target: str, page: int) -> str:
        text: Optional[str] = await self.relay.fetch_text(target, cache_bust=None if source.cache_bust else False)
        if not text:
            raise FeedFetchError(f"Failed to fetch page {page} of {source.name} from {target}")
        return text

    async def fetch_full_text(self, url: str) -> Optional[str]:
        return await self.extractor.extract_full_text(url)

    async def fetch_web_page(self, url: str) -> Optional[str]:
        return await self.extractor.fetch_web_page(url)
