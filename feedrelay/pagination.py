"""Per-source pagination strategies.

Each strategy is a small tagged record describing how to build the URL for
page N and which parser reads it. Sources without an entry fall back to the
generic ``page=N&p=N`` query scheme handled by the orchestrator.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Literal, Optional, Union

from .parsers.api import JsonFieldMapper, get_mapper

StrategyMode = Literal["rss", "scrape", "api"]


@dataclass(slots=True, frozen=True)
class _UrlTemplate:
    url_template: str
    page_size: int = 20

    def url_for(self, page: int, feed_url: str = "") -> str:
        """Build the URL for ``page`` (1-based).

        Placeholders: ``{page}``, ``{offset}`` (items skipped before the page)
        and ``{feed_url}``.
        """
        return self.url_template.format(
            page=page,
            offset=(page - 1) * self.page_size,
            feed_url=feed_url,
        )


@dataclass(slots=True, frozen=True)
class SyndicationStrategy(_UrlTemplate):
    mode: StrategyMode = "rss"


@dataclass(slots=True, frozen=True)
class ScrapeStrategy(_UrlTemplate):
    selector: str = ""
    mode: StrategyMode = "scrape"


@dataclass(slots=True, frozen=True)
class ApiStrategy(_UrlTemplate):
    mapper: Optional[JsonFieldMapper] = None
    mode: StrategyMode = "api"


PaginationStrategy = Union[SyndicationStrategy, ScrapeStrategy, ApiStrategy]


def generic_page_url(feed_url: str, page: int) -> str:
    separator = "&" if "?" in feed_url else "?"
    return f"{feed_url}{separator}page={page}&p={page}"


def build_strategy(
    mode: str,
    url_template: str,
    *,
    page_size: int = 20,
    selector: str | None = None,
    mapper: str | None = None,
) -> PaginationStrategy:
    """Create a strategy from plain configuration values (e.g. YAML)."""
    if mode == "rss":
        return SyndicationStrategy(url_template=url_template, page_size=page_size)
    if mode == "scrape":
        return ScrapeStrategy(url_template=url_template, page_size=page_size, selector=selector or "")
    if mode == "api":
        if not mapper:
            raise ValueError("API pagination requires a 'mapper' name")
        return ApiStrategy(url_template=url_template, page_size=page_size, mapper=get_mapper(mapper))
    raise ValueError(f"Unknown pagination mode '{mode}'. Use 'rss', 'scrape' or 'api'.")


DEFAULT_STRATEGIES: Dict[str, PaginationStrategy] = {
    "cnbeta": ScrapeStrategy(
        url_template="https://m.cnbeta.com.tw/list/latest/{page}",
        selector=".list .item a, .list-box .item a, .txt-list li a",
    ),
    "hackernews": ScrapeStrategy(
        url_template="https://news.ycombinator.com/news?p={page}",
        selector=".titleline > a",
    ),
    "v2ex": ScrapeStrategy(
        url_template="https://www.v2ex.com/recent?p={page}",
        selector=".item_title > a",
    ),
    "ithome": ScrapeStrategy(
        url_template="https://www.ithome.com/list/list_{page}.html",
        selector=".list_1 li .block h2 a",
    ),
    "landian": ScrapeStrategy(
        url_template="https://www.landiannews.com/page/{page}",
        selector=".article-title a, header h2 a, .post-title a",
    ),
    "ifanr": ScrapeStrategy(
        url_template="https://www.ifanr.com/page/{page}",
        selector=".article-item h3 a, .article-info h3 a",
    ),
    "sspai": ApiStrategy(
        url_template="https://sspai.com/api/v1/article/index/page/get?limit=20&offset={offset}",
        page_size=20,
        mapper=get_mapper("sspai"),
    ),
}


class StrategyTable:
    """Registry of pagination strategies keyed by source id."""

    def __init__(self, strategies: Optional[Dict[str, PaginationStrategy]] = None) -> None:
        self._strategies: Dict[str, PaginationStrategy] = dict(
            DEFAULT_STRATEGIES if strategies is None else strategies
        )

    def get(self, source_id: str) -> Optional[PaginationStrategy]:
        return self._strategies.get(source_id)

    def register(self, source_id: str, strategy: PaginationStrategy) -> None:
        self._strategies[source_id] = strategy

    def update(self, strategies: Dict[str, PaginationStrategy]) -> None:
        self._strategies.update(strategies)

    def __contains__(self, source_id: str) -> bool:
        return source_id in self._strategies
