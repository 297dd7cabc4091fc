from __future__ import annotations

from typing import List, Optional, Set
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from ..models import Article
from ..utils.logging import get_logger
from .selectors import first_match

logger = get_logger("feedrelay.parsers.listing")

GENERIC_LISTING_SELECTORS = (
    "h2 a, h3 a, .entry-title a, .post-title a, article a, .card a",
)
PLACEHOLDER_SNIPPET = "Fetched from web listing"
MIN_TITLE_LENGTH = 5
_NOISE_MARKERS = ("#comment", "/tag/", "/category/", "javascript:")


def _anchor_for(node: Tag) -> Optional[Tag]:
    if node.name == "a":
        return node
    return node.find("a")


def _is_noise(link: str) -> bool:
    return any(marker in link for marker in _NOISE_MARKERS)


def scrape_listing(html: str, page_url: str, selector_hint: str | None, source_id: str) -> List[Article]:
    """Extract article links from an HTML listing page.

    The selector hint is tried first, then the generic heading/entry anchor
    patterns. Results carry placeholder content; the real body and date are
    filled in later by the full-article extractor.
    """
    soup = BeautifulSoup(html or "", "html.parser")
    nodes = first_match(soup, [selector_hint or ""])
    if not nodes:
        logger.info("Selector %r matched nothing on %s; using generic fallback", selector_hint, page_url)
        nodes = first_match(soup, GENERIC_LISTING_SELECTORS)

    articles: List[Article] = []
    seen: Set[str] = set()
    for node in nodes:
        anchor = _anchor_for(node)
        if anchor is None:
            continue
        href = (anchor.get("href") or "").strip()
        title = anchor.get_text().strip() or (anchor.get("title") or "").strip()
        if not href or len(title) <= MIN_TITLE_LENGTH:
            continue

        link = urljoin(page_url, href)
        if _is_noise(link) or link in seen:
            continue
        seen.add(link)

        articles.append(
            Article(
                guid=link,
                title=title,
                link=link,
                source_id=source_id,
                content="",
                snippet=PLACEHOLDER_SNIPPET,
            )
        )

    logger.info("Scraped %d listing entries from %s", len(articles), page_url)
    return articles
