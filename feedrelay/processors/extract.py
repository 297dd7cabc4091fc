from __future__ import annotations

from dataclasses import replace
from functools import partial
from typing import Optional

from bs4 import BeautifulSoup

from ..fetchers.relay import RelayClient
from ..models import Article
from ..parsers.selectors import first_match, first_result
from ..utils.logging import get_logger
from .normalize import make_snippet, normalize_html

logger = get_logger("feedrelay.processors.extract")

# Removed before any boundary heuristic runs.
JUNK_SELECTORS = (
    "script", "style", "iframe", "nav", "header", "footer", "aside",
    ".ads", ".advertisement", ".social-share", ".comments", "#comments",
    ".sidebar", ".related-posts", ".newsletter-signup", ".cookie-consent",
    "button", "form", ".layout-header", ".layout-footer", ".cb-modal",
    ".is-hidden", ".visually-hidden", "#ad_container",
)

# Known per-site content containers, most specific first.
CONTENT_SELECTORS = (
    ".post-content",
    ".article-content",
    ".entry-content",
    ".c-entry-content",
    ".duet--article--text-component",
    ".rich_media_content",
    ".main-content",
    "#content",
    ".article-body",
    ".story-body",
    ".topic-content",
    ".post_content",
    "#art_content",
    ".article-cont",
    ".content",
    ".article-detail",
    ".news_content",
)

DENSITY_CANDIDATES = "div, section, main"
MULTI_CONTAINER_SEPARATOR = "<br/>"

# Tuned by hand, not derived; revisit against a representative page corpus.
MIN_PARAGRAPHS = 3
MIN_LINK_RATIO = 0.3


def strip_boilerplate(soup: BeautifulSoup) -> None:
    for selector in JUNK_SELECTORS:
        for node in soup.select(selector):
            # nested matches die with their ancestor
            if not node.decomposed:
                node.decompose()


def _from_article_tag(soup: BeautifulSoup) -> Optional[str]:
    article = soup.find("article")
    return article.decode_contents() if article is not None else None


def _from_content_selectors(soup: BeautifulSoup) -> Optional[str]:
    for selector in CONTENT_SELECTORS:
        nodes = first_match(soup, [selector])
        if len(nodes) == 1:
            return nodes[0].decode_contents()
        if nodes:
            # some sites split one story over several containers
            return MULTI_CONTAINER_SEPARATOR.join(node.decode_contents() for node in nodes)
    return None


def _from_paragraph_density(
    soup: BeautifulSoup,
    *,
    min_paragraphs: int,
    min_link_ratio: Optional[float],
) -> Optional[str]:
    best = None
    best_count = 0
    for container in soup.select(DENSITY_CANDIDATES):
        count = len(container.find_all("p"))
        if count <= min_paragraphs or count <= best_count:
            continue
        if min_link_ratio is not None:
            links = len(container.find_all("a"))
            if links and count / links <= min_link_ratio:
                continue
        best, best_count = container, count
    return best.decode_contents() if best is not None else None


def inject_base_tag(html: str, url: str) -> str:
    base_tag = f'<base href="{url}" target="_blank">'
    if "<head>" in html:
        return html.replace("<head>", f"<head>{base_tag}", 1)
    return base_tag + html


class ArticleExtractor:
    """Locate the article body inside an arbitrary web page.

    Boilerplate is removed first, then three boundary heuristics are tried in
    order and the first hit wins:

    1. the first ``<article>`` element
    2. known content-class selectors (several matches are concatenated)
    3. the ``div``/``section``/``main`` with the most paragraphs, provided it
       has more than ``min_paragraphs`` and, unless ``min_link_ratio`` is
       ``None``, a paragraph-to-link ratio above it

    ``None`` means nothing matched; callers keep the feed content.
    """

    def __init__(
        self,
        relay: RelayClient,
        *,
        min_paragraphs: int = MIN_PARAGRAPHS,
        min_link_ratio: Optional[float] = MIN_LINK_RATIO,
        full_text_threshold: int = 1000,
    ) -> None:
        self.relay = relay
        self.min_paragraphs = min_paragraphs
        self.min_link_ratio = min_link_ratio
        self.full_text_threshold = full_text_threshold

    def extract_from_html(self, html: str, url: str) -> Optional[str]:
        # lazy images are fixed on the whole page before any subtree is picked
        soup = BeautifulSoup(normalize_html(html, url), "html.parser")
        strip_boilerplate(soup)
        return first_result(
            [
                partial(_from_article_tag, soup),
                partial(_from_content_selectors, soup),
                partial(
                    _from_paragraph_density,
                    soup,
                    min_paragraphs=self.min_paragraphs,
                    min_link_ratio=self.min_link_ratio,
                ),
            ]
        )

    async def extract_full_text(self, url: str) -> Optional[str]:
        html = await self.relay.fetch_text(url)
        if not html:
            return None
        try:
            content = self.extract_from_html(html, url)
        except Exception as exc:  # noqa: BLE001 - an extraction miss is never fatal
            logger.warning("Full-text extraction failed for %s: %s", url, exc)
            return None
        if content is None:
            logger.info("No content boundary found for %s", url)
        return content

    async def fetch_web_page(self, url: str) -> Optional[str]:
        """Fetch a page for embedded rendering, scripts included."""
        html = await self.relay.fetch_text(url)
        if not html:
            return None
        return inject_base_tag(html, url)

    def needs_full_text(self, article: Article) -> bool:
        """Short feed content is most likely a summary stub."""
        return len(article.content or "") < self.full_text_threshold

    async def enrich(self, article: Article) -> Article:
        """Return ``article`` with extracted full text when its content is a stub."""
        if not article.link or not self.needs_full_text(article):
            return article
        content = await self.extract_full_text(article.link)
        if not content:
            return article
        return replace(article, content=content, snippet=make_snippet(content))
