from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

import feedparser

from ..errors import FeedParseError
from ..models import Article, Source
from ..processors.normalize import make_snippet, normalize_html
from ..utils.logging import get_logger

logger = get_logger("feedrelay.parsers.syndication")

DEFAULT_TITLE = "Untitled"
_DATE_FIELDS = ("published_parsed", "updated_parsed", "created_parsed", "expired_parsed")


def _parse_datetime(entry: dict) -> Optional[datetime]:
    for key in _DATE_FIELDS:
        tm = entry.get(key)
        if tm:
            try:
                return datetime(*tm[:6], tzinfo=timezone.utc)
            except (TypeError, ValueError):
                continue
    return None


def _resolve_link(entry: dict) -> str:
    link = (entry.get("link") or "").strip()
    if link:
        return link
    links = entry.get("links") or []
    for candidate in links:
        if candidate.get("rel") == "alternate" and candidate.get("href"):
            return candidate["href"].strip()
    for candidate in links:
        if candidate.get("href"):
            return candidate["href"].strip()
    return ""


def _resolve_author(entry: dict) -> str:
    detail = entry.get("author_detail") or {}
    authors = entry.get("authors") or [{}]
    for value in (
        entry.get("author"),
        detail.get("name"),
        authors[0].get("name"),
        entry.get("publisher"),
    ):
        if value and value.strip():
            return value.strip()
    return ""


def _resolve_content(entry: dict) -> str:
    # content:encoded and Atom <content> land in ``content``; RSS description
    # and Atom summary land in ``summary``
    for block in entry.get("content") or []:
        value = block.get("value")
        if value:
            return value
    return entry.get("summary") or entry.get("description") or ""


def entry_to_article(entry: dict, source: Source) -> Article:
    title = (entry.get("title") or "").strip() or DEFAULT_TITLE
    link = _resolve_link(entry)
    guid = (entry.get("id") or "").strip() or link
    content = normalize_html(_resolve_content(entry), link or source.url)
    article = Article(
        guid=guid,
        title=title,
        link=link,
        source_id=source.id,
        content=content,
        snippet=make_snippet(content),
        author=_resolve_author(entry),
    )
    published = _parse_datetime(entry)
    if published is not None:
        article.published = published
    return article


def parse_feed(text: str, source: Source) -> List[Article]:
    """Parse an RSS or Atom document into articles.

    Raises :class:`FeedParseError` when the payload is not a feed at all.
    A well-formed feed with no items yields an empty list. One broken item
    never drops the rest of the batch.
    """
    parsed = feedparser.parse(
        text.encode("utf-8"),
        sanitize_html=False,
        resolve_relative_uris=False,
    )
    entries = parsed.get("entries") or []
    if not entries and (parsed.get("bozo") or not parsed.get("version")):
        reason = parsed.get("bozo_exception") or "no recognizable feed"
        raise FeedParseError(f"Feed parsing failed for {source.id}: {reason}")
    if parsed.get("bozo"):
        logger.debug("Feed 'bozo' flagged for %s: %s", source.id, parsed.get("bozo_exception"))

    articles: List[Article] = []
    for entry in entries:
        try:
            articles.append(entry_to_article(entry, source))
        except Exception as exc:  # noqa: BLE001 - isolate per-item failures
            logger.warning("Skipping malformed item in %s: %s", source.id, exc)
    logger.info("Parsed %d feed entries from %s", len(articles), source.id)
    return articles
