from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from ..errors import FeedParseError
from ..models import Article, Source
from ..processors.normalize import make_snippet, normalize_html
from ..utils.logging import get_logger

logger = get_logger("feedrelay.parsers.api")


@dataclass(slots=True, frozen=True)
class JsonFieldMapper:
    """Per-source mapping from a JSON payload to articles.

    ``items_key`` names the top-level field holding the item list;
    ``to_article`` converts one item.
    """

    name: str
    items_key: str
    to_article: Callable[[Dict[str, Any], Source], Article]


def _epoch_to_datetime(value: Any) -> Optional[datetime]:
    try:
        return datetime.fromtimestamp(int(value), tz=timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError):
        return None


def _sspai_item(item: Dict[str, Any], source: Source) -> Article:
    item_id = str(item["id"])
    content = normalize_html(item.get("body") or "", "https://sspai.com")
    author = item.get("author")
    nickname = author.get("nickname") if isinstance(author, dict) else None
    article = Article(
        guid=item_id,
        title=str(item.get("title") or "").strip() or "Untitled",
        link=f"https://sspai.com/post/{item_id}",
        source_id=source.id,
        content=content,
        snippet=make_snippet(str(item.get("summary") or "") or content),
        author=nickname or source.name,
    )
    released = item.get("released_time")
    published = _epoch_to_datetime(released) if released else None
    if published is not None:
        article.published = published
    elif released:
        logger.debug("Ignoring unreadable released_time %r on %s item %s", released, source.id, item_id)
    return article


MAPPERS: Dict[str, JsonFieldMapper] = {
    "sspai": JsonFieldMapper(name="sspai", items_key="data", to_article=_sspai_item),
}


def register_mapper(mapper: JsonFieldMapper) -> None:
    MAPPERS[mapper.name] = mapper


def get_mapper(name: str) -> JsonFieldMapper:
    try:
        return MAPPERS[name]
    except KeyError:
        raise KeyError(f"Unknown JSON mapper '{name}'. Known: {sorted(MAPPERS)}") from None


def parse_api_payload(
    text: str,
    source: Source,
    mapper: JsonFieldMapper,
    *,
    strict: bool = False,
) -> List[Article]:
    """Map a JSON API response to articles.

    Malformed JSON or a missing top-level field yields ``[]``, or raises
    :class:`FeedParseError` when ``strict`` is set (first-page loads).
    """
    try:
        data = json.loads(text)
    except ValueError as exc:
        logger.error("Failed to parse JSON API response for %s: %s", source.id, exc)
        if strict:
            raise FeedParseError(f"Malformed JSON from {source.id}: {exc}") from exc
        return []

    items = data.get(mapper.items_key) if isinstance(data, dict) else None
    if not isinstance(items, list):
        logger.error("JSON API response for %s has no '%s' list", source.id, mapper.items_key)
        if strict:
            raise FeedParseError(f"JSON from {source.id} has no '{mapper.items_key}' list")
        return []

    articles: List[Article] = []
    for item in items:
        try:
            articles.append(mapper.to_article(item, source))
        except Exception as exc:  # noqa: BLE001 - isolate per-item failures
            logger.warning("Skipping malformed API item in %s: %s", source.id, exc)
    logger.info("Mapped %d API items from %s via %s", len(articles), source.id, mapper.name)
    return articles
