"""Ordered first-match evaluation shared by the scraper and the extractor."""

from __future__ import annotations

from typing import Callable, Iterable, List, Optional, TypeVar

from bs4 import BeautifulSoup, Tag

T = TypeVar("T")


def first_match(soup: BeautifulSoup | Tag, selectors: Iterable[str]) -> List[Tag]:
    """Return the matches of the first CSS selector that finds anything."""
    for selector in selectors:
        if not selector:
            continue
        nodes = soup.select(selector)
        if nodes:
            return nodes
    return []


def first_result(candidates: Iterable[Callable[[], Optional[T]]]) -> Optional[T]:
    """Call each candidate in order and return the first non-``None`` result."""
    for candidate in candidates:
        result = candidate()
        if result is not None:
            return result
    return None
