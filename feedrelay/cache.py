from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Set, Tuple

from .models import Article, Source
from .orchestrator import FeedFetcher
from .utils.logging import get_logger

logger = get_logger("feedrelay.cache")

DedupKey = Tuple[str, str]


@dataclass(slots=True)
class PaginationState:
    articles: List[Article] = field(default_factory=list)
    page: int = 1
    has_more: bool = True
    last_updated: float = 0.0
    loading: bool = False
    error: Optional[str] = None
    seen: Set[DedupKey] = field(default_factory=set)


def merge_batch(known: Set[DedupKey], batch: Iterable[Article]) -> List[Article]:
    """Return the articles of ``batch`` whose dedup key is not in ``known``.

    Duplicates inside ``batch`` itself are dropped as well; order is kept and
    ``known`` is not modified.
    """
    seen = set(known)
    fresh: List[Article] = []
    for article in batch:
        if article.dedup_key in seen:
            continue
        seen.add(article.dedup_key)
        fresh.append(article)
    return fresh


class FeedCache:
    """In-memory per-source pagination state fed by :class:`FeedFetcher`.

    Pages of one source load strictly one after another: a load is ignored
    while the source is already loading. Different sources load concurrently.
    """

    def __init__(
        self,
        fetcher: FeedFetcher,
        *,
        stale_after: float = 300.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.fetcher = fetcher
        self.stale_after = stale_after
        self._clock = clock
        self._states: Dict[str, PaginationState] = {}

    def state(self, source_id: str) -> PaginationState:
        return self._states.setdefault(source_id, PaginationState())

    def is_fresh(self, source_id: str) -> bool:
        st = self._states.get(source_id)
        if st is None or not st.articles:
            return False
        return self._clock() - st.last_updated < self.stale_after

    async def load(self, source: Source, *, force_refresh: bool = False, page: int = 1) -> PaginationState:
        st = self.state(source.id)
        if page == 1 and not force_refresh and self.is_fresh(source.id):
            logger.debug("Reusing cached page 1 of %s", source.id)
            return st
        if st.loading:
            logger.debug("Load of %s already in flight; ignoring page %d request", source.id, page)
            return st

        st.loading = True
        st.error = None
        try:
            batch = await self.fetcher.fetch_page(source, page)
        except Exception as exc:  # noqa: BLE001 - surfaced through state.error
            st.loading = False
            if page > 1:
                st.has_more = False
            else:
                logger.error("Failed to load %s: %s", source.id, exc)
                st.error = str(exc) or "Failed to load feed"
            return st

        if page == 1:
            st.articles = []
            st.seen = set()
        fresh = merge_batch(st.seen, batch)
        st.articles.extend(fresh)
        st.seen.update(a.dedup_key for a in fresh)
        # nothing new (empty page or a mirror of earlier pages) ends pagination
        st.has_more = bool(fresh) and bool(batch)
        st.page = page
        st.last_updated = self._clock()
        st.loading = False
        logger.info(
            "Loaded page %d of %s: fetched=%d new=%d total=%d has_more=%s",
            page, source.id, len(batch), len(fresh), len(st.articles), st.has_more,
        )
        return st

    async def load_more(self, source: Source) -> PaginationState:
        st = self.state(source.id)
        if st.loading or not st.has_more:
            return st
        if not st.articles and st.last_updated == 0:
            return await self.load(source)
        return await self.load(source, page=st.page + 1)

    async def refresh_all(self, sources: Iterable[Source], *, force_refresh: bool = False) -> Dict[str, PaginationState]:
        src_list = list(sources)
        states = await asyncio.gather(*(self.load(s, force_refresh=force_refresh) for s in src_list))
        return {s.id: st for s, st in zip(src_list, states)}
