from __future__ import annotations

import asyncio
import threading
import time
from typing import Dict, Iterable, List, Optional, Sequence
from urllib.parse import quote, urlparse

import requests

from ..utils.logging import get_logger

logger = get_logger("feedrelay.fetchers.relay")


# Order matters: the first template is the preferred relay.
# ``{url}`` receives the URL-encoded target, ``{raw_url}`` the target as-is.
DEFAULT_RELAYS: List[str] = [
    "https://corsproxy.io/?{url}",
    "https://api.allorigins.win/raw?url={url}",
    "https://api.codetabs.com/v1/proxy?quest={url}",
    "https://thingproxy.freeboard.io/fetch/{raw_url}",
]

_DEFAULT_HEADERS: Dict[str, str] = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/127.0.0.0 Safari/537.36"
    )
}


def build_relay_url(template: str, target_url: str) -> str:
    return template.format(url=quote(target_url, safe=""), raw_url=target_url)


def add_cache_buster(url: str, *, now_ms: Optional[int] = None) -> str:
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}_cb={stamp}"


def _host_matches(host: str, domains: Iterable[str]) -> bool:
    host = host.lower()
    return any(host == d or host.endswith("." + d) for d in domains)


class RelayClient:
    """Fetch external URLs through an ordered list of relay endpoints.

    A 404 from a relay is taken as authoritative and ends the attempt. Any
    other non-success status or network error moves on to the next relay.
    The client never raises: exhaustion yields ``None``.

    Each worker thread gets its own ``requests.Session``; a session passed
    in explicitly is shared and must tolerate concurrent use.
    """

    def __init__(
        self,
        relays: Sequence[str] | None = None,
        *,
        timeout: float = 10.0,
        no_cache_bust_domains: Iterable[str] = (),
        session: Optional[requests.Session] = None,
    ) -> None:
        self.relays = list(relays) if relays else list(DEFAULT_RELAYS)
        self.timeout = timeout
        self.no_cache_bust_domains = {d.strip().lower() for d in no_cache_bust_domains if d.strip()}
        self._shared_session = session
        self._local = threading.local()

    @property
    def session(self) -> requests.Session:
        if self._shared_session is not None:
            return self._shared_session
        session = getattr(self._local, "session", None)
        if session is None:
            session = self._local.session = requests.Session()
        return session

    def should_cache_bust(self, target_url: str) -> bool:
        host = urlparse(target_url).hostname or ""
        return not _host_matches(host, self.no_cache_bust_domains)

    def fetch_text_sync(self, target_url: str, *, cache_bust: Optional[bool] = None) -> Optional[str]:
        if cache_bust is None:
            cache_bust = self.should_cache_bust(target_url)
        url_to_fetch = add_cache_buster(target_url) if cache_bust else target_url

        for template in self.relays:
            relay_url = build_relay_url(template, url_to_fetch)
            try:
                resp = self.session.get(relay_url, headers=_DEFAULT_HEADERS, timeout=self.timeout)
            except requests.RequestException as exc:
                logger.warning("Relay network error via %s: %s; trying next", template, exc)
                continue

            if resp.status_code == 404:
                logger.warning("Relay reported 404 for %s; not trying other relays", target_url)
                return None
            if not 200 <= resp.status_code < 300:
                logger.warning("Relay failed with %s via %s; trying next", resp.status_code, template)
                continue

            logger.debug("Fetched %s via %s (%d chars)", target_url, template, len(resp.text or ""))
            return resp.text

        logger.error("All relays failed for %s", target_url)
        return None

    async def fetch_text(self, target_url: str, *, cache_bust: Optional[bool] = None) -> Optional[str]:
        """Non-blocking variant; the request runs in a worker thread."""
        return await asyncio.to_thread(self.fetch_text_sync, target_url, cache_bust=cache_bust)
