from __future__ import annotations

import re
from typing import Optional
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

from ..utils.logging import get_logger

_whitespace_re = re.compile(r"\s+")

# Checked in this order; the first attribute present wins.
LAZY_IMAGE_ATTRS = ("data-original", "data-src", "data-url", "lazy-src")

SNIPPET_LENGTH = 150
ELLIPSIS = "..."

_logger = get_logger("feedrelay.processors.normalize")


def origin_of(url: str) -> Optional[str]:
    parsed = urlparse(url or "")
    if not parsed.scheme or not parsed.netloc:
        return None
    return f"{parsed.scheme}://{parsed.netloc}"


def is_absolute(url: str) -> bool:
    return bool(urlparse(url).scheme)


def absolutize_url(url: str, base_url: str) -> str:
    """Resolve ``url`` against the origin of ``base_url``.

    Absolute URLs (any scheme, including ``data:``) come back unchanged, as
    does everything when the base has no usable origin.
    """
    if not url or is_absolute(url):
        return url
    origin = origin_of(base_url)
    if origin is None:
        return url
    return urljoin(origin + "/", url)


def _fix_image(img, base_url: str) -> None:
    lazy_src = next((img.get(attr) for attr in LAZY_IMAGE_ATTRS if img.get(attr)), None)
    if lazy_src:
        img["src"] = absolutize_url(lazy_src.strip(), base_url)
        # a stale srcset would make the renderer re-derive the broken relative path
        if img.has_attr("srcset"):
            del img["srcset"]
        return
    src = img.get("src")
    if src:
        fixed = absolutize_url(src, base_url)
        if fixed != src:
            img["src"] = fixed


def _fix_anchor(anchor, base_url: str) -> None:
    href = anchor.get("href")
    if href and not href.startswith("#"):
        fixed = absolutize_url(href, base_url)
        if fixed != href:
            anchor["href"] = fixed
    anchor["target"] = "_blank"
    anchor["rel"] = "noopener noreferrer"


def normalize_html(raw_html: str | None, base_url: str) -> str:
    """Fix lazy-loaded images and relative links in an HTML fragment.

    - ``img``: the first lazy attribute found becomes an absolute ``src`` and
      ``srcset`` is dropped; otherwise a relative ``src`` is absolutized
    - ``a``: relative non-fragment ``href`` absolutized, opened in a new
      browsing context without opener or referrer
    - nothing is stripped

    Never raises; on failure the input is returned untouched.
    """
    if not raw_html:
        return ""
    try:
        soup = BeautifulSoup(raw_html, "html.parser")
        for img in soup.find_all("img"):
            _fix_image(img, base_url)
        for anchor in soup.find_all("a"):
            _fix_anchor(anchor, base_url)
        return str(soup)
    except Exception as exc:  # noqa: BLE001 - malformed markup must not break a batch
        _logger.warning("Failed to normalize HTML from %s: %s", base_url, exc)
        return raw_html


def html_to_text(raw_html: str | None) -> str:
    """Strip markup and collapse whitespace."""
    if not raw_html:
        return ""
    soup = BeautifulSoup(raw_html, "html.parser")
    text = soup.get_text(" ")
    return _whitespace_re.sub(" ", text).strip()


def make_snippet(raw_html: str | None, limit: int = SNIPPET_LENGTH) -> str:
    text = html_to_text(raw_html)
    if len(text) > limit:
        return text[:limit] + ELLIPSIS
    return text
