from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

SourceType = Literal["rss", "api", "scrape"]


@dataclass(slots=True, frozen=True)
class Source:
    """Static configuration for a content source.

    ``type`` selects the parser used for the canonical URL (page 1).
    ``cache_bust`` is disabled for origins that reject unknown query parameters.
    """

    id: str
    name: str
    url: str
    type: SourceType = "rss"
    category: str = "tech"
    cache_bust: bool = True
