from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Tuple


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class Article:
    guid: str
    title: str
    link: str
    source_id: str
    content: str = ""
    snippet: str = ""
    author: str = ""
    # Fetch time when the source omits a date; not a reliable ordering signal.
    published: datetime = field(default_factory=_now)

    @property
    def dedup_key(self) -> Tuple[str, str]:
        return self.source_id, self.guid or self.link

    def to_dict(self) -> dict:
        return {
            "guid": self.guid,
            "title": self.title,
            "link": self.link,
            "source_id": self.source_id,
            "published": self.published.isoformat(),
            "author": self.author,
            "snippet": self.snippet,
            "content": self.content,
        }
