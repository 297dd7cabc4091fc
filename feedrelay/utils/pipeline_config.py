from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Callable, Optional, TypeVar

T = TypeVar("T")


def _optional_float(raw: str) -> Optional[float]:
    # "", "none" or "off" disable the threshold entirely
    if raw.strip().lower() in {"", "none", "off"}:
        return None
    return float(raw)


def _env(name: str, default: str, cast: Callable[[str], T]) -> T:
    # read when the config is built so a .env loaded by main() applies
    return field(default_factory=lambda: cast(os.getenv(name, default)))


@dataclass(slots=True)
class PipelineConfig:
    relay_timeout: float = _env("RELAY_TIMEOUT_SECONDS", "10", float)
    stale_after_seconds: float = _env("FEED_STALE_SECONDS", "300", float)
    min_paragraphs: int = _env("EXTRACT_MIN_PARAGRAPHS", "3", int)
    min_link_ratio: Optional[float] = _env("EXTRACT_MIN_LINK_RATIO", "0.3", _optional_float)
    full_text_threshold: int = _env("FULL_TEXT_THRESHOLD", "1000", int)
    no_cache_bust_domains_csv: str = _env("NO_CACHE_BUST_DOMAINS", "theverge.com", str)

    @property
    def no_cache_bust_domains(self) -> list[str]:
        return [d.strip().lower() for d in self.no_cache_bust_domains_csv.split(",") if d.strip()]
