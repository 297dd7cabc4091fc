from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List
from urllib.parse import urlparse

import yaml

from ..fetchers.relay import DEFAULT_RELAYS
from ..models import Source
from ..pagination import PaginationStrategy, build_strategy


class ConfigError(Exception):
    """Raised when the configuration file is invalid or missing required fields."""


REQUIRED_FIELDS = {"id", "name", "url"}
SOURCE_TYPES = {"rss", "api", "scrape"}
PAGINATION_MODES = {"rss", "scrape", "api"}


@dataclass(slots=True)
class FeedConfig:
    sources: List[Source] = field(default_factory=list)
    relays: List[str] = field(default_factory=lambda: list(DEFAULT_RELAYS))
    strategies: Dict[str, PaginationStrategy] = field(default_factory=dict)

    def source(self, source_id: str) -> Source:
        for src in self.sources:
            if src.id == source_id:
                return src
        raise ConfigError(f"Unknown source '{source_id}'. Known: {[s.id for s in self.sources]}")


def _check_url(value: str, what: str) -> str:
    url_str = str(value).strip()
    parsed = urlparse(url_str)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigError(f"Invalid {what} '{url_str}'. Must be absolute http(s) URL.")
    return url_str


def _validate_pagination(source_id: str, entry: dict) -> None:
    if not isinstance(entry, dict):
        raise ConfigError(f"'pagination' of {source_id} must be a mapping")
    mode = entry.get("mode")
    if mode not in PAGINATION_MODES:
        raise ConfigError(f"Invalid pagination mode '{mode}' for {source_id}. Must be one of {sorted(PAGINATION_MODES)}.")
    if not entry.get("url_template"):
        raise ConfigError(f"Pagination of {source_id} requires 'url_template'")
    if mode == "api" and not entry.get("mapper"):
        raise ConfigError(f"API pagination of {source_id} requires 'mapper'")
    page_size = entry.get("page_size", 20)
    if not isinstance(page_size, int) or page_size < 1:
        raise ConfigError(f"'page_size' of {source_id} must be a positive integer")


def _validate_source_dict(entry: dict) -> None:
    """Validate a single source mapping from YAML.

    Required fields: id, name, url (http/https).
    Optional fields:
      - type: 'rss' (default) | 'api' | 'scrape'
      - category: str
      - cache_bust: bool
      - pagination: {mode, url_template, page_size?, selector?, mapper?}
    """
    missing = REQUIRED_FIELDS - set(entry)
    if missing:
        raise ConfigError(f"Missing required fields: {sorted(missing)} in {entry}")

    source_type = entry.get("type", "rss")
    if source_type not in SOURCE_TYPES:
        raise ConfigError(f"Invalid type '{source_type}'. Must be one of {sorted(SOURCE_TYPES)}.")

    _check_url(entry["url"], "URL")

    if "cache_bust" in entry and not isinstance(entry["cache_bust"], bool):
        raise ConfigError("'cache_bust' must be a boolean if provided")

    if entry.get("pagination") is not None:
        _validate_pagination(str(entry["id"]), entry["pagination"])


def _coerce_source(entry: dict) -> Source:
    return Source(
        id=str(entry["id"]).strip(),
        name=str(entry["name"]).strip(),
        url=str(entry["url"]).strip(),
        type=str(entry.get("type", "rss")).strip(),
        category=str(entry.get("category") or "tech").strip(),
        cache_bust=entry.get("cache_bust", True),
    )


def _coerce_strategy(source_id: str, entry: dict) -> PaginationStrategy:
    try:
        return build_strategy(
            entry["mode"],
            str(entry["url_template"]),
            page_size=entry.get("page_size", 20),
            selector=entry.get("selector"),
            mapper=entry.get("mapper"),
        )
    except (KeyError, ValueError) as exc:
        raise ConfigError(f"Invalid pagination for {source_id}: {exc}") from exc


def _coerce_relays(raw) -> List[str]:
    if raw is None:
        return list(DEFAULT_RELAYS)
    if not isinstance(raw, list) or not raw:
        raise ConfigError("'relays' must be a non-empty list of URL templates")
    relays: List[str] = []
    for template in raw:
        template = str(template).strip()
        if "{url}" not in template and "{raw_url}" not in template:
            raise ConfigError(f"Relay template '{template}' needs a {{url}} or {{raw_url}} placeholder")
        relays.append(template)
    return relays


def load_config(path: Path | str) -> FeedConfig:
    """Load ``sources.yaml`` into a :class:`FeedConfig`.

    YAML structure:
      - ``relays``: ordered list of relay URL templates (optional)
      - ``sources``: list of source mappings, see ``_validate_source_dict``

    Unknown top-level keys are ignored for forward compatibility.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    with config_path.open("r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError("Top-level YAML must be a mapping")

    sources_raw: Iterable[dict] = data.get("sources")
    if sources_raw is None:
        sources_raw = []
    if not isinstance(sources_raw, list):
        raise ConfigError("'sources' must be a list in the YAML configuration")

    config = FeedConfig(relays=_coerce_relays(data.get("relays")))
    seen_ids = set()
    for item in sources_raw:
        if not isinstance(item, dict):
            raise ConfigError(f"Each source must be a mapping, got: {type(item)}")
        _validate_source_dict(item)
        source = _coerce_source(item)
        if source.id in seen_ids:
            raise ConfigError(f"Duplicate source id '{source.id}'")
        seen_ids.add(source.id)
        config.sources.append(source)
        if item.get("pagination") is not None:
            config.strategies[source.id] = _coerce_strategy(source.id, item["pagination"])
    return config


def load_sources_config(path: Path | str) -> List[Source]:
    return load_config(path).sources
