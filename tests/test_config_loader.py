"""Tests for YAML configuration loading."""

from pathlib import Path

import pytest

from feedrelay.fetchers.relay import DEFAULT_RELAYS
from feedrelay.pagination import ApiStrategy, ScrapeStrategy
from feedrelay.utils.config_loader import ConfigError, load_config, load_sources_config

REPO_CONFIG = Path(__file__).resolve().parent.parent / "config" / "sources.yaml"


def _write(tmp_path, text: str) -> Path:
    path = tmp_path / "sources.yaml"
    path.write_text(text, encoding="utf-8")
    return path


class TestLoadConfig:
    def test_repository_config_is_valid(self):
        config = load_config(REPO_CONFIG)

        assert {s.id for s in config.sources} >= {"hackernews", "sspai", "verge"}
        assert config.source("verge").cache_bust is False
        assert isinstance(config.strategies["hackernews"], ScrapeStrategy)
        assert isinstance(config.strategies["sspai"], ApiStrategy)
        assert config.relays[0].startswith("https://corsproxy.io/")

    def test_minimal_source(self, tmp_path):
        path = _write(tmp_path, "sources:\n  - id: blog\n    name: Blog\n    url: https://blog.test/feed\n")

        config = load_config(path)

        source = config.sources[0]
        assert source.type == "rss"
        assert source.cache_bust is True
        assert config.relays == DEFAULT_RELAYS
        assert config.strategies == {}
        assert load_sources_config(path) == [source]

    def test_scrape_pagination(self, tmp_path):
        path = _write(
            tmp_path,
            """
sources:
  - id: blog
    name: Blog
    url: https://blog.test/
    type: scrape
    pagination:
      mode: scrape
      url_template: "https://blog.test/page/{page}"
      selector: "h2.title a"
""",
        )

        strategy = load_config(path).strategies["blog"]

        assert strategy.selector == "h2.title a"
        assert strategy.url_for(4) == "https://blog.test/page/4"


class TestValidation:
    @pytest.mark.parametrize(
        "body",
        [
            "sources:\n  - name: Blog\n    url: https://blog.test/feed\n",
            "sources:\n  - id: b\n    name: Blog\n    url: ftp://blog.test/feed\n",
            "sources:\n  - id: b\n    name: Blog\n    url: https://blog.test/feed\n    type: gopher\n",
            "sources:\n  - id: b\n    name: Blog\n    url: https://blog.test/feed\n    cache_bust: maybe\n",
            "sources:\n  - id: b\n    name: B\n    url: https://b.test/\n    pagination:\n      mode: api\n      url_template: x\n",
            "sources:\n  - id: b\n    name: B\n    url: https://b.test/\n    pagination:\n      mode: api\n      url_template: x\n      mapper: unknown\n",
            "relays:\n  - https://relay.test/no-placeholder\nsources: []\n",
            "sources: {}\n",
            "sources:\n  - id: b\n    name: B\n    url: https://b.test/\n  - id: b\n    name: B2\n    url: https://b2.test/\n",
        ],
    )
    def test_invalid_configs(self, tmp_path, body):
        with pytest.raises(ConfigError):
            load_config(_write(tmp_path, body))

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(tmp_path / "absent.yaml")

    def test_unknown_source_lookup(self, tmp_path):
        config = load_config(_write(tmp_path, "sources: []\n"))

        with pytest.raises(ConfigError):
            config.source("nope")
