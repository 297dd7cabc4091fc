"""Tests for pagination strategies."""

import pytest

from feedrelay.pagination import (
    ApiStrategy,
    ScrapeStrategy,
    StrategyTable,
    SyndicationStrategy,
    build_strategy,
    generic_page_url,
)


class TestUrlGeneration:
    def test_page_placeholder(self):
        strategy = ScrapeStrategy(url_template="https://news.ycombinator.com/news?p={page}", selector=".titleline > a")

        assert strategy.url_for(3) == "https://news.ycombinator.com/news?p=3"

    def test_offset_placeholder(self):
        strategy = build_strategy("api", "https://sspai.com/api?limit=20&offset={offset}", page_size=20, mapper="sspai")

        assert isinstance(strategy, ApiStrategy)
        assert strategy.url_for(1) == "https://sspai.com/api?limit=20&offset=0"
        assert strategy.url_for(3) == "https://sspai.com/api?limit=20&offset=40"

    def test_feed_url_placeholder(self):
        strategy = SyndicationStrategy(url_template="{feed_url}?paged={page}")

        assert strategy.url_for(2, "https://blog.test/feed") == "https://blog.test/feed?paged=2"

    def test_generic_query_parameters(self):
        assert generic_page_url("https://a.test/feed", 2) == "https://a.test/feed?page=2&p=2"
        assert generic_page_url("https://a.test/feed?x=1", 4) == "https://a.test/feed?x=1&page=4&p=4"


class TestStrategyTable:
    def test_defaults_include_known_sites(self):
        table = StrategyTable()

        assert isinstance(table.get("hackernews"), ScrapeStrategy)
        assert isinstance(table.get("sspai"), ApiStrategy)
        assert table.get("unknown") is None

    def test_register_overrides(self):
        table = StrategyTable({})
        table.register("blog", build_strategy("rss", "https://blog.test/feed/page/{page}"))

        assert "blog" in table
        assert table.get("blog").mode == "rss"

    def test_invalid_modes(self):
        with pytest.raises(ValueError):
            build_strategy("ftp", "https://a.test/{page}")
        with pytest.raises(ValueError):
            build_strategy("api", "https://a.test/{page}")
