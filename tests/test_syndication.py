"""Tests for the RSS/Atom parser."""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from feedrelay.errors import FeedParseError
from feedrelay.parsers.syndication import parse_feed
from tests.fakes import rss_document

RSS_WITH_EXTENSIONS = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0"
     xmlns:content="http://purl.org/rss/1.0/modules/content/"
     xmlns:dc="http://purl.org/dc/elements/1.1/">
  <channel>
    <title>Ext</title>
    <item>
      <title>Full text item</title>
      <link>https://site.example.com/p/1</link>
      <dc:creator>Ada Lovelace</dc:creator>
      <description>Short teaser</description>
      <content:encoded><![CDATA[<p>Full body</p><img data-original="/media/1.png">]]></content:encoded>
    </item>
    <item>
      <description>No title, no link, no date</description>
    </item>
  </channel>
</rss>"""

ATOM = """<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Atom Example</title>
  <entry>
    <title>Atom entry</title>
    <link rel="alternate" href="https://blog.example.org/atom-entry"/>
    <id>urn:uuid:1225c695-cfb8-4ebb-aaaa-80da344efa6a</id>
    <updated>2023-03-01T10:00:00Z</updated>
    <author><name>Grace Hopper</name></author>
    <summary>Atom summary text</summary>
  </entry>
</feed>"""


class TestRss:
    def test_parses_all_items(self, rss_source):
        articles = parse_feed(rss_document(10), rss_source)

        assert len(articles) == 10
        first = articles[0]
        assert first.title == "Story number 0"
        assert first.link == "https://news.example.com/item/0"
        assert first.guid == "item-0"
        assert first.source_id == "example"
        assert first.published == datetime(2021, 9, 6, 16, 45, tzinfo=timezone.utc)
        assert first.snippet == "Summary of story 0"

    def test_encoded_content_preferred_and_normalized(self, rss_source):
        article = parse_feed(RSS_WITH_EXTENSIONS, rss_source)[0]

        assert "Full body" in article.content
        assert "Short teaser" not in article.content
        assert 'src="https://site.example.com/media/1.png"' in article.content
        assert article.author == "Ada Lovelace"
        assert article.snippet == "Full body"

    def test_missing_fields_get_defaults(self, rss_source):
        article = parse_feed(RSS_WITH_EXTENSIONS, rss_source)[1]

        assert article.title == "Untitled"
        assert article.link == ""
        assert article.author == ""
        assert article.content == "No title, no link, no date"
        assert datetime.now(timezone.utc) - article.published < timedelta(minutes=1)

    def test_empty_channel_is_not_an_error(self, rss_source):
        assert parse_feed(rss_document(0), rss_source) == []


class TestAtom:
    def test_atom_entry_fields(self, rss_source):
        article = parse_feed(ATOM, rss_source)[0]

        assert article.link == "https://blog.example.org/atom-entry"
        assert article.guid == "urn:uuid:1225c695-cfb8-4ebb-aaaa-80da344efa6a"
        assert article.author == "Grace Hopper"
        assert article.content == "Atom summary text"
        assert article.published == datetime(2023, 3, 1, 10, 0, tzinfo=timezone.utc)


class TestFailures:
    def test_html_page_is_a_parse_error(self, rss_source):
        with pytest.raises(FeedParseError):
            parse_feed("<html><body><h2><a href='/x'>Hello there</a></h2></body></html>", rss_source)

    def test_garbage_is_a_parse_error(self, rss_source):
        with pytest.raises(FeedParseError):
            parse_feed("this is { not xml", rss_source)

    def test_bad_item_does_not_drop_batch(self, rss_source):
        with patch(
            "feedrelay.parsers.syndication.normalize_html",
            side_effect=[RuntimeError("bad item"), "<p>ok</p>", "<p>ok</p>"],
        ):
            articles = parse_feed(rss_document(3), rss_source)

        assert [a.guid for a in articles] == ["item-1", "item-2"]
