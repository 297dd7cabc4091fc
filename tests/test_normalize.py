"""Tests for HTML normalization and snippet helpers."""

from unittest.mock import patch

from feedrelay.processors.normalize import absolutize_url, html_to_text, make_snippet, normalize_html

BASE = "https://example.com/posts/2024/hello"


class TestImages:
    def test_lazy_attribute_becomes_absolute_src(self):
        out = normalize_html('<img src="spacer.gif" data-src="/img/a.png" srcset="/img/a@2x.png 2x">', BASE)

        assert 'src="https://example.com/img/a.png"' in out
        assert "srcset" not in out

    def test_lazy_attribute_priority(self):
        out = normalize_html('<img data-src="/second.png" data-original="/first.png">', BASE)

        assert 'src="https://example.com/first.png"' in out

    def test_relative_paths_resolve_against_origin(self):
        out = normalize_html('<img src="pics/a.png">', BASE)

        assert 'src="https://example.com/pics/a.png"' in out

    def test_plain_src_keeps_srcset(self):
        out = normalize_html('<img src="/a.png" srcset="/a.png 1x">', BASE)

        assert 'src="https://example.com/a.png"' in out
        assert "srcset" in out

    def test_data_uri_untouched(self):
        html = '<img src="data:image/gif;base64,R0lGOD"/>'

        assert 'src="data:image/gif;base64,R0lGOD"' in normalize_html(html, BASE)


class TestAnchors:
    def test_relative_link_absolutized_and_isolated(self):
        out = normalize_html('<a href="/about">About</a>', BASE)

        assert 'href="https://example.com/about"' in out
        assert 'target="_blank"' in out
        assert 'rel="noopener noreferrer"' in out

    def test_fragment_links_left_alone(self):
        out = normalize_html('<a href="#section-2">jump</a>', BASE)

        assert 'href="#section-2"' in out
        assert 'target="_blank"' in out


class TestRobustness:
    def test_empty_input(self):
        assert normalize_html("", BASE) == ""
        assert normalize_html(None, BASE) == ""

    def test_normalizing_normalized_html_is_identity(self):
        html = (
            '<p>Intro <a href="https://example.com/a" target="_blank" rel="noopener noreferrer">link</a></p>'
            '<img src="https://cdn.example.com/x.png"/>'
        )

        assert normalize_html(html, BASE) == html

    def test_idempotent_after_first_pass(self):
        once = normalize_html('<p><img data-original="/a.png"><a href="b">b</a></p>', BASE)

        assert normalize_html(once, BASE) == once

    def test_internal_failure_returns_original(self):
        with patch("feedrelay.processors.normalize.BeautifulSoup", side_effect=RuntimeError("parser down")):
            assert normalize_html("<p>raw</p>", BASE) == "<p>raw</p>"

    def test_missing_base_keeps_relative_urls(self):
        assert absolutize_url("/a.png", "") == "/a.png"
        assert absolutize_url("//cdn.example.com/a.png", BASE) == "https://cdn.example.com/a.png"


class TestSnippet:
    def test_long_text_truncated_with_ellipsis(self):
        snippet = make_snippet("<p>" + "a" * 200 + "</p>")

        assert snippet == "a" * 150 + "..."
        assert len(snippet) == 153

    def test_short_text_untouched(self):
        assert make_snippet("<p>" + "b" * 150 + "</p>") == "b" * 150

    def test_markup_stripped(self):
        assert html_to_text("<p>Hello <b>world</b></p>\n<p>again</p>") == "Hello world again"
