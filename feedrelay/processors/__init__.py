"""Content processing: HTML normalization and full-article extraction."""

from .normalize import absolutize_url, html_to_text, make_snippet, normalize_html
from .extract import ArticleExtractor, inject_base_tag, strip_boilerplate

__all__ = [
    "absolutize_url",
    "html_to_text",
    "make_snippet",
    "normalize_html",
    "ArticleExtractor",
    "inject_base_tag",
    "strip_boilerplate",
]
