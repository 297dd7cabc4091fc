"""Typed models used across the application."""

from .source import Source, SourceType
from .article import Article

__all__ = ["Source", "SourceType", "Article"]
