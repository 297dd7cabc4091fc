"""Top-level package for the feedrelay content aggregator.

This package contains the fetch-normalize-paginate-extract pipeline used to
aggregate syndication feeds, JSON APIs and HTML listing pages into a uniform
article model.
"""

__all__ = []
