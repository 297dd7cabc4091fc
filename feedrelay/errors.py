from __future__ import annotations


class FeedError(Exception):
    """Base class for source-level failures surfaced to the caller."""


class FeedFetchError(FeedError):
    """Raised when no data could be retrieved for the first page of a source."""


class FeedParseError(FeedError):
    """Raised when a payload cannot be parsed in the format the source declares."""
