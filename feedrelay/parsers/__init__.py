"""Format parsers: syndication XML, JSON APIs and HTML listing pages."""

from .api import MAPPERS, JsonFieldMapper, get_mapper, parse_api_payload, register_mapper
from .listing import GENERIC_LISTING_SELECTORS, PLACEHOLDER_SNIPPET, scrape_listing
from .selectors import first_match, first_result
from .syndication import parse_feed

__all__ = [
    "MAPPERS",
    "JsonFieldMapper",
    "get_mapper",
    "parse_api_payload",
    "register_mapper",
    "GENERIC_LISTING_SELECTORS",
    "PLACEHOLDER_SNIPPET",
    "scrape_listing",
    "first_match",
    "first_result",
    "parse_feed",
]
