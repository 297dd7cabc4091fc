"""Network layer: relayed HTTP fetching."""

from .relay import DEFAULT_RELAYS, RelayClient, add_cache_buster, build_relay_url

__all__ = ["DEFAULT_RELAYS", "RelayClient", "add_cache_buster", "build_relay_url"]
