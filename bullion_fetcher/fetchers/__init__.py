"""Ways of retrieving vendor pages."""

from bullion_fetcher.fetchers.relay import DirectFetch, RelayEndpoint, RelayFetcher

__all__ = ["RelayFetcher", "RelayEndpoint", "DirectFetch"]
