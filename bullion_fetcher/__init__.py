"""Fetch and cache bullion prices from vendor product pages."""

from bullion_fetcher.cache import PriceCache
from bullion_fetcher.extractor import PRICE_SELECTORS, extract_price
from bullion_fetcher.fetchers.relay import RelayFetcher
from bullion_fetcher.models import UNAVAILABLE, FetchResult, PriceLookup, SaveOutcome, Source
from bullion_fetcher.orchestrator import BatchOrchestrator
from bullion_fetcher.storage import MemoryStore, SqliteStore

__all__ = [
    "BatchOrchestrator",
    "FetchResult",
    "MemoryStore",
    "PRICE_SELECTORS",
    "PriceCache",
    "PriceLookup",
    "RelayFetcher",
    "SaveOutcome",
    "Source",
    "SqliteStore",
    "UNAVAILABLE",
    "extract_price",
]
