"""Sequential, paced batch pricing over a list of sources."""

import logging
import threading
import time
from collections.abc import Callable, Iterable, Mapping

from bullion_fetcher.cache import PriceCache
from bullion_fetcher.config import DEFAULT_DELAY_MS
from bullion_fetcher.extractor import extract_price
from bullion_fetcher.fetchers.relay import RelayFetcher
from bullion_fetcher.models import (
    FETCH_FAILED,
    UNAVAILABLE,
    CacheEntry,
    FetchResult,
    PriceLookup,
    Source,
)
from bullion_fetcher.sources import DEFAULT_SOURCES

logger = logging.getLogger(__name__)


class BatchOrchestrator:
    """
    Price sources one at a time, serving fresh cache entries without touching
    the network and pausing between real fetches.

    Everything it reads or writes is injected: the cache (and through it the
    store), the fetcher, the extractor and the sleep function.
    """

    def __init__(
        self,
        cache: PriceCache,
        fetcher: RelayFetcher | None = None,
        extractor: Callable[[str], str | None] = extract_price,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.cache = cache
        self.fetcher = fetcher if fetcher is not None else RelayFetcher()
        self.extractor = extractor
        self._sleep = sleep
        self.last_results: dict[str, FetchResult] = {}

    def fetch_price(self, url: str, cancel: threading.Event | None = None) -> PriceLookup:
        """Fetch one page and extract its price. Never raises for fetch failures."""
        html = self.fetcher.fetch(url, cancel=cancel)
        if not html:
            return PriceLookup(url=url, price=None, error=FETCH_FAILED)
        return PriceLookup(url=url, price=self.extractor(html) or None)

    def _pause(self, seconds: float, cancel: threading.Event | None) -> bool:
        """Wait between fetches. Returns False if cancelled while waiting."""
        if cancel is not None:
            return not cancel.wait(seconds)
        self._sleep(seconds)
        return True

    def fetch_all(
        self,
        sources: Iterable[Source | str | Mapping] = DEFAULT_SOURCES,
        delay_ms: int = DEFAULT_DELAY_MS,
        cancel: threading.Event | None = None,
    ) -> list[FetchResult]:
        """
        Price every source in order and return one FetchResult per source.

        Fresh cache hits are returned with ``cached=True`` and cost neither a
        request nor a delay. Misses are fetched, stored with the current
        timestamp (``"Unavailable"`` when no price was found) and followed by
        a ``delay_ms`` pause unless they were the last source. The cache is
        written once, when the batch ends or is cancelled.
        """
        items = [Source.coerce(s) for s in sources]
        entries = self.cache.load()
        results: list[FetchResult] = []

        for i, source in enumerate(items):
            if cancel is not None and cancel.is_set():
                logger.info("Batch cancelled before %s", source.name)
                break

            cached = entries.get(source.url)
            if self.cache.is_fresh(cached):
                results.append(FetchResult(source.name, source.url, cached.price, cached=True))
                logger.debug("%s: cache hit (%s)", source.name, cached.price)
                continue

            lookup = self.fetch_price(source.url, cancel=cancel)
            if cancel is not None and cancel.is_set():
                logger.info("Batch cancelled while fetching %s", source.name)
                break

            price = lookup.price or UNAVAILABLE
            results.append(FetchResult(source.name, source.url, price, cached=False, error=lookup.error))
            entries[source.url] = CacheEntry(price=price, t=self.cache.now_ms())
            logger.info("%s: %s", source.name, price)

            if i < len(items) - 1 and delay_ms > 0:
                if not self._pause(delay_ms / 1000, cancel):
                    logger.info("Batch cancelled during pause after %s", source.name)
                    break

        self.cache.save(entries)
        self.last_results = {r.name: r for r in results}
        return results
