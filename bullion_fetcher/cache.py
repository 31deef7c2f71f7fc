"""Persisted price cache with a freshness window and an expiry horizon."""

import json
import logging
import time
from collections.abc import Callable

from bullion_fetcher.config import (
    DEFAULT_CACHE_KEY,
    DEFAULT_EXPIRY_SECONDS,
    DEFAULT_FRESH_SECONDS,
)
from bullion_fetcher.models import CacheEntry, SaveOutcome
from bullion_fetcher.storage import KeyValueStore

logger = logging.getLogger(__name__)


class PriceCache:
    """
    URL -> CacheEntry mapping stored as one JSON document under a single key.

    Reads prune entries older than the expiry horizon and write the pruned
    mapping back straight away. Entries younger than the freshness window are
    good enough to skip a refetch; between the two horizons an entry is kept
    but due for refresh.
    """

    def __init__(
        self,
        store: KeyValueStore | None,
        key: str = DEFAULT_CACHE_KEY,
        fresh_seconds: float = DEFAULT_FRESH_SECONDS,
        expiry_seconds: float = DEFAULT_EXPIRY_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        if fresh_seconds > expiry_seconds:
            raise ValueError(
                f"freshness window ({fresh_seconds}s) exceeds expiry horizon ({expiry_seconds}s)"
            )
        self.store = store
        self.key = key
        self.fresh_ms = int(fresh_seconds * 1000)
        self.expiry_ms = int(expiry_seconds * 1000)
        self._clock = clock

    def now_ms(self) -> int:
        """Current time in epoch milliseconds."""
        return int(self._clock() * 1000)

    def _read(self) -> dict:
        """Raw stored mapping, or {} when missing or unreadable."""
        if self.store is None:
            return {}
        try:
            raw = self.store.get(self.key)
        except Exception as e:
            logger.warning("Cache read failed, starting empty: %s", e)
            return {}
        if not raw:
            return {}
        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.warning("Cache payload is not valid JSON, starting empty: %s", e)
            return {}
        return data if isinstance(data, dict) else {}

    def load(self) -> dict[str, CacheEntry]:
        """Return the stored entries minus anything past the expiry horizon."""
        now = self.now_ms()
        entries: dict[str, CacheEntry] = {}
        dirty = False
        for url, item in self._read().items():
            try:
                entry = CacheEntry.from_dict(item)
            except (AttributeError, KeyError, OverflowError, TypeError, ValueError):
                dirty = True
                continue
            if entry.age_ms(now) > self.expiry_ms:
                dirty = True
                continue
            entries[url] = entry

        if dirty:
            logger.debug("Pruned cache down to %d entries", len(entries))
            self.save(entries)
        return entries

    def save(self, entries: dict[str, CacheEntry]) -> SaveOutcome:
        """Persist the whole mapping. Failures are logged, never raised."""
        if self.store is None:
            return SaveOutcome.SKIPPED
        payload = json.dumps(
            {url: entry.to_dict() for url, entry in entries.items()},
            separators=(",", ":"),
        )
        try:
            self.store.set(self.key, payload)
        except Exception as e:
            logger.warning("Cache write failed (ignored): %s", e)
            return SaveOutcome.FAILED
        return SaveOutcome.PERSISTED

    def is_fresh(self, entry: CacheEntry | None, now_ms: int | None = None) -> bool:
        """Check if an entry is young enough to skip a refetch."""
        if entry is None:
            return False
        if now_ms is None:
            now_ms = self.now_ms()
        return entry.age_ms(now_ms) < self.fresh_ms
