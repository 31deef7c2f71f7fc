"""Data models for bullion price lookups."""

from collections.abc import Mapping
from dataclasses import asdict, dataclass
from enum import Enum

UNAVAILABLE = "Unavailable"
FETCH_FAILED = "Fetch failed"


class SaveOutcome(str, Enum):
    """Result of writing the price cache."""

    PERSISTED = "persisted"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class Source:
    """A named product page to price."""

    name: str
    url: str

    @classmethod
    def coerce(cls, item: "Source | str | Mapping") -> "Source":
        """Accept a Source, a bare URL, or a mapping with url and optional name."""
        if isinstance(item, Source):
            return item
        if isinstance(item, str):
            return cls(name=item, url=item)
        if isinstance(item, Mapping):
            url = item["url"]
            return cls(name=item.get("name") or url, url=url)
        raise TypeError(f"Cannot build a Source from {type(item).__name__}")


@dataclass
class CacheEntry:
    """Cached price for one URL. ``t`` is epoch milliseconds."""

    price: str
    t: int

    def age_ms(self, now_ms: int) -> int:
        """Milliseconds since the entry was written."""
        return now_ms - self.t

    def to_dict(self) -> dict:
        """Persisted shape: {"price": ..., "t": ...}."""
        return {"price": self.price, "t": self.t}

    @classmethod
    def from_dict(cls, data: Mapping) -> "CacheEntry":
        """Build from the persisted shape; raises on a missing or non-numeric t."""
        return cls(price=data.get("price"), t=int(data["t"]))


@dataclass
class PriceLookup:
    """Outcome of pricing a single URL."""

    url: str
    price: str | None = None
    error: str | None = None


@dataclass
class FetchResult:
    """One row of a batch: what was returned for a source and where it came from."""

    name: str
    url: str
    price: str
    cached: bool
    error: str | None = None

    def to_dict(self) -> dict:
        """Plain dict for JSON output."""
        return asdict(self)
