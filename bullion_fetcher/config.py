"""Environment-driven settings."""

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_CACHE_KEY = "bullion_prices_v1"
DEFAULT_DELAY_MS = 4000
DEFAULT_FRESH_SECONDS = 60 * 60
DEFAULT_EXPIRY_SECONDS = 60 * 60 * 24
DEFAULT_REQUEST_TIMEOUT = 15.0

# Tried in order; each prefix is followed by the percent-encoded target URL
DEFAULT_RELAYS = (
    "https://api.allorigins.win/raw?url=",
    "https://api.allorigins.cf/raw?url=",
    "https://thingproxy.freeboard.io/fetch/",
    "https://cors-anywhere.herokuapp.com/",
    "https://api.codetabs.com/v1/proxy?quest=",
    "https://cors.bridged.cc/",
    "https://corsproxy.io/?",
    "https://yacdn.org/proxy/",
    "https://proxy.cors.sh/",
    "https://cors.eu.org/?u=",
)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


def _env_number(name: str, default, cast=int):
    """Read a numeric env var, falling back to the default when unset or invalid."""
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.warning("Invalid %s=%r, using default %s", name, raw, default)
        return default


def get_db_path() -> Path:
    """Get database path from env or default."""
    return Path(os.environ.get("BULLION_DB_PATH", "data/bullion.db"))


def get_cache_key() -> str:
    """Get the store key the cache document lives under."""
    return os.environ.get("BULLION_CACHE_KEY", DEFAULT_CACHE_KEY)


def get_delay_ms() -> int:
    """Get the pause between uncached fetches, in milliseconds."""
    return _env_number("BULLION_DELAY_MS", DEFAULT_DELAY_MS)


def get_fresh_seconds() -> float:
    """Get how long a cached price skips a refetch."""
    return _env_number("BULLION_FRESH_SECONDS", DEFAULT_FRESH_SECONDS, float)


def get_expiry_seconds() -> float:
    """Get the age at which a cached price is discarded."""
    return _env_number("BULLION_EXPIRY_SECONDS", DEFAULT_EXPIRY_SECONDS, float)


def get_request_timeout() -> float:
    """Get the per-relay request timeout, in seconds."""
    return _env_number("BULLION_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT, float)


def get_relays() -> list[str]:
    """Relay prefixes from BULLION_RELAYS (comma-separated) or the built-in list."""
    raw = os.environ.get("BULLION_RELAYS", "")
    relays = [r.strip() for r in raw.split(",") if r.strip()]
    return relays or list(DEFAULT_RELAYS)


def use_direct_fetch() -> bool:
    """Check if the target page should be tried before any relay."""
    val = os.environ.get("BULLION_DIRECT_FETCH", "false").lower()
    return val in ("true", "1", "yes")


def get_results_path() -> Path | None:
    """Get the JSON output path for published results, if any."""
    path = os.environ.get("BULLION_RESULTS_PATH")
    return Path(path) if path else None


def get_refresh_interval_minutes() -> int:
    """Get the scheduler interval; 0 means run once."""
    return _env_number("REFRESH_INTERVAL_MINUTES", 60)


def get_jitter_max_seconds() -> int:
    """Get the upper bound of the random delay before scheduled runs."""
    return _env_number("JITTER_MAX_SECONDS", 60)
