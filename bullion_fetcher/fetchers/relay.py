"""Fetch a page through an ordered list of relay endpoints."""

import logging
import threading
from collections.abc import Iterable
from dataclasses import dataclass
from urllib.parse import quote

import requests

from bullion_fetcher.config import (
    DEFAULT_RELAYS,
    DEFAULT_REQUEST_TIMEOUT,
    USER_AGENT,
    get_relays,
    get_request_timeout,
    use_direct_fetch,
)

logger = logging.getLogger(__name__)

# Characters encodeURIComponent leaves alone
_URI_COMPONENT_SAFE = "-_.!~*'()"


def encode_target(url: str) -> str:
    """Percent-encode a URL for use as a query value or path suffix."""
    return quote(url, safe=_URI_COMPONENT_SAFE)


@dataclass
class RelayResponse:
    """Either the body of a successful attempt or why it failed."""

    strategy: str
    content: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.content is not None


class FetchStrategy:
    """One way of getting a page. Subclasses build the request URL."""

    name = "strategy"

    def request_url(self, url: str) -> str:
        raise NotImplementedError

    def attempt(self, session: requests.Session, url: str, timeout: float) -> RelayResponse:
        try:
            resp = session.get(self.request_url(url), timeout=timeout)
        except requests.RequestException as e:
            return RelayResponse(self.name, error=str(e) or type(e).__name__)
        if not 200 <= resp.status_code < 300:
            return RelayResponse(self.name, error=f"status {resp.status_code}")
        return RelayResponse(self.name, content=resp.text)


class RelayEndpoint(FetchStrategy):
    """Relay addressed as ``prefix + encoded target``."""

    def __init__(self, prefix: str):
        self.prefix = prefix
        self.name = prefix

    def request_url(self, url: str) -> str:
        return self.prefix + encode_target(url)


class DirectFetch(FetchStrategy):
    """Request the target itself; no cross-origin restriction applies server-side."""

    name = "direct"

    def request_url(self, url: str) -> str:
        return url


class RelayFetcher:
    """
    Try each strategy in order and return the first successful body.

    A failed attempt (non-2xx status, timeout, connection error) is logged and
    the next strategy is tried; there is no retry within one strategy. When
    every strategy fails, ``fetch`` returns None instead of raising.
    """

    def __init__(
        self,
        strategies: Iterable[FetchStrategy] | None = None,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ):
        if strategies is None:
            strategies = [RelayEndpoint(p) for p in DEFAULT_RELAYS]
        self.strategies = list(strategies)
        self.timeout = timeout
        if session is None:
            session = requests.Session()
            session.headers.update({
                "User-Agent": USER_AGENT,
                "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
                "Accept-Language": "en-GB,en;q=0.9",
            })
        self.session = session

    @classmethod
    def from_env(cls, session: requests.Session | None = None) -> "RelayFetcher":
        """Build the fetcher from BULLION_RELAYS / BULLION_DIRECT_FETCH / BULLION_REQUEST_TIMEOUT."""
        strategies: list[FetchStrategy] = []
        if use_direct_fetch():
            strategies.append(DirectFetch())
        strategies.extend(RelayEndpoint(p) for p in get_relays())
        return cls(strategies, session=session, timeout=get_request_timeout())

    def fetch(self, url: str, cancel: threading.Event | None = None) -> str | None:
        """Return the first successful body, or None when every strategy failed."""
        for strategy in self.strategies:
            if cancel is not None and cancel.is_set():
                logger.info("Fetch of %s cancelled", url)
                return None
            result = strategy.attempt(self.session, url, self.timeout)
            if result.ok:
                logger.debug("Fetched %s via %s", url, result.strategy)
                return result.content
            logger.warning("Relay failed %s: %s", result.strategy, result.error)
        logger.warning("All %d relays failed for %s", len(self.strategies), url)
        return None
