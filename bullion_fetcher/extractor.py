"""Pull a displayed price string out of a product page."""

import logging
from collections.abc import Iterator, Sequence

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

# Most specific first; the first one with non-empty text wins
PRICE_SELECTORS = (
    "#b_pricing_now",
    ".product-price",
    "[data-price]",
    ".price",
    ".product-pricing",
    "span[class*='price']",
)


def _candidates(soup: BeautifulSoup, selectors: Sequence[str]) -> Iterator[str]:
    for selector in selectors:
        el = soup.select_one(selector)
        if el is not None:
            yield el.get_text().strip()


def extract_price(html: str | None, selectors: Sequence[str] = PRICE_SELECTORS) -> str | None:
    """
    Return the trimmed text of the first selector hit, or None.

    Only the first element matched by each selector is considered. The text
    is not checked for looking like money.
    """
    if not html:
        return None
    try:
        soup = BeautifulSoup(html, "lxml")
        for text in _candidates(soup, selectors):
            if text:
                return text
    except Exception as e:
        logger.warning("Price parse error: %s", e)
    return None
