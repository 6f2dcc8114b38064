"""
Cardmarket price scraper.

Searches the One Piece product listing for "<name> <code>" and reads the
"Price Trend" and "30-days average price" figures from the page text.

Note: Web scraping is inherently fragile. Page structure may change.
"""

import html
import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from urllib.parse import urlencode

import httpx

from cardbinder.models.collection import now_utc

CARDMARKET_BASE = "https://www.cardmarket.com"
SEARCH_PATH = "/en/OnePiece/Products/Search"
USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"

TREND_PATTERN = re.compile(r"Price Trend\s*([\d.,]+)\s*€", re.IGNORECASE)
AVG30_PATTERN = re.compile(r"30-days average price\s*([\d.,]+)\s*€", re.IGNORECASE)

_TAG_PATTERN = re.compile(r"<[^>]+>")
_WS_PATTERN = re.compile(r"\s+")


@dataclass
class ScrapedPrice:
    """Figures read from one product page."""

    trend_eur: float | None
    avg30_eur: float | None

    @property
    def found(self) -> bool:
        return self.trend_eur is not None or self.avg30_eur is not None


@dataclass
class ScrapeOutcome:
    """Result of scraping one card code."""

    code: str
    ok: bool
    url: str
    trend_eur: float | None = None
    avg30_eur: float | None = None
    error: str | None = None


def build_search_url(name: str | None, code: str) -> str:
    """Product search URL for a card, e.g. `...?searchString=Nami+OP01-016`."""
    query = f"{name} {code}".strip() if name else code
    return f"{CARDMARKET_BASE}{SEARCH_PATH}?{urlencode({'searchString': query})}"


def parse_euro_number(text: str | None) -> float | None:
    """
    Parse a European-formatted amount.

    "2.608,15 €" -> 2608.15, "0,25" -> 0.25. Dots are thousands
    separators and the comma is the decimal mark.
    """
    if not text:
        return None
    cleaned = re.sub(r"\s+", "", text).replace("€", "").replace(".", "").replace(",", ".")
    if not cleaned:
        return None
    try:
        return float(cleaned)
    except ValueError:
        return None


def page_text(markup: str) -> str:
    """Visible text of an HTML page with whitespace collapsed."""
    text = html.unescape(_TAG_PATTERN.sub(" ", markup))
    return _WS_PATTERN.sub(" ", text)


def extract_prices(text: str) -> ScrapedPrice:
    """Read trend and 30-day average from page text (tags already stripped)."""
    trend = TREND_PATTERN.search(text)
    avg30 = AVG30_PATTERN.search(text)
    return ScrapedPrice(
        trend_eur=parse_euro_number(trend.group(1)) if trend else None,
        avg30_eur=parse_euro_number(avg30.group(1)) if avg30 else None,
    )


async def fetch_price(client: httpx.AsyncClient, code: str, name: str | None) -> ScrapeOutcome:
    """
    Scrape prices for one card.

    Never raises for network or HTTP failures; those come back as an
    outcome with ok=False and an error message.

    Args:
        client: Async HTTP client (follow_redirects should be on, since a
            single search hit redirects to the product page)
        code: Card code
        name: Catalog name, used to narrow the search
    """
    url = build_search_url(name, code)
    try:
        response = await client.get(url)
        response.raise_for_status()
    except httpx.HTTPError as e:
        return ScrapeOutcome(code=code, ok=False, url=url, error=str(e) or type(e).__name__)

    final_url = str(response.url)
    scraped = extract_prices(page_text(response.text))
    if not scraped.found:
        return ScrapeOutcome(code=code, ok=False, url=final_url, error="No prices found")

    return ScrapeOutcome(
        code=code,
        ok=True,
        url=final_url,
        trend_eur=scraped.trend_eur,
        avg30_eur=scraped.avg30_eur,
    )


def is_stale(updated_at: datetime | None, ttl_hours: float, now: datetime | None = None) -> bool:
    """True when a price was never fetched or is older than the TTL."""
    if updated_at is None:
        return True
    now = now or now_utc()
    return now - updated_at > timedelta(hours=ttl_hours)
