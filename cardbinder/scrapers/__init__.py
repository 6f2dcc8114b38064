from cardbinder.scrapers.cardmarket import (
    ScrapedPrice,
    ScrapeOutcome,
    build_search_url,
    extract_prices,
    fetch_price,
    is_stale,
    parse_euro_number,
)

__all__ = [
    "ScrapeOutcome",
    "ScrapedPrice",
    "build_search_url",
    "extract_prices",
    "fetch_price",
    "is_stale",
    "parse_euro_number",
]
