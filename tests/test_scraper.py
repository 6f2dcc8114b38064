"""Tests for the Cardmarket price scraper."""

from datetime import UTC, datetime, timedelta

import httpx
import pytest
import respx

from cardbinder.scrapers.cardmarket import (
    build_search_url,
    extract_prices,
    fetch_price,
    is_stale,
    page_text,
    parse_euro_number,
)

PRODUCT_HTML = """
<html><body>
<dl class="labeled">
  <dt>Available items</dt><dd>412</dd>
  <dt>Price Trend</dt><dd><span>2.608,15 &euro;</span></dd>
  <dt>30-days average price</dt><dd><span>0,32 €</span></dd>
</dl>
</body></html>
"""


class TestParseEuroNumber:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [("2.608,15 €", 2608.15), ("0,42 €", 0.42), ("12", 12.0), (" 1 234,50 ", 1234.5)],
    )
    def test_values(self, text: str, expected: float) -> None:
        assert parse_euro_number(text) == pytest.approx(expected)

    def test_unparseable(self) -> None:
        assert parse_euro_number("") is None
        assert parse_euro_number(None) is None
        assert parse_euro_number("€") is None
        assert parse_euro_number("n/a") is None


class TestBuildSearchUrl:
    def test_name_and_code(self) -> None:
        url = build_search_url("Roronoa Zoro", "OP01-001")

        assert url == (
            "https://www.cardmarket.com/en/OnePiece/Products/Search"
            "?searchString=Roronoa+Zoro+OP01-001"
        )

    def test_code_only(self) -> None:
        assert build_search_url(None, "OP01-001").endswith("searchString=OP01-001")


class TestExtractPrices:
    def test_reads_both_figures(self) -> None:
        prices = extract_prices(page_text(PRODUCT_HTML))

        assert prices.trend_eur == pytest.approx(2608.15)
        assert prices.avg30_eur == pytest.approx(0.32)
        assert prices.found

    def test_case_insensitive(self) -> None:
        prices = extract_prices("price trend 1,00 €")

        assert prices.trend_eur == 1.0
        assert prices.avg30_eur is None

    def test_nothing_found(self) -> None:
        assert not extract_prices("Contact Support").found


class TestFetchPrice:
    @respx.mock
    async def test_success_follows_redirect(self) -> None:
        product = "https://www.cardmarket.com/en/OnePiece/Products/Singles/Romance-Dawn/Zoro"
        respx.get(build_search_url("Zoro", "OP01-001")).mock(
            return_value=httpx.Response(302, headers={"Location": product})
        )
        respx.get(product).mock(return_value=httpx.Response(200, text=PRODUCT_HTML))

        async with httpx.AsyncClient(follow_redirects=True) as client:
            outcome = await fetch_price(client, "OP01-001", "Zoro")

        assert outcome.ok
        assert outcome.url == product
        assert outcome.trend_eur == pytest.approx(2608.15)
        assert outcome.error is None

    @respx.mock
    async def test_http_error_is_an_outcome(self) -> None:
        respx.get(build_search_url("Zoro", "OP01-001")).mock(return_value=httpx.Response(403))

        async with httpx.AsyncClient() as client:
            outcome = await fetch_price(client, "OP01-001", "Zoro")

        assert not outcome.ok
        assert outcome.error

    @respx.mock
    async def test_network_error_is_an_outcome(self) -> None:
        respx.get(build_search_url("Zoro", "OP01-001")).mock(
            side_effect=httpx.ConnectTimeout("timed out")
        )

        async with httpx.AsyncClient() as client:
            outcome = await fetch_price(client, "OP01-001", "Zoro")

        assert not outcome.ok
        assert outcome.error == "timed out"

    @respx.mock
    async def test_page_without_prices(self) -> None:
        respx.get(build_search_url("Zoro", "OP01-001")).mock(
            return_value=httpx.Response(200, text="<html>No results</html>")
        )

        async with httpx.AsyncClient() as client:
            outcome = await fetch_price(client, "OP01-001", "Zoro")

        assert not outcome.ok
        assert outcome.error == "No prices found"


class TestIsStale:
    NOW = datetime(2025, 3, 1, tzinfo=UTC)

    def test_never_fetched(self) -> None:
        assert is_stale(None, 24, self.NOW)

    def test_fresh(self) -> None:
        assert not is_stale(self.NOW - timedelta(hours=23), 24, self.NOW)

    def test_old(self) -> None:
        assert is_stale(self.NOW - timedelta(hours=25), 24, self.NOW)
