"""Tests for the online catalog build."""

import httpx
import respx

from cardbinder.catalog.online import CARD_API_ENDPOINTS, build_catalog_online

BASE = "https://cards.test"


def _client() -> httpx.AsyncClient:
    return httpx.AsyncClient(base_url=BASE)


class TestBuildCatalogOnline:
    @respx.mock
    async def test_merges_all_endpoints(self) -> None:
        """Records from every endpoint are combined and sorted."""
        respx.get(f"{BASE}/api/allSetCards/").mock(
            return_value=httpx.Response(
                200,
                json=[
                    {"card_set_id": "OP01-002", "card_name": "Law", "market_price": 2.5},
                    {"card_set_id": "OP01-001", "card_name": "Zoro"},
                ],
            )
        )
        respx.get(f"{BASE}/api/allSTCards/").mock(
            return_value=httpx.Response(
                200, json={"data": [{"card_set_id": "ST01-001", "card_name": "Luffy"}]}
            )
        )
        respx.get(f"{BASE}/api/allPromoCards/").mock(
            return_value=httpx.Response(200, json={"x": {"card_set_id": "P-001", "name": "Promo"}})
        )

        async with _client() as client:
            report = await build_catalog_online(client)

        assert [e.code for e in report.entries] == ["OP01-001", "OP01-002", "P-001", "ST01-001"]
        assert report.raw_count == 4
        assert report.failed_endpoints == {}
        assert report.entries[1].market_price == 2.5

    @respx.mock
    async def test_first_record_wins(self) -> None:
        """Later duplicates of a code are ignored."""
        respx.get(f"{BASE}/api/allSetCards/").mock(
            return_value=httpx.Response(
                200, json=[{"card_set_id": "OP01-001", "card_name": "Set print"}]
            )
        )
        respx.get(f"{BASE}/api/allSTCards/").mock(return_value=httpx.Response(200, json=[]))
        respx.get(f"{BASE}/api/allPromoCards/").mock(
            return_value=httpx.Response(
                200, json=[{"card_set_id": "OP01-001", "card_name": "Promo print"}]
            )
        )

        async with _client() as client:
            report = await build_catalog_online(client)

        assert len(report.entries) == 1
        assert report.entries[0].name == "Set print"

    @respx.mock
    async def test_failed_endpoint_is_skipped(self) -> None:
        """One failing endpoint doesn't stop the others."""
        respx.get(f"{BASE}/api/allSetCards/").mock(
            return_value=httpx.Response(200, json=[{"card_set_id": "OP01-001", "card_name": "Z"}])
        )
        respx.get(f"{BASE}/api/allSTCards/").mock(return_value=httpx.Response(500))
        respx.get(f"{BASE}/api/allPromoCards/").mock(
            return_value=httpx.Response(200, content=b"<html>not json</html>")
        )

        async with _client() as client:
            report = await build_catalog_online(client)

        assert [e.code for e in report.entries] == ["OP01-001"]
        assert set(report.failed_endpoints) == {
            CARD_API_ENDPOINTS[1].name,
            CARD_API_ENDPOINTS[2].name,
        }

    @respx.mock
    async def test_network_error_is_skipped(self) -> None:
        respx.get(f"{BASE}/api/allSetCards/").mock(side_effect=httpx.ConnectError("down"))
        respx.get(f"{BASE}/api/allSTCards/").mock(
            return_value=httpx.Response(200, json=[{"card_set_id": "ST01-001", "card_name": "L"}])
        )
        respx.get(f"{BASE}/api/allPromoCards/").mock(return_value=httpx.Response(200, json=[]))

        async with _client() as client:
            report = await build_catalog_online(client)

        assert [e.code for e in report.entries] == ["ST01-001"]
        assert report.failed_endpoints[CARD_API_ENDPOINTS[0].name] == "down"
