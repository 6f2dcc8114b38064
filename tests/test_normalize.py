"""Tests for raw card normalization."""

from cardbinder.catalog.normalize import (
    UNKNOWN_SET,
    infer_set,
    normalize_api_card,
    normalize_export_card,
)


class TestInferSet:
    def test_prefix(self) -> None:
        assert infer_set("op01-077") == "OP01"
        assert infer_set("ST10-001") == "ST10"

    def test_missing(self) -> None:
        assert infer_set(None) == UNKNOWN_SET
        assert infer_set("  ") == UNKNOWN_SET


class TestNormalizeExportCard:
    def test_full_record(self) -> None:
        """Maps every export field onto the entry."""
        raw = {
            "id": "op01-001",
            "pack_id": "569101",
            "name": "Roronoa Zoro",
            "rarity": "L",
            "category": "LEADER",
            "colors": ["Red", "Green"],
            "cost": None,
            "power": 5000,
            "types": [" Supernovas ", "Straw Hat Crew", "", None],
            "img_full_url": "https://img/full.png",
            "img_url": "https://img/small.png",
        }

        entry = normalize_export_card(raw, {"569101": "Romance Dawn"})

        assert entry is not None
        assert entry.code == "OP01-001"
        assert entry.set == "OP01"
        assert entry.set_name == "Romance Dawn"
        assert entry.pack_id == "569101"
        assert entry.color == "Red/Green"
        assert entry.type == "LEADER"
        assert entry.power == "5000"
        assert entry.cost is None
        assert entry.traits == ("Supernovas", "Straw Hat Crew")
        assert entry.image_url == "https://img/full.png"

    def test_image_falls_back_to_small(self) -> None:
        entry = normalize_export_card({"id": "OP01-002", "img_url": "small.png"}, {})

        assert entry is not None
        assert entry.image_url == "small.png"

    def test_name_falls_back_to_code(self) -> None:
        """A record without a name is named after its code."""
        entry = normalize_export_card({"id": "OP01-003", "name": "  "}, {})

        assert entry is not None
        assert entry.name == "OP01-003"

    def test_name_left_empty_without_fallback(self) -> None:
        entry = normalize_export_card({"id": "OP01-003"}, {}, name_fallback=False)

        assert entry is not None
        assert entry.name == ""

    def test_explicit_set_wins(self) -> None:
        entry = normalize_export_card({"id": "P-001", "set": "promo"}, {})

        assert entry is not None
        assert entry.set == "PROMO"

    def test_missing_id_rejected(self) -> None:
        assert normalize_export_card({"name": "No code"}, {}) is None

    def test_unknown_pack_has_no_set_name(self) -> None:
        entry = normalize_export_card({"id": "OP01-004", "pack_id": "999"}, {"1": "x"})

        assert entry is not None
        assert entry.set_name is None


class TestNormalizeApiCard:
    def test_full_record(self) -> None:
        """Maps API field names, including the price snapshot."""
        raw = {
            "card_set_id": "op01-001",
            "card_name": "Roronoa Zoro",
            "set_id": "OP-01",
            "set_name": "Romance Dawn",
            "rarity": "L",
            "card_color": "Red",
            "card_type": "Leader",
            "card_image": "https://img/op01-001.png",
            "card_cost": "5",
            "card_power": 5000,
            "market_price": "1.25",
            "inventory_price": 0.9,
            "date_scraped": "2024-05-01",
        }

        entry = normalize_api_card(raw)

        assert entry is not None
        assert entry.code == "OP01-001"
        assert entry.set == "OP-01"
        assert entry.power == "5000"
        assert entry.market_price == 1.25
        assert entry.inventory_price == 0.9
        assert entry.scraped_at == "2024-05-01"

    def test_code_key_fallbacks(self) -> None:
        """card_image_id, card_id and id are accepted for the code."""
        assert normalize_api_card({"card_image_id": "a-1", "name": "A"}).code == "A-1"
        assert normalize_api_card({"card_id": "b-1", "name": "B"}).code == "B-1"
        assert normalize_api_card({"id": "c-1", "card_name": "C"}).code == "C-1"

    def test_set_inferred_from_code(self) -> None:
        entry = normalize_api_card({"card_set_id": "ST01-001", "card_name": "Luffy"})

        assert entry is not None
        assert entry.set == "ST01"

    def test_requires_code_and_name(self) -> None:
        assert normalize_api_card({"card_name": "No code"}) is None
        assert normalize_api_card({"card_set_id": "OP01-001"}) is None

    def test_bad_price_is_none(self) -> None:
        entry = normalize_api_card({"id": "X-1", "name": "X", "market_price": "n/a"})

        assert entry is not None
        assert entry.market_price is None
