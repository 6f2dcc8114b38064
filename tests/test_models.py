"""Tests for domain models."""

import pytest

from cardbinder.models.catalog import CatalogEntry
from cardbinder.models.collection import (
    CardCondition,
    CardLanguage,
    CardVariant,
    CollectionItem,
    identity_key,
    new_id,
)


class TestCatalogEntry:
    def test_to_dict_uses_artifact_keys(self) -> None:
        entry = CatalogEntry(
            code="OP01-001",
            name="Zoro",
            set="OP01",
            set_name="Romance Dawn",
            image_url="z.png",
            market_price=1.0,
        )

        data = entry.to_dict()

        assert data == {
            "code": "OP01-001",
            "name": "Zoro",
            "set": "OP01",
            "setName": "Romance Dawn",
            "imageUrl": "z.png",
            "traits": [],
            "marketPrice": 1.0,
        }

    def test_from_dict_defaults(self) -> None:
        entry = CatalogEntry.from_dict({"code": " st01-012 ", "traits": ["A", "", None]})

        assert entry.code == "ST01-012"
        assert entry.name == "ST01-012"
        assert entry.set == "ST01"
        assert entry.traits == ("A",)

    def test_from_dict_requires_code(self) -> None:
        with pytest.raises(ValueError):
            CatalogEntry.from_dict({"name": "No code"})

    def test_from_dict_bad_price(self) -> None:
        entry = CatalogEntry.from_dict({"code": "X-1", "marketPrice": "cheap"})

        assert entry.market_price is None


class TestEnumParsing:
    def test_variant(self) -> None:
        assert CardVariant.parse(" ALT ") is CardVariant.ALT
        assert CardVariant.parse("foil") is CardVariant.NORMAL
        assert CardVariant.parse(None) is CardVariant.NORMAL

    def test_condition(self) -> None:
        assert CardCondition.parse("mp") is CardCondition.MP
        assert CardCondition.parse("") is CardCondition.NM

    def test_language(self) -> None:
        assert CardLanguage.parse("jp") is CardLanguage.JP
        assert CardLanguage.parse("klingon") is CardLanguage.EN


class TestIdentity:
    def test_identity_key_upper_cases_code(self) -> None:
        item = CollectionItem(id="i", collection_id="c", card_code="op01-001", qty=1)

        assert item.identity_key == identity_key(
            "OP01-001", CardVariant.NORMAL, CardCondition.NM, CardLanguage.EN
        )

    def test_new_id_is_unique(self) -> None:
        first, second = new_id("item"), new_id("item")

        assert first.startswith("item_")
        assert first != second
