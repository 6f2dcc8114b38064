"""Tests for pack title resolution."""

import json
from pathlib import Path

from cardbinder.catalog.packs import build_pack_titles, load_pack_titles


class TestBuildPackTitles:
    def test_list_of_packs(self) -> None:
        """Accepts a plain list of pack objects."""
        titles = build_pack_titles([{"id": "569101", "title": "Romance Dawn"}])

        assert titles == {"569101": "Romance Dawn"}

    def test_wrapped_packs_and_items(self) -> None:
        """Accepts {"packs": [...]} and {"items": [...]}."""
        assert build_pack_titles({"packs": [{"id": "a", "name": "A"}]}) == {"A": "A"}
        assert build_pack_titles({"items": [{"id": "b", "name": "B"}]}) == {"B": "B"}

    def test_mapping_of_packs(self) -> None:
        """Accepts an id -> pack mapping."""
        titles = build_pack_titles({"569101": {"id": "569101", "raw_title": "OP-01"}})

        assert titles == {"569101": "OP-01"}

    def test_title_precedence(self) -> None:
        """title_parts.title beats raw_title, title and name."""
        titles = build_pack_titles(
            [
                {
                    "id": "p1",
                    "title_parts": {"title": "Romance Dawn", "label": "OP-01"},
                    "raw_title": "BOOSTER PACK -ROMANCE DAWN- [OP-01]",
                    "name": "ignored",
                },
                {"id": "p2", "title_parts": {"label": "ST-01"}, "title": "ignored"},
                {"id": "p3", "title": "Title", "name": "Name"},
            ]
        )

        assert titles["P1"] == "Romance Dawn"
        assert titles["P2"] == "ST-01"
        assert titles["P3"] == "Title"

    def test_falls_back_to_id(self) -> None:
        """A pack without any title uses its id."""
        assert build_pack_titles([{"id": "x9"}]) == {"X9": "X9"}

    def test_skips_packs_without_id(self) -> None:
        """Entries with no id or that aren't objects are ignored."""
        assert build_pack_titles([{"title": "No id"}, "junk", None]) == {}

    def test_unsupported_payload(self) -> None:
        """Scalars produce an empty mapping."""
        assert build_pack_titles("packs") == {}


class TestLoadPackTitles:
    def test_missing_file(self, tmp_path: Path) -> None:
        """No file means no titles."""
        assert load_pack_titles(None) == {}
        assert load_pack_titles(tmp_path / "packs.json") == {}

    def test_corrupt_file(self, tmp_path: Path) -> None:
        """Unparseable pack metadata is treated as absent."""
        path = tmp_path / "packs.json"
        path.write_text("{not json", encoding="utf-8")

        assert load_pack_titles(path) == {}

    def test_reads_file(self, tmp_path: Path) -> None:
        """Parses a real packs.json."""
        path = tmp_path / "packs.json"
        path.write_text(json.dumps({"packs": [{"id": "1", "title": "One"}]}), encoding="utf-8")

        assert load_pack_titles(path) == {"1": "One"}
