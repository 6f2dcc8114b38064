"""Tests for export layout detection."""

from pathlib import Path

import pytest

from cardbinder.catalog.layout import LayoutKind, detect_layout, list_card_files
from cardbinder.models.failure import FailureKind, LayoutNotRecognizedError


def _touch(path: Path, content: str = "[]") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


class TestDetectLayout:
    def test_nested_layout(self, tmp_path: Path) -> None:
        """Detects <root>/<language>/cards with packs.json."""
        _touch(tmp_path / "english" / "cards" / "569101" / "OP01-001.json", "{}")
        _touch(tmp_path / "english" / "packs.json", "{}")

        layout = detect_layout(tmp_path, "english")

        assert layout.kind is LayoutKind.NESTED
        assert layout.cards_dir == tmp_path / "english" / "cards"
        assert layout.packs_path == tmp_path / "english" / "packs.json"

    def test_nested_layout_without_packs(self, tmp_path: Path) -> None:
        """Pack metadata is optional."""
        (tmp_path / "english" / "cards").mkdir(parents=True)

        layout = detect_layout(tmp_path, "english")

        assert layout.kind is LayoutKind.NESTED
        assert layout.packs_path is None

    def test_flat_layout(self, tmp_path: Path) -> None:
        """Detects <root>/data/<language>."""
        _touch(tmp_path / "data" / "english" / "OP01.json")

        layout = detect_layout(tmp_path, "english")

        assert layout.kind is LayoutKind.FLAT
        assert layout.packs_path is None

    def test_dated_export_layout(self, tmp_path: Path) -> None:
        """Detects <root>/<name>-<language>/json with packs beside json/."""
        export = tmp_path / "2024-05-01-english"
        _touch(export / "json" / "cards_OP01.json")
        _touch(export / "packs.json", "{}")

        layout = detect_layout(tmp_path, "english")

        assert layout.kind is LayoutKind.DATED_EXPORT
        assert layout.cards_dir == export / "json"
        assert layout.packs_path == export / "packs.json"

    def test_dated_export_packs_inside_json(self, tmp_path: Path) -> None:
        """packs.json may also live inside json/."""
        export = tmp_path / "dump-english"
        _touch(export / "json" / "cards_a.json")
        _touch(export / "json" / "packs.json", "{}")

        layout = detect_layout(tmp_path, "english")

        assert layout.packs_path == export / "json" / "packs.json"

    def test_nested_wins_over_flat(self, tmp_path: Path) -> None:
        """Layouts are tried in order; the first match wins."""
        (tmp_path / "english" / "cards").mkdir(parents=True)
        (tmp_path / "data" / "english").mkdir(parents=True)

        assert detect_layout(tmp_path, "english").kind is LayoutKind.NESTED

    def test_unknown_layout_raises(self, tmp_path: Path) -> None:
        """No matching layout raises with the attempted layouts."""
        (tmp_path / "something-else").mkdir()

        with pytest.raises(LayoutNotRecognizedError) as exc_info:
            detect_layout(tmp_path, "english")

        assert exc_info.value.kind is FailureKind.LAYOUT_NOT_RECOGNIZED
        assert len(exc_info.value.attempted) == 3
        assert "english" in exc_info.value.message

    def test_missing_root_raises(self, tmp_path: Path) -> None:
        """A root that doesn't exist is not a layout."""
        with pytest.raises(LayoutNotRecognizedError):
            detect_layout(tmp_path / "nope", "english")


class TestListCardFiles:
    def test_nested_is_recursive(self, tmp_path: Path) -> None:
        """Nested layouts pick up JSON at any depth."""
        cards = tmp_path / "english" / "cards"
        _touch(cards / "b" / "deep" / "OP01-002.json")
        _touch(cards / "a" / "OP01-001.json")
        _touch(cards / "a" / "readme.txt")

        files = list_card_files(detect_layout(tmp_path, "english"))

        assert [f.name for f in files] == ["OP01-001.json", "OP01-002.json"]

    def test_dated_export_only_cards_files(self, tmp_path: Path) -> None:
        """Dated exports only take cards_*.json."""
        json_dir = tmp_path / "x-english" / "json"
        _touch(json_dir / "cards_OP02.json")
        _touch(json_dir / "cards_OP01.json")
        _touch(json_dir / "packs.json")

        files = list_card_files(detect_layout(tmp_path, "english"))

        assert [f.name for f in files] == ["cards_OP01.json", "cards_OP02.json"]

    def test_flat_is_not_recursive(self, tmp_path: Path) -> None:
        """Flat layouts only take direct children."""
        flat = tmp_path / "data" / "english"
        _touch(flat / "OP01.json")
        _touch(flat / "nested" / "OP02.json")

        files = list_card_files(detect_layout(tmp_path, "english"))

        assert [f.name for f in files] == ["OP01.json"]
