"""
Source layout detection for vendor card exports.

Three export layouts are known, tried in order (first match wins):

- nested:        <root>/<language>/cards/**/*.json  (+ <root>/<language>/packs.json)
- flat:          <root>/data/<language>/*.json      (no pack metadata)
- dated export:  <root>/<name>-<language>.../json/cards_*.json
                 (+ packs.json next to json/ or inside it)
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from cardbinder.models.failure import LayoutNotRecognizedError


class LayoutKind(str, Enum):
    """Known export layouts."""

    NESTED = "nested"
    FLAT = "flat"
    DATED_EXPORT = "dated_export"


ATTEMPTED_LAYOUTS = [
    "nested (<root>/<language>/cards)",
    "flat (<root>/data/<language>)",
    "dated export (<root>/*-<language>/json)",
]


@dataclass(frozen=True, slots=True)
class SourceLayout:
    """A detected layout: where card files and pack metadata live."""

    kind: LayoutKind
    base_dir: Path
    cards_dir: Path
    packs_path: Path | None


def detect_layout(root: Path, language: str) -> SourceLayout:
    """
    Detect which export layout `root` uses for `language`.

    Raises:
        LayoutNotRecognizedError: If no known layout matches
    """
    root = Path(root)
    if not root.is_dir():
        raise LayoutNotRecognizedError(str(root), language, ATTEMPTED_LAYOUTS)

    nested_base = root / language
    nested_cards = nested_base / "cards"
    if nested_cards.is_dir():
        packs = nested_base / "packs.json"
        return SourceLayout(
            kind=LayoutKind.NESTED,
            base_dir=nested_base,
            cards_dir=nested_cards,
            packs_path=packs if packs.is_file() else None,
        )

    flat_dir = root / "data" / language
    if flat_dir.is_dir():
        return SourceLayout(
            kind=LayoutKind.FLAT,
            base_dir=flat_dir,
            cards_dir=flat_dir,
            packs_path=None,
        )

    marker = f"-{language.lower()}"
    candidates = sorted(
        p for p in root.iterdir() if p.is_dir() and marker in p.name.lower()
    )
    for candidate in candidates:
        json_dir = candidate / "json"
        if not json_dir.is_dir():
            continue

        packs_path: Path | None = None
        for option in (candidate / "packs.json", json_dir / "packs.json"):
            if option.is_file():
                packs_path = option
                break

        return SourceLayout(
            kind=LayoutKind.DATED_EXPORT,
            base_dir=candidate,
            cards_dir=json_dir,
            packs_path=packs_path,
        )

    raise LayoutNotRecognizedError(str(root), language, ATTEMPTED_LAYOUTS)


def list_card_files(layout: SourceLayout) -> list[Path]:
    """
    Enumerate card JSON files for a layout, sorted by path.

    Nested layouts are scanned recursively; dated exports only take
    `cards_*.json`; flat layouts take every direct `.json` child.
    """
    if layout.kind is LayoutKind.NESTED:
        files = [
            p for p in layout.cards_dir.rglob("*") if p.is_file() and _is_json(p)
        ]
    elif layout.kind is LayoutKind.DATED_EXPORT:
        files = [
            p
            for p in layout.cards_dir.iterdir()
            if p.is_file() and _is_json(p) and p.name.lower().startswith("cards_")
        ]
    else:
        files = [p for p in layout.cards_dir.iterdir() if p.is_file() and _is_json(p)]

    return sorted(files)


def _is_json(path: Path) -> bool:
    return path.name.lower().endswith(".json")
