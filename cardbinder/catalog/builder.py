"""
Offline catalog build from a local vendor export tree.

Detects the export layout, normalizes every card record, merges records that
share a code, and writes the sorted catalog artifact.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from cardbinder.catalog.layout import SourceLayout, detect_layout, list_card_files
from cardbinder.catalog.merge import CatalogAccumulator, MergeStrategy
from cardbinder.catalog.normalize import normalize_export_card
from cardbinder.catalog.packs import load_pack_titles
from cardbinder.catalog.records import extract_records
from cardbinder.models.catalog import CatalogEntry

logger = logging.getLogger(__name__)


@dataclass
class BuildReport:
    """Outcome of a catalog build. Counts are diagnostics only."""

    layout: SourceLayout
    file_count: int = 0
    parse_errors: int = 0
    entries: list[CatalogEntry] = field(default_factory=list)

    @property
    def output_count(self) -> int:
        return len(self.entries)


def build_catalog(root: Path, language: str) -> BuildReport:
    """
    Build a deduplicated, code-sorted catalog from an export tree.

    Args:
        root: Root directory of the vendor export
        language: Language selector, e.g. "english"

    Returns:
        BuildReport with the entries and build diagnostics.

    Raises:
        LayoutNotRecognizedError: If the tree matches no known layout
    """
    layout = detect_layout(Path(root), language)
    pack_titles = load_pack_titles(layout.packs_path)
    files = list_card_files(layout)

    logger.info("Layout: %s (base %s)", layout.kind.value, layout.base_dir)
    logger.info("Packs: %s (%d titles)", layout.packs_path or "(none)", len(pack_titles))
    logger.info("Found %d json files in %s", len(files), layout.cards_dir)

    report = BuildReport(layout=layout, file_count=len(files))
    accumulator = CatalogAccumulator(MergeStrategy.FIELD_MERGE)

    for path in files:
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            report.parse_errors += 1
            logger.warning("Skipping unreadable card file %s: %s", path, e)
            continue

        for raw in extract_records(data):
            entry = normalize_export_card(raw, pack_titles, name_fallback=False)
            if entry is not None:
                accumulator.add(entry)

    report.entries = accumulator.entries()
    return report


def write_catalog(entries: list[CatalogEntry], out_path: Path) -> Path:
    """Write entries as a pretty-printed JSON array, creating parent dirs."""
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    payload = [entry.to_dict() for entry in entries]
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)
        f.write("\n")

    return out_path


def read_catalog_file(path: Path) -> list[CatalogEntry]:
    """
    Read a catalog artifact back into entries.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is not a JSON array of entries
    """
    with open(path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Catalog file {path} is corrupted: {e}") from e

    return parse_catalog_payload(data)


def parse_catalog_payload(data: object) -> list[CatalogEntry]:
    """
    Convert a decoded catalog artifact into entries.

    Raises:
        ValueError: If the payload is not a flat array of entry objects
    """
    if not isinstance(data, list):
        raise ValueError("Catalog artifact must be a JSON array")

    entries: list[CatalogEntry] = []
    for item in data:
        if not isinstance(item, dict):
            raise ValueError("Catalog artifact contains a non-object entry")
        entries.append(CatalogEntry.from_dict(item))
    return entries
