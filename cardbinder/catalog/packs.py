"""Pack metadata -> set title lookup."""

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def build_pack_titles(data: Any) -> dict[str, str]:
    """
    Build a pack id -> set title mapping from pack metadata.

    Accepts:
        - [ {"id": ...}, ... ]
        - {"packs": [ ... ]}
        - {"items": [ ... ]}
        - {"569001": {...}, "569002": {...}}

    Title precedence: title_parts.title, title_parts.label, raw_title,
    title, name, then the pack id itself.
    """
    packs: list[Any]
    if isinstance(data, list):
        packs = data
    elif isinstance(data, dict):
        if isinstance(data.get("packs"), list):
            packs = data["packs"]
        elif isinstance(data.get("items"), list):
            packs = data["items"]
        else:
            packs = list(data.values())
    else:
        return {}

    titles: dict[str, str] = {}
    for pack in packs:
        if not isinstance(pack, dict):
            continue

        raw_id = pack.get("id")
        pack_id = str(raw_id).strip().upper() if raw_id is not None else ""
        if not pack_id:
            continue

        titles[pack_id] = _pack_title(pack, pack_id)

    return titles


def _pack_title(pack: dict[str, Any], pack_id: str) -> str:
    parts = pack.get("title_parts")
    if isinstance(parts, dict):
        nested = parts.get("title") or parts.get("label")
        if nested:
            return str(nested).strip()

    for key in ("raw_title", "title", "name"):
        value = pack.get(key)
        if value:
            return str(value).strip()

    return pack_id


def load_pack_titles(path: Path | None) -> dict[str, str]:
    """
    Load pack titles from a packs.json file.

    Returns an empty mapping when there is no file or it cannot be parsed.
    """
    if path is None or not path.is_file():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Could not read pack metadata %s: %s", path, e)
        return {}

    return build_pack_titles(data)
