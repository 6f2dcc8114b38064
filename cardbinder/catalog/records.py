"""
Decode the shape of a card JSON payload.

A file may hold an array of cards, a single card object, or a map of
id -> card. Shape detection is kept apart from per-card normalization.
"""

from enum import Enum
from typing import Any


class PayloadShape(str, Enum):
    """Top-level shape of a card payload."""

    ARRAY = "array"
    SINGLE = "single"
    MAPPING = "mapping"
    EMPTY = "empty"


def classify_payload(data: Any) -> PayloadShape:
    """Classify a decoded JSON payload."""
    if isinstance(data, list):
        return PayloadShape.ARRAY
    if isinstance(data, dict):
        # A lone card carries both id and name at the top level
        if data.get("id") and data.get("name"):
            return PayloadShape.SINGLE
        return PayloadShape.MAPPING
    return PayloadShape.EMPTY


def extract_records(data: Any) -> list[dict[str, Any]]:
    """Flatten any supported payload shape into a list of raw card dicts."""
    shape = classify_payload(data)

    if shape is PayloadShape.ARRAY:
        candidates = list(data)
    elif shape is PayloadShape.SINGLE:
        candidates = [data]
    elif shape is PayloadShape.MAPPING:
        candidates = list(data.values())
    else:
        candidates = []

    return [c for c in candidates if isinstance(c, dict)]
