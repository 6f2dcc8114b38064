"""
Parser for price overlay CSV imports.

Columns: code, trend_eur, avg30_eur[, updated_at[, url]]
A first line containing "code" is treated as a header.
"""

import csv
import math
from datetime import UTC, datetime

from cardbinder.models.collection import PriceEntry, now_utc


def parse_price(value: str | None) -> float | None:
    """Float value, or None when blank or unparseable."""
    if value is None or not value.strip():
        return None
    try:
        number = float(value.strip())
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def parse_timestamp(value: str | None, default: datetime) -> datetime:
    """ISO-8601 timestamp (naive values are taken as UTC), else `default`."""
    if value is None or not value.strip():
        return default
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return default
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


def parse_price_csv(text: str, now: datetime | None = None) -> list[PriceEntry]:
    """
    Parse price CSV text into price entries keyed by upper-cased code.

    Numeric columns that fail to parse become None rather than dropping
    the row. Rows without a code are skipped.
    """
    now = now or now_utc()
    lines = [line for line in (text or "").lstrip("\ufeff").splitlines() if line.strip()]
    if not lines:
        return []

    start = 1 if "code" in lines[0].lower() else 0

    entries: list[PriceEntry] = []
    for cols in csv.reader(lines[start:]):
        cols = [c.strip() for c in cols]
        code = (cols[0] if cols else "").upper()
        if not code:
            continue

        url = cols[4] if len(cols) > 4 and cols[4] else None
        entries.append(
            PriceEntry(
                card_code=code,
                trend_eur=parse_price(cols[1] if len(cols) > 1 else None),
                avg30_eur=parse_price(cols[2] if len(cols) > 2 else None),
                updated_at=parse_timestamp(cols[3] if len(cols) > 3 else None, now),
                url=url,
            )
        )

    return entries
