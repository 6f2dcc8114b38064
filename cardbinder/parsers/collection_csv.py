"""
Parser for collection CSV imports.

Expected header (case-insensitive, any order):
    code | cardCode, qty | quantity, [variant], [condition], [language]

The delimiter is ";" when the header contains ";" and no ",", otherwise ",".
Quoted fields with "" escapes are supported.
"""

import csv
import math
from dataclasses import dataclass

from cardbinder.config import MAX_IMPORT_LINES
from cardbinder.models.collection import CardCondition, CardLanguage, CardVariant
from cardbinder.models.failure import ImportTooLargeError, InvalidImportError


@dataclass(frozen=True, slots=True)
class CollectionRow:
    """
    One parsed import row.

    This is UNTRUSTED input: the code has not been checked against the catalog.
    """

    code: str
    qty: int
    variant: CardVariant = CardVariant.NORMAL
    condition: CardCondition = CardCondition.NM
    language: CardLanguage = CardLanguage.EN


def detect_delimiter(header_line: str) -> str:
    """Semicolon only for headers with semicolons and no commas (spreadsheet locales)."""
    if ";" in header_line and "," not in header_line:
        return ";"
    return ","


def parse_quantity(value: str) -> int | None:
    """Whole positive quantity, or None for anything else."""
    try:
        number = float(value.strip())
    except ValueError:
        return None
    if not math.isfinite(number) or number <= 0 or not number.is_integer():
        return None
    return int(number)


def _column(header: list[str], *names: str) -> int | None:
    for name in names:
        if name in header:
            return header.index(name)
    return None


def _cell(cols: list[str], idx: int | None) -> str:
    if idx is None or idx >= len(cols):
        return ""
    return cols[idx].strip()


def parse_collection_csv(text: str, max_lines: int = MAX_IMPORT_LINES) -> list[CollectionRow]:
    """
    Parse collection CSV text into rows.

    Rows with an empty code or a non-numeric / non-positive quantity are
    dropped silently.

    Raises:
        ImportTooLargeError: If there are more than `max_lines` data lines
        InvalidImportError: If the code or quantity column is missing
    """
    raw = (text or "").lstrip("\ufeff")
    lines = [line.strip() for line in raw.splitlines()]
    lines = [line for line in lines if line]

    if not lines:
        return []

    data_lines = len(lines) - 1
    if data_lines > max_lines:
        raise ImportTooLargeError(max_lines, data_lines)

    delimiter = detect_delimiter(lines[0])
    reader = csv.reader(lines, delimiter=delimiter, quotechar='"', doublequote=True)

    header = [h.strip().lower() for h in next(reader)]
    code_idx = _column(header, "code", "cardcode")
    qty_idx = _column(header, "qty", "quantity")
    if code_idx is None or qty_idx is None:
        raise InvalidImportError(
            'Invalid CSV. A "code" (or "cardCode") column and a "qty" column are required.',
            detail=f"Header columns: {header}",
        )

    variant_idx = _column(header, "variant")
    condition_idx = _column(header, "condition")
    language_idx = _column(header, "language")

    rows: list[CollectionRow] = []
    for cols in reader:
        code = _cell(cols, code_idx).upper()
        if not code:
            continue

        qty = parse_quantity(_cell(cols, qty_idx))
        if qty is None:
            continue

        rows.append(
            CollectionRow(
                code=code,
                qty=qty,
                variant=CardVariant.parse(_cell(cols, variant_idx)),
                condition=CardCondition.parse(_cell(cols, condition_idx)),
                language=CardLanguage.parse(_cell(cols, language_idx)),
            )
        )

    return rows
