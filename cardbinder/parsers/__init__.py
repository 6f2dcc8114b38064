from cardbinder.parsers.collection_csv import (
    CollectionRow,
    detect_delimiter,
    parse_collection_csv,
    parse_quantity,
)
from cardbinder.parsers.price_csv import parse_price, parse_price_csv

__all__ = [
    "CollectionRow",
    "detect_delimiter",
    "parse_collection_csv",
    "parse_price",
    "parse_price_csv",
    "parse_quantity",
]
