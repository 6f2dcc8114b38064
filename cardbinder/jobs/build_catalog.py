"""
Build the card catalog from a local vendor export.

Usage:
    python -m cardbinder.jobs.build_catalog <root> <language> <out>

Example:
    python -m cardbinder.jobs.build_catalog ./vendor/punk-records english \
        data/catalog/onepiece_cards.json
"""

import argparse
import logging
import sys
from pathlib import Path

from cardbinder.catalog.builder import build_catalog, write_catalog
from cardbinder.models.failure import LayoutNotRecognizedError

logger = logging.getLogger(__name__)


def run_build(root: Path, language: str, out: Path) -> int:
    """
    Build and write the catalog.

    Returns:
        Number of entries written
    """
    report = build_catalog(root, language)
    write_catalog(report.entries, out)

    logger.info("Parse errors: %d", report.parse_errors)
    logger.info("Output cards: %d", report.output_count)
    logger.info("Wrote: %s", out)
    return report.output_count


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Build the card catalog from an export tree")
    parser.add_argument("root", type=Path, help="Root directory of the export")
    parser.add_argument("language", help="Language selector, e.g. english")
    parser.add_argument("out", type=Path, help="Output catalog JSON path")
    args = parser.parse_args(argv)

    try:
        run_build(args.root, args.language, args.out)
    except LayoutNotRecognizedError as e:
        logger.error("%s", e.message)
        if e.suggestion:
            logger.error("%s", e.suggestion)
        sys.exit(1)


if __name__ == "__main__":
    main()
