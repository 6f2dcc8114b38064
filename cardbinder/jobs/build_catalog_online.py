"""
Build the card catalog from the online card-data API.

Usage:
    python -m cardbinder.jobs.build_catalog_online [--out PATH]
"""

import argparse
import asyncio
import logging
from pathlib import Path

from cardbinder.catalog.builder import write_catalog
from cardbinder.catalog.online import build_catalog_online
from cardbinder.config import settings

logger = logging.getLogger(__name__)


async def run_online_build(out: Path) -> int:
    """Fetch every endpoint and write the catalog; returns the entry count."""
    report = await build_catalog_online()

    for name, reason in report.failed_endpoints.items():
        logger.warning("Skipped %s: %s", name, reason)

    write_catalog(report.entries, out)
    logger.info("Wrote %d cards to %s", len(report.entries), out)
    return len(report.entries)


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Build the card catalog from the card API")
    parser.add_argument(
        "--out",
        type=Path,
        default=Path(settings.catalog_source),
        help="Output catalog JSON path",
    )
    args = parser.parse_args(argv)

    asyncio.run(run_online_build(args.out))


if __name__ == "__main__":
    main()
