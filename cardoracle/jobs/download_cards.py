"""
Download a Scryfall bulk card export.

Run this job to fetch the file the ingest job reads.
"""

import argparse
import asyncio
import logging
from pathlib import Path

from cardoracle.parsers.scryfall import download_bulk_data

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT = Path("data/oracle-cards.json")


async def run_download(output_path: Path, data_type: str) -> Path:
    """Download the bulk export to output_path."""
    logger.info("Downloading Scryfall %s bulk data...", data_type)

    try:
        path = await download_bulk_data(output_path, data_type=data_type)
        logger.info("Downloaded bulk data to %s", path)
        return path
    except Exception as e:
        logger.error("Failed to download bulk data: %s", e)
        raise


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Download Scryfall bulk data")
    parser.add_argument(
        "--output",
        type=Path,
        default=DEFAULT_OUTPUT,
        help="Where to save the JSON file",
    )
    parser.add_argument(
        "--type",
        dest="data_type",
        default="oracle_cards",
        help="Bulk data type (oracle_cards, default_cards, all_cards)",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    asyncio.run(run_download(args.output, args.data_type))


if __name__ == "__main__":
    main()
