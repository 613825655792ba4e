"""
Load a Scryfall bulk export into the card collection store.

Standalone offline job feeding the same collection the database tools read.
"""

import argparse
import asyncio
import logging
from dataclasses import replace
from pathlib import Path

from cardoracle.config import settings
from cardoracle.services.card_store import CardStore, ReadinessPolicy, StoreConfig
from cardoracle.services.ingest import BatchFailurePolicy, IngestReport, ingest_file

logger = logging.getLogger(__name__)


async def run_ingest(
    path: Path,
    batch_size: int,
    max_retries: int,
    collection: str | None = None,
    store: CardStore | None = None,
) -> IngestReport:
    """
    Connect to the store, ingest the file and disconnect.

    Raises:
        FileNotFoundError: If the bulk file does not exist
        ConfigurationError: If Weaviate settings are missing
    """
    if not path.exists():
        raise FileNotFoundError(
            f"Bulk file not found at {path}. "
            "Run `python -m cardoracle.jobs.download_cards` first."
        )

    config = StoreConfig.from_settings(settings)
    if collection:
        config = replace(config, collection=collection)

    # Writes need a verified cluster
    store = store or CardStore(readiness_policy=ReadinessPolicy.STRICT)
    await store.connect(config)

    policy = BatchFailurePolicy.RETRY if max_retries > 0 else BatchFailurePolicy.DROP
    try:
        return await ingest_file(
            path,
            store,
            batch_size=batch_size,
            policy=policy,
            max_retries=max_retries,
        )
    finally:
        await store.disconnect()


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Ingest Scryfall bulk data into Weaviate")
    parser.add_argument(
        "--file",
        type=Path,
        required=True,
        help="Path to a Scryfall bulk JSON file (.json or gzip-compressed)",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=settings.ingest_batch_size,
        help="Cards per bulk insert",
    )
    parser.add_argument(
        "--retries",
        type=int,
        default=settings.ingest_max_retries,
        help="Extra attempts for a failed batch before it is dropped",
    )
    parser.add_argument(
        "--collection",
        help="Target collection (defaults to WEAVIATE_COLLECTION)",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    report = asyncio.run(run_ingest(args.file, args.batch_size, args.retries, args.collection))

    if report.dropped:
        logger.warning("Dropped cards: %s", ", ".join(report.dropped_names))


if __name__ == "__main__":
    main()
