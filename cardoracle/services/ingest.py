"""
Batch ingest pipeline.

Streams a bulk card export, validates every element, flattens valid
cards and writes them to the collection store in fixed-size batches.

Failure policy:
- A malformed record is logged and skipped; the run continues.
- A failed batch write is logged and the batch is dropped (DROP), or
  retried up to max_retries times before being dropped (RETRY). When the
  store rejects only part of a batch, only the rejected records are retried.
  Dropped records are listed in the report, never silently lost.

Flushes are sequential: at most one outstanding write at a time.
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Protocol

from cardoracle.models.card import validate_card
from cardoracle.models.failure import BatchWriteError
from cardoracle.models.stored_card import StoredCard
from cardoracle.parsers.scryfall import iter_bulk_cards

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 20


class BatchFailurePolicy(str, Enum):
    """What happens to a batch whose bulk insert fails."""

    DROP = "drop"
    RETRY = "retry"


class CardSink(Protocol):
    """Anything that accepts bulk inserts of flattened cards."""

    async def insert_many(self, records: Sequence[StoredCard]) -> None: ...


@dataclass
class IngestReport:
    """Counters for one ingest run."""

    seen: int = 0
    invalid: int = 0
    written: int = 0
    batches: int = 0
    failed_batches: int = 0
    dropped_names: list[str] = field(default_factory=list)

    @property
    def dropped(self) -> int:
        """Valid records lost to failed writes."""
        return len(self.dropped_names)


def _card_label(raw: Any) -> str:
    """Name used in log lines for a record that may not be a card at all."""
    if isinstance(raw, dict):
        name = raw.get("name")
        if isinstance(name, str) and name:
            return name
    return "unknown"


class BatchIngestor:
    """
    Buffers validated cards and flushes them to a sink in batches.

    Usage:
        ingestor = BatchIngestor(store, batch_size=20)
        report = await ingestor.run(iter_bulk_cards(path))
    """

    def __init__(
        self,
        sink: CardSink,
        batch_size: int = DEFAULT_BATCH_SIZE,
        policy: BatchFailurePolicy = BatchFailurePolicy.DROP,
        max_retries: int = 0,
    ) -> None:
        if batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        if max_retries < 0:
            raise ValueError(f"max_retries must not be negative, got {max_retries}")

        self.sink = sink
        self.batch_size = batch_size
        self.policy = policy
        self.max_retries = max_retries if policy is BatchFailurePolicy.RETRY else 0
        self.report = IngestReport()
        self._buffer: list[StoredCard] = []

    async def add(self, raw: Any) -> bool:
        """
        Validate one record and buffer it.

        Returns:
            True if the record was valid and buffered
        """
        self.report.seen += 1

        result = validate_card(raw)
        if not result.ok:
            self.report.invalid += 1
            logger.error("Error processing card %s: %s", _card_label(raw), result.describe())
            return False

        self._buffer.append(StoredCard.from_card(result.unwrap()))
        if len(self._buffer) >= self.batch_size:
            await self.flush()
        return True

    async def flush(self) -> None:
        """
        Write the buffered records as one bulk insert and clear the buffer.

        Records the store rejects are re-submitted on the remaining attempts;
        whatever is still pending when attempts run out is dropped.
        """
        if not self._buffer:
            return

        pending = self._buffer
        self._buffer = []

        attempts = self.max_retries + 1
        for attempt in range(1, attempts + 1):
            try:
                await self.sink.insert_many(pending)
            except BatchWriteError as e:
                # Partial failure: only the rejected records are still pending
                logger.error(
                    "Error uploading batch (attempt %d/%d): %s", attempt, attempts, e.message
                )
                pending = self._rejected(pending, e)
                continue
            except Exception as e:
                logger.error("Error uploading batch (attempt %d/%d): %s", attempt, attempts, e)
                continue

            self.report.written += len(pending)
            self.report.batches += 1
            logger.info("Imported %d cards...", self.report.written)
            return

        self.report.failed_batches += 1
        self.report.dropped_names.extend(record.name for record in pending)
        logger.warning("Dropped %d cards after %d attempt(s)", len(pending), attempts)

    def _rejected(self, pending: list[StoredCard], error: BatchWriteError) -> list[StoredCard]:
        """Count the accepted records as written and return the rejected ones."""
        failed_ids = set(error.failed_ids)
        if not failed_ids:
            return pending

        rejected = [r for r in pending if r.scryfall_id in failed_ids]
        self.report.written += len(pending) - len(rejected)
        return rejected

    async def run(self, records: Iterable[Any]) -> IngestReport:
        """Ingest every record in order, then flush the trailing partial batch."""
        for raw in records:
            await self.add(raw)
        await self.flush()

        logger.info(
            "Finished importing %d cards (%d invalid, %d dropped).",
            self.report.written,
            self.report.invalid,
            self.report.dropped,
        )
        return self.report


async def ingest_file(
    path: Path,
    sink: CardSink,
    batch_size: int = DEFAULT_BATCH_SIZE,
    policy: BatchFailurePolicy = BatchFailurePolicy.DROP,
    max_retries: int = 0,
) -> IngestReport:
    """
    Ingest a bulk card export into a sink.

    Args:
        path: JSON file whose top-level value is an array of cards
        sink: Destination for bulk inserts
        batch_size: Records per bulk insert
        policy: What to do with a batch whose insert fails
        max_retries: Extra attempts per batch under the RETRY policy

    Returns:
        Counters for the run
    """
    logger.info("Starting card import from %s (batch size %d)", path, batch_size)
    ingestor = BatchIngestor(sink, batch_size=batch_size, policy=policy, max_retries=max_retries)
    return await ingestor.run(iter_bulk_cards(path))
