"""
CardOracle services.

Outbound clients, the collection store gateway and the ingest pipeline.
"""

from cardoracle.services.card_store import (
    CardStore,
    ReadinessPolicy,
    StoreConfig,
    StoreHit,
    StoreState,
    StoreStats,
    normalize_host,
)
from cardoracle.services.ingest import (
    DEFAULT_BATCH_SIZE,
    BatchFailurePolicy,
    BatchIngestor,
    CardSink,
    IngestReport,
    ingest_file,
)
from cardoracle.services.scryfall_client import ScryfallClient

__all__ = [
    "BatchFailurePolicy",
    "BatchIngestor",
    "CardSink",
    "CardStore",
    "DEFAULT_BATCH_SIZE",
    "IngestReport",
    "ReadinessPolicy",
    "ScryfallClient",
    "StoreConfig",
    "StoreHit",
    "StoreState",
    "StoreStats",
    "ingest_file",
    "normalize_host",
]
