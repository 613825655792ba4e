"""
Collection store gateway.

Owns the connection to the Weaviate vector store. One CardStore is built
at startup and handed to whatever needs it; there is no process-wide
instance. State transitions (connect/disconnect) are serialized by a lock
so a handler never observes a half-connected store.

States:
- Disconnected: no client handle
- Connected: client handle present; `verified` records whether the
  readiness check passed
"""

import asyncio
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import weaviate
from weaviate import WeaviateAsyncClient
from weaviate.classes.data import DataObject
from weaviate.classes.init import AdditionalConfig, Auth, Timeout
from weaviate.classes.query import MetadataQuery
from weaviate.exceptions import WeaviateQueryError

from cardoracle.config import Settings
from cardoracle.models.failure import BatchWriteError, ConfigurationError, StoreUnavailableError
from cardoracle.models.stored_card import StoredCard

logger = logging.getLogger(__name__)

SEARCH_PROPERTIES = ["name", "type_line", "mana_cost", "set_name", "oracle_text"]


class StoreState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTED = "connected"


class ReadinessPolicy(str, Enum):
    """
    How connect() treats a failed readiness check.

    LENIENT: stay connected but unverified (cluster may still be warming up)
    STRICT: close the handle and fail connect()
    """

    LENIENT = "lenient"
    STRICT = "strict"


@dataclass(frozen=True)
class StoreConfig:
    """Connection parameters for the collection store."""

    url: str
    api_key: str
    collection: str = "Oracle_Cards"
    http_port: int = 443
    grpc_port: int = 443
    timeout: float = 30.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "StoreConfig":
        return cls(
            url=settings.weaviate_url,
            api_key=settings.weaviate_api_key,
            collection=settings.weaviate_collection,
            http_port=settings.weaviate_http_port,
            grpc_port=settings.weaviate_grpc_port,
            timeout=settings.request_timeout,
        )


@dataclass(frozen=True)
class StoreHit:
    """One result of a similarity search."""

    name: str
    type_line: str
    mana_cost: str
    set_name: str
    oracle_text: str
    distance: float | None = None
    score: float | None = None


@dataclass(frozen=True)
class StoreStats:
    """Collection overview."""

    collections: list[str] = field(default_factory=list)
    collection: str = ""
    total_count: int | None = None


def normalize_host(url: str) -> str:
    """Strip the scheme and any trailing slash from an endpoint."""
    host = url.strip()
    for prefix in ("https://", "http://"):
        if host.startswith(prefix):
            host = host[len(prefix) :]
            break
    return host.rstrip("/")


def default_client_factory(config: StoreConfig) -> WeaviateAsyncClient:
    """Build an (unconnected) async Weaviate client for a cloud cluster."""
    host = normalize_host(config.url)
    return weaviate.use_async_with_custom(
        http_host=host,
        http_port=config.http_port,
        http_secure=True,
        grpc_host=host,
        grpc_port=config.grpc_port,
        grpc_secure=True,
        auth_credentials=Auth.api_key(config.api_key),
        additional_config=AdditionalConfig(
            timeout=Timeout(init=config.timeout, query=config.timeout, insert=config.timeout * 4)
        ),
        skip_init_checks=True,
    )


ClientFactory = Callable[[StoreConfig], Any]


class CardStore:
    """
    Gateway to the card collection store.

    Usage:
        store = CardStore()
        await store.connect(StoreConfig.from_settings(settings))
        if store.can_query():
            hits = await store.search("flying dragon")
    """

    def __init__(
        self,
        client_factory: ClientFactory = default_client_factory,
        readiness_policy: ReadinessPolicy = ReadinessPolicy.LENIENT,
        allow_unverified_queries: bool = True,
    ) -> None:
        self._client_factory = client_factory
        self.readiness_policy = readiness_policy
        self.allow_unverified_queries = allow_unverified_queries

        self._client: Any = None
        self._config: StoreConfig | None = None
        self._verified = False
        self._lock = asyncio.Lock()

    @property
    def state(self) -> StoreState:
        return StoreState.CONNECTED if self._client is not None else StoreState.DISCONNECTED

    @property
    def collection_name(self) -> str | None:
        return self._config.collection if self._config else None

    def is_connected(self) -> bool:
        """Pure query of the current state."""
        return self._client is not None

    def is_verified(self) -> bool:
        """True if connected and the readiness check passed."""
        return self._client is not None and self._verified

    def can_query(self) -> bool:
        """Whether tools should send queries under the configured policy."""
        if not self.is_connected():
            return False
        return self._verified or self.allow_unverified_queries

    async def connect(self, config: StoreConfig) -> None:
        """
        Establish the store connection.

        No-op if already connected.

        Raises:
            ConfigurationError: If the endpoint or credential is missing
            StoreUnavailableError: If the readiness check fails under STRICT
            Exception: Whatever the client raises while connecting
        """
        async with self._lock:
            if self._client is not None:
                logger.info("Database already connected")
                return

            if not config.url or not config.api_key:
                raise ConfigurationError(
                    "WEAVIATE_URL and WEAVIATE_API_KEY are required for database connection"
                )

            client = self._client_factory(config)
            try:
                await client.connect()
            except Exception:
                logger.exception("Failed to connect to Weaviate")
                await _close_quietly(client)
                raise

            verified = await _probe(client)
            if not verified:
                if self.readiness_policy is ReadinessPolicy.STRICT:
                    await _close_quietly(client)
                    raise StoreUnavailableError(
                        "Connected to Weaviate but the cluster is not ready",
                        detail="Readiness check failed under the strict readiness policy.",
                    )
                logger.warning("Connection established but cluster may not be ready yet")
            else:
                logger.info("Successfully connected to Weaviate database")

            self._client = client
            self._config = config
            self._verified = verified

    async def disconnect(self) -> None:
        """Release the connection. Idempotent."""
        async with self._lock:
            client = self._client
            self._client = None
            self._config = None
            self._verified = False

        if client is not None:
            await _close_quietly(client)
            logger.info("Database connection closed")

    async def test_connection(self) -> bool:
        """Active health probe. Never raises."""
        client = self._client
        if client is None:
            return False
        return await _probe(client)

    def _collection(self) -> Any:
        if not self.can_query() or self._config is None:
            raise StoreUnavailableError("Database is not connected.")
        return self._client.collections.get(self._config.collection)

    async def insert_many(self, records: Sequence[StoredCard]) -> None:
        """
        Bulk insert flattened cards, keyed by their Scryfall id.

        Raises:
            StoreUnavailableError: If not connected
            BatchWriteError: If the store rejected some of the objects
        """
        collection = self._collection()
        objects = [
            DataObject(properties=record.to_properties(), uuid=record.scryfall_id)
            for record in records
        ]
        result = await collection.data.insert_many(objects)

        if result.has_errors:
            failed_ids = tuple(records[index].scryfall_id for index in result.errors)
            first = next(iter(result.errors.values()))
            raise BatchWriteError(
                f"{len(failed_ids)} of {len(records)} objects rejected: {first.message}",
                failed_ids=failed_ids,
            )

    async def search(self, query: str, limit: int = 10) -> list[StoreHit]:
        """
        Similarity search over stored cards.

        Falls back to BM25 keyword search when the collection has no vectorizer.
        """
        collection = self._collection()
        try:
            response = await collection.query.near_text(
                query=query,
                limit=limit,
                return_properties=SEARCH_PROPERTIES,
                return_metadata=MetadataQuery(distance=True),
            )
        except WeaviateQueryError as e:
            logger.warning("near_text unavailable, falling back to bm25: %s", e)
            response = await collection.query.bm25(
                query=query,
                limit=limit,
                return_properties=SEARCH_PROPERTIES,
                return_metadata=MetadataQuery(score=True),
            )

        return [_to_hit(obj) for obj in response.objects]

    async def stats(self) -> StoreStats:
        """Collection names and the object count of the configured collection."""
        if not self.can_query() or self._config is None:
            raise StoreUnavailableError("Database is not connected.")

        collections = await self._client.collections.list_all()
        names = sorted(collections)
        total: int | None = None
        if self._config.collection in collections:
            aggregate = await self._collection().aggregate.over_all(total_count=True)
            total = aggregate.total_count

        return StoreStats(collections=names, collection=self._config.collection, total_count=total)


def _to_hit(obj: Any) -> StoreHit:
    props = obj.properties or {}
    metadata = obj.metadata
    return StoreHit(
        name=str(props.get("name", "")),
        type_line=str(props.get("type_line", "")),
        mana_cost=str(props.get("mana_cost", "")),
        set_name=str(props.get("set_name", "")),
        oracle_text=str(props.get("oracle_text", "")),
        distance=getattr(metadata, "distance", None),
        score=getattr(metadata, "score", None),
    )


async def _probe(client: Any) -> bool:
    """Readiness check over REST; failures are reported, not raised."""
    try:
        await client.collections.list_all()
        return True
    except Exception as e:
        logger.error("Database connection test failed: %s", e)
        return False


async def _close_quietly(client: Any) -> None:
    try:
        await client.close()
    except Exception as e:
        logger.warning("Error closing Weaviate client: %s", e)
