import uuid
from collections.abc import Callable, Sequence
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from cardoracle.models.stored_card import StoredCard


def make_card(index: int = 0, **overrides: Any) -> dict[str, Any]:
    """A raw Scryfall card object as the API or a bulk export would send it."""
    card: dict[str, Any] = {
        "object": "card",
        "id": str(uuid.UUID(int=index + 1)),
        "oracle_id": str(uuid.UUID(int=100_000 + index)),
        "lang": "en",
        "layout": "normal",
        "name": f"Card {index}",
        "type_line": "Instant",
        "oracle_text": "Card deals 3 damage to any target.",
        "mana_cost": "{R}",
        "cmc": 1.0,
        "colors": ["R"],
        "color_identity": ["R"],
        "keywords": [],
        "rarity": "common",
        "set": "m10",
        "set_name": "Magic 2010",
        "collector_number": str(100 + index),
        "prices": {"usd": "0.50", "usd_foil": None, "eur": "0.40"},
        "legalities": {"standard": "not_legal", "modern": "legal", "vintage": "restricted"},
    }
    card.update(overrides)
    return card


@pytest.fixture
def card_factory() -> Callable[..., dict[str, Any]]:
    return make_card


@pytest.fixture
def lightning_bolt() -> dict[str, Any]:
    return make_card(
        name="Lightning Bolt",
        collector_number="146",
        image_uris={
            "small": "https://cards.scryfall.io/small/front/e/3/e3285e6b.jpg",
            "normal": "https://cards.scryfall.io/normal/front/e/3/e3285e6b.jpg",
        },
    )


@pytest.fixture
def basic_land() -> dict[str, Any]:
    """A land has no mana cost, no colors and an empty color identity."""
    card = make_card(
        name="Wastes",
        type_line="Basic Land",
        oracle_text="{T}: Add {C}.",
        cmc=0,
        color_identity=[],
        rarity="common",
        collector_number="184",
    )
    del card["mana_cost"]
    del card["colors"]
    return card


class RecordingSink:
    """In-memory sink; fails the bulk inserts whose 1-based attempt number is listed."""

    def __init__(self, fail_attempts: Sequence[int] = ()) -> None:
        self.fail_attempts = set(fail_attempts)
        self.attempts = 0
        self.batches: list[list[StoredCard]] = []

    async def insert_many(self, records: Sequence[StoredCard]) -> None:
        self.attempts += 1
        if self.attempts in self.fail_attempts:
            raise RuntimeError("store unavailable")
        self.batches.append(list(records))

    @property
    def stored_names(self) -> list[str]:
        return [record.name for batch in self.batches for record in batch]


@pytest.fixture
def sink_factory() -> Callable[..., RecordingSink]:
    return RecordingSink


def make_weaviate_client(collections: dict[str, Any] | None = None) -> MagicMock:
    """Stand-in for WeaviateAsyncClient with a healthy cluster."""
    client = MagicMock()
    client.connect = AsyncMock()
    client.close = AsyncMock()
    client.collections.list_all = AsyncMock(
        return_value=collections if collections is not None else {"Oracle_Cards": object()}
    )

    collection = MagicMock()
    collection.data.insert_many = AsyncMock(
        return_value=SimpleNamespace(has_errors=False, errors={})
    )
    collection.query.near_text = AsyncMock(return_value=SimpleNamespace(objects=[]))
    collection.query.bm25 = AsyncMock(return_value=SimpleNamespace(objects=[]))
    collection.aggregate.over_all = AsyncMock(return_value=SimpleNamespace(total_count=0))
    client.collections.get.return_value = collection
    return client


@pytest.fixture
def weaviate_client() -> MagicMock:
    return make_weaviate_client()
