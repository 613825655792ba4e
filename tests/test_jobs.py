"""Tests for the offline jobs."""

import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from cardoracle.config import settings
from cardoracle.jobs.download_cards import run_download
from cardoracle.jobs.ingest_cards import run_ingest
from cardoracle.models import ConfigurationError, StoreUnavailableError
from cardoracle.services.card_store import CardStore, ReadinessPolicy


@pytest.fixture
def weaviate_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "weaviate_url", "https://cluster.weaviate.cloud")
    monkeypatch.setattr(settings, "weaviate_api_key", "secret")


@pytest.fixture
def bulk_file(tmp_path: Path, card_factory) -> Path:
    path = tmp_path / "cards.json"
    path.write_text(json.dumps([card_factory(i) for i in range(25)]))
    return path


class TestRunIngest:
    async def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="download_cards"):
            await run_ingest(tmp_path / "absent.json", batch_size=20, max_retries=0)

    async def test_missing_configuration(
        self, bulk_file: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(settings, "weaviate_url", "")

        with pytest.raises(ConfigurationError):
            await run_ingest(bulk_file, batch_size=20, max_retries=0)

    @pytest.mark.usefixtures("weaviate_settings")
    async def test_ingests_and_disconnects(self, bulk_file: Path, weaviate_client) -> None:
        store = CardStore(client_factory=MagicMock(return_value=weaviate_client))

        report = await run_ingest(bulk_file, batch_size=20, max_retries=0, store=store)

        insert = weaviate_client.collections.get.return_value.data.insert_many
        assert insert.await_count == 2
        assert report.written == 25
        assert not store.is_connected()

    @pytest.mark.usefixtures("weaviate_settings")
    async def test_collection_override(self, bulk_file: Path, weaviate_client) -> None:
        store = CardStore(client_factory=MagicMock(return_value=weaviate_client))

        await run_ingest(bulk_file, batch_size=20, max_retries=0, collection="Staging", store=store)

        weaviate_client.collections.get.assert_called_with("Staging")

    @pytest.mark.usefixtures("weaviate_settings")
    async def test_unready_cluster_aborts(self, bulk_file: Path, weaviate_client) -> None:
        weaviate_client.collections.list_all.side_effect = RuntimeError("warming up")
        store = CardStore(
            client_factory=MagicMock(return_value=weaviate_client),
            readiness_policy=ReadinessPolicy.STRICT,
        )

        with pytest.raises(StoreUnavailableError):
            await run_ingest(bulk_file, batch_size=20, max_retries=0, store=store)

        weaviate_client.collections.get.return_value.data.insert_many.assert_not_awaited()

    @pytest.mark.usefixtures("weaviate_settings")
    async def test_retries_enable_retry_policy(self, bulk_file: Path, weaviate_client) -> None:
        insert = weaviate_client.collections.get.return_value.data.insert_many
        ok = insert.return_value
        insert.side_effect = [RuntimeError("transient"), ok, ok]
        store = CardStore(client_factory=MagicMock(return_value=weaviate_client))

        report = await run_ingest(bulk_file, batch_size=20, max_retries=1, store=store)

        assert report.written == 25
        assert report.dropped == 0


class TestRunDownload:
    async def test_delegates_to_downloader(self, tmp_path: Path) -> None:
        target = tmp_path / "oracle.json"
        with patch(
            "cardoracle.jobs.download_cards.download_bulk_data",
            new=AsyncMock(return_value=target),
        ) as download:
            path = await run_download(target, "oracle_cards")

        assert path == target
        download.assert_awaited_once_with(target, data_type="oracle_cards")

    async def test_failure_propagates(self, tmp_path: Path) -> None:
        with patch(
            "cardoracle.jobs.download_cards.download_bulk_data",
            new=AsyncMock(side_effect=RuntimeError("network down")),
        ):
            with pytest.raises(RuntimeError, match="network down"):
                await run_download(tmp_path / "oracle.json", "oracle_cards")
