"""
Scryfall bulk data reader.

Bulk exports are JSON arrays of card objects that can run to several
gigabytes, so they are parsed incrementally and never loaded whole.

Bulk data: https://scryfall.com/docs/api/bulk-data
"""

import gzip
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any, BinaryIO

import httpx
import ijson

from cardoracle.config import settings

logger = logging.getLogger(__name__)

SCRYFALL_BULK_API = "https://api.scryfall.com/bulk-data"

GZIP_MAGIC = b"\x1f\x8b"


@contextmanager
def open_bulk_file(path: Path) -> Iterator[BinaryIO]:
    """
    Open a bulk file, transparently handling gzip-compressed inputs.

    Compression is detected from the first two bytes rather than the suffix.
    """
    raw = open(path, "rb")
    try:
        signature = raw.read(2)
        raw.seek(0)
        if signature == GZIP_MAGIC:
            with gzip.GzipFile(fileobj=raw) as gz:
                yield gz
        else:
            yield raw
    finally:
        raw.close()


def iter_bulk_cards(path: Path) -> Iterator[Any]:
    """
    Lazily yield top-level array elements from a bulk JSON file.

    Elements are parsed as bytes arrive, in file order. Each call starts
    again from the beginning of the file; there is no mid-stream resume.

    Args:
        path: Path to a JSON document whose top-level value is an array

    Raises:
        FileNotFoundError: If the file does not exist
        ijson.JSONError: If the document is not well-formed JSON
    """
    with open_bulk_file(path) as fh:
        yield from ijson.items(fh, "item", use_float=True)


async def get_bulk_data_url(
    data_type: str = "oracle_cards",
    client: httpx.AsyncClient | None = None,
) -> str:
    """
    Fetch the download URL for a Scryfall bulk data export.

    Args:
        data_type: Bulk type (oracle_cards, default_cards, all_cards, ...)
        client: Optional client for connection reuse

    Returns:
        URL to download the bulk JSON file

    Raises:
        ValueError: If the bulk type is unknown
        httpx.HTTPError: If API request fails
    """
    headers = {"User-Agent": settings.scryfall_user_agent, "Accept": "*/*"}
    if client is None:
        async with httpx.AsyncClient(timeout=settings.request_timeout) as own_client:
            response = await own_client.get(SCRYFALL_BULK_API, headers=headers)
    else:
        response = await client.get(SCRYFALL_BULK_API, headers=headers)
    response.raise_for_status()

    for entry in response.json().get("data", []):
        if entry.get("type") == data_type:
            return str(entry["download_uri"])

    raise ValueError(f"Could not find {data_type} bulk data URL")


async def download_bulk_data(output_path: Path, data_type: str = "oracle_cards") -> Path:
    """
    Download a Scryfall bulk export to a file.

    Args:
        output_path: Where to save the JSON file
        data_type: Bulk type to download

    Returns:
        Path to the downloaded file

    Note:
        oracle_cards is ~150MB, all_cards is several GB. The body is streamed.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)

    async with httpx.AsyncClient(timeout=settings.request_timeout, follow_redirects=True) as client:
        url = await get_bulk_data_url(data_type, client=client)
        logger.info("Downloading %s bulk data from %s", data_type, url)

        # Stream download due to file size
        async with client.stream(
            "GET",
            url,
            headers={"User-Agent": settings.scryfall_user_agent},
            timeout=300.0,
        ) as response:
            response.raise_for_status()
            with open(output_path, "wb") as f:
                async for chunk in response.aiter_bytes(8192):
                    f.write(chunk)

    return output_path
