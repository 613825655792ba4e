"""
Scryfall API client.

Thin async wrapper around the three endpoints the tools use. Every
response is validated before it is returned; a body that parses but does
not validate raises SchemaDriftError rather than a generic parse error.

API docs: https://scryfall.com/docs/api
"""

import logging
from typing import Any

import httpx

from cardoracle.config import MAX_COLLECTION_IDENTIFIERS, settings
from cardoracle.models.card import (
    CardCollection,
    CardList,
    ScryfallCard,
    validate_card,
    validate_card_collection,
    validate_card_list,
)
from cardoracle.models.failure import FailureKind, UpstreamError
from cardoracle.models.validation import ValidationResult

logger = logging.getLogger(__name__)


def build_headers(user_agent: str) -> dict[str, str]:
    """Headers Scryfall requires on every request."""
    return {
        "User-Agent": user_agent,
        "Accept": "*/*",
        "Content-Type": "application/json",
    }


class ScryfallClient:
    """
    Async client for the Scryfall card API.

    Usage:
        async with ScryfallClient() as scryfall:
            results = await scryfall.search("t:dragon cmc<=4")
    """

    def __init__(
        self,
        base_url: str | None = None,
        user_agent: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url or settings.scryfall_api_url,
            headers=build_headers(user_agent or settings.scryfall_user_agent),
            timeout=timeout if timeout is not None else settings.request_timeout,
        )

    async def __aenter__(self) -> "ScryfallClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        """
        Issue a request and return the decoded JSON body.

        Raises:
            UpstreamError: On transport failure or non-success status
        """
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            raise UpstreamError(
                f"Scryfall API request timed out: {e}",
                kind=FailureKind.SERVICE_UNAVAILABLE,
            ) from e
        except httpx.RequestError as e:
            raise UpstreamError(
                f"Scryfall API request failed: {e}",
                kind=FailureKind.SERVICE_UNAVAILABLE,
            ) from e

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if not response.is_success:
            raise UpstreamError.from_payload(response.status_code, payload)
        if payload is None:
            raise UpstreamError(
                f"Scryfall API error: {response.status_code} - response was not JSON",
                status_code=response.status_code,
            )
        return payload

    @staticmethod
    def _checked(result: ValidationResult[Any], endpoint: str) -> Any:
        if not result.ok:
            logger.error("Schema validation failed for %s:\n%s", endpoint, result.describe())
        return result.unwrap()

    async def search(self, query: str, page: int | None = None) -> CardList:
        """
        Full-text search using Scryfall syntax.

        Args:
            query: Search query (https://scryfall.com/docs/syntax)
            page: 1-based results page; omitted means the first page

        Raises:
            UpstreamError: If Scryfall rejects the query (including "no cards found")
            SchemaDriftError: If the response no longer matches CardList
        """
        params: dict[str, str] = {"q": query}
        if page:
            params["page"] = str(page)

        payload = await self._request("GET", "/cards/search", params=params)
        result: CardList = self._checked(validate_card_list(payload), "/cards/search")
        return result

    async def named(self, name: str, fuzzy: bool = False) -> ScryfallCard:
        """Look up one card by exact (default) or fuzzy name."""
        params = {"fuzzy" if fuzzy else "exact": name}

        payload = await self._request("GET", "/cards/named", params=params)
        card: ScryfallCard = self._checked(validate_card(payload), "/cards/named")
        return card

    async def collection(self, names: list[str]) -> CardCollection:
        """
        Fetch several cards by name in one request.

        Raises:
            ValueError: If more than 75 names are given
        """
        if len(names) > MAX_COLLECTION_IDENTIFIERS:
            raise ValueError(
                f"At most {MAX_COLLECTION_IDENTIFIERS} identifiers per request, got {len(names)}"
            )

        body = {"identifiers": [{"name": name} for name in names]}
        payload = await self._request("POST", "/cards/collection", json=body)
        result: CardCollection = self._checked(
            validate_card_collection(payload), "/cards/collection"
        )
        return result
