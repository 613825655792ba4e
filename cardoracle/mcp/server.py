"""
MCP server wiring.

Registers every tool from the registry on a FastMCP server. The server
does not own any resources: each call fetches the ToolContext built at
startup, so HTTP mounting and stdio share the same tool code.
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Annotated, Any

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from pydantic import Field

from cardoracle.config import MAX_COLLECTION_IDENTIFIERS, SEARCH_PAGE_SIZE, Settings, settings
from cardoracle.mcp.tools import TOOL_DEFINITIONS, ToolContext, execute_tool
from cardoracle.models.failure import KnownError
from cardoracle.services.card_store import CardStore, ReadinessPolicy, StoreConfig
from cardoracle.services.scryfall_client import ScryfallClient

logger = logging.getLogger(__name__)

SERVER_NAME = "Oracle"

_DESCRIPTIONS = {tool.name: tool.description for tool in TOOL_DEFINITIONS}


async def connect_store_if_configured(store: CardStore, config: Settings) -> bool:
    """
    Try to connect the store at startup.

    A failure degrades the server to "tools work without database features"
    instead of refusing to start.
    """
    if not config.weaviate_url or not config.weaviate_api_key:
        logger.info("Weaviate is not configured; database tools are disabled")
        return False

    try:
        await store.connect(StoreConfig.from_settings(config))
    except Exception as e:
        logger.error("Failed to initialize database connection: %s", e)
        return False
    return True


@asynccontextmanager
async def open_tool_context(config: Settings = settings) -> AsyncIterator[ToolContext]:
    """Build the shared resources for tool calls and release them on exit."""
    scryfall = ScryfallClient(
        base_url=config.scryfall_api_url,
        user_agent=config.scryfall_user_agent,
        timeout=config.request_timeout,
    )
    store = CardStore(
        readiness_policy=ReadinessPolicy(config.readiness_policy),
        allow_unverified_queries=config.allow_unverified_queries,
    )
    await connect_store_if_configured(store, config)

    try:
        yield ToolContext(scryfall=scryfall, store=store)
    finally:
        await store.disconnect()
        await scryfall.aclose()


def create_mcp_server(get_context: Callable[[], ToolContext], **server_settings: Any) -> FastMCP:
    """
    Build a FastMCP server exposing the card tools.

    Args:
        get_context: Returns the ToolContext to use for a call
        server_settings: Passed through to FastMCP (paths, host, port)
    """
    mcp = FastMCP(SERVER_NAME, **server_settings)

    async def run(tool_name: str, arguments: dict[str, Any]) -> str:
        try:
            return await execute_tool(get_context(), tool_name, arguments)
        except KnownError as e:
            logger.warning("Tool %s failed: %s", tool_name, e.message)
            raise ToolError(e.to_text()) from e

    @mcp.tool(name="card-search", description=_DESCRIPTIONS["card-search"])
    async def card_search(
        query: Annotated[str, Field(description="Scryfall search syntax query")],
        page: Annotated[
            int | None,
            Field(ge=1, description=f"Page number; {SEARCH_PAGE_SIZE} cards per page"),
        ] = None,
    ) -> str:
        return await run("card-search", {"query": query, "page": page})

    @mcp.tool(name="card-lookup", description=_DESCRIPTIONS["card-lookup"])
    async def card_lookup(
        name: Annotated[str, Field(description="Card name")],
        fuzzy: Annotated[bool, Field(description="Tolerate minor misspellings")] = False,
    ) -> str:
        return await run("card-lookup", {"name": name, "fuzzy": fuzzy})

    @mcp.tool(name="card-collection", description=_DESCRIPTIONS["card-collection"])
    async def card_collection(
        cardNames: Annotated[  # noqa: N803
            list[str],
            Field(
                min_length=1,
                max_length=MAX_COLLECTION_IDENTIFIERS,
                description=f"Card names (maximum {MAX_COLLECTION_IDENTIFIERS})",
            ),
        ],
    ) -> str:
        return await run("card-collection", {"cardNames": cardNames})

    @mcp.tool(name="database-status", description=_DESCRIPTIONS["database-status"])
    async def database_status() -> str:
        return await run("database-status", {})

    @mcp.tool(name="database-search-cards", description=_DESCRIPTIONS["database-search-cards"])
    async def database_search_cards(
        query: Annotated[str, Field(description="Text to find similar cards for")],
        limit: Annotated[int, Field(ge=1, le=100, description="Maximum results")] = 10,
    ) -> str:
        return await run("database-search-cards", {"query": query, "limit": limit})

    @mcp.tool(name="database-stats", description=_DESCRIPTIONS["database-stats"])
    async def database_stats() -> str:
        return await run("database-stats", {})

    return mcp


async def serve_stdio() -> None:
    """Run the MCP server over stdio (for desktop clients)."""
    async with open_tool_context(settings) as context:
        server = create_mcp_server(lambda: context)
        await server.run_stdio_async()


def main() -> None:
    """CLI entry point."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    asyncio.run(serve_stdio())


if __name__ == "__main__":
    main()
