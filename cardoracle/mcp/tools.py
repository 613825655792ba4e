"""
MCP tool definitions.

Each tool is a stateless handler: validated arguments go out as one
Scryfall call or store query, and formatted text comes back. Shared
resources (HTTP client, store gateway) arrive through ToolContext rather
than module globals.
"""

import logging
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from cardoracle.config import MAX_COLLECTION_IDENTIFIERS, SEARCH_PAGE_SIZE
from cardoracle.models.failure import ToolInputError
from cardoracle.services.card_store import CardStore
from cardoracle.services.formatting import (
    format_card_json,
    format_collection_results,
    format_search_results,
    format_store_hits,
    format_store_stats,
)
from cardoracle.services.scryfall_client import ScryfallClient

logger = logging.getLogger(__name__)


@dataclass
class ToolContext:
    """Resources shared by all tool invocations."""

    scryfall: ScryfallClient
    store: CardStore


@dataclass
class ToolDefinition:
    """Definition of an MCP tool."""

    name: str
    description: str
    parameters: dict[str, Any]


# =============================================================================
# ARGUMENT MODELS
# =============================================================================


class CardSearchArgs(BaseModel):
    query: str = Field(..., min_length=1)
    page: int | None = Field(default=None, ge=1)


class CardLookupArgs(BaseModel):
    name: str = Field(..., min_length=1)
    fuzzy: bool = False


class CardCollectionArgs(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    card_names: list[str] = Field(
        ...,
        alias="cardNames",
        min_length=1,
        max_length=MAX_COLLECTION_IDENTIFIERS,
    )


class DatabaseSearchArgs(BaseModel):
    query: str = Field(..., min_length=1)
    limit: int = Field(default=10, ge=1, le=100)


class NoArgs(BaseModel):
    pass


TOOL_ARGUMENTS: dict[str, type[BaseModel]] = {
    "card-search": CardSearchArgs,
    "card-lookup": CardLookupArgs,
    "card-collection": CardCollectionArgs,
    "database-status": NoArgs,
    "database-search-cards": DatabaseSearchArgs,
    "database-stats": NoArgs,
}


# Tool definitions exposed over MCP
TOOL_DEFINITIONS: list[ToolDefinition] = [
    ToolDefinition(
        name="card-search",
        description="Search for Magic: The Gathering cards using Scryfall's search syntax.",
        parameters={
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": (
                        "The search query using Scryfall's search syntax "
                        "(see https://scryfall.com/docs/syntax)"
                    ),
                },
                "page": {
                    "type": "integer",
                    "minimum": 1,
                    "description": (
                        f"The page number to return. Each page contains {SEARCH_PAGE_SIZE} cards."
                    ),
                },
            },
            "required": ["query"],
        },
    ),
    ToolDefinition(
        name="card-lookup",
        description="Look up a single card by name and return its full details.",
        parameters={
            "type": "object",
            "properties": {
                "name": {
                    "type": "string",
                    "description": "The name of the Magic: The Gathering card to search for",
                },
                "fuzzy": {
                    "type": "boolean",
                    "description": "When true, tolerates minor misspellings",
                    "default": False,
                },
            },
            "required": ["name"],
        },
    ),
    ToolDefinition(
        name="card-collection",
        description="Get details for several cards at once by name.",
        parameters={
            "type": "object",
            "properties": {
                "cardNames": {
                    "type": "array",
                    "items": {"type": "string"},
                    "minItems": 1,
                    "maxItems": MAX_COLLECTION_IDENTIFIERS,
                    "description": (
                        "Card names to look up "
                        f"(maximum {MAX_COLLECTION_IDENTIFIERS} cards)"
                    ),
                },
            },
            "required": ["cardNames"],
        },
    ),
    ToolDefinition(
        name="database-status",
        description="Check the card database connection.",
        parameters={
            "type": "object",
            "properties": {},
            "required": [],
        },
    ),
    ToolDefinition(
        name="database-search-cards",
        description="Find cards similar to a description in the card database.",
        parameters={
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "Text to find similar cards for",
                },
                "limit": {
                    "type": "integer",
                    "minimum": 1,
                    "maximum": 100,
                    "description": "Maximum number of results",
                    "default": 10,
                },
            },
            "required": ["query"],
        },
    ),
    ToolDefinition(
        name="database-stats",
        description="Get card database statistics.",
        parameters={
            "type": "object",
            "properties": {},
            "required": [],
        },
    ),
]


# =============================================================================
# SCRYFALL TOOLS
# =============================================================================


async def card_search_tool(context: ToolContext, query: str, page: int | None = None) -> str:
    """
    Search Scryfall and summarize one page of results.

    Raises:
        UpstreamError: If Scryfall rejects the request
        SchemaDriftError: If the response no longer matches our models
    """
    results = await context.scryfall.search(query, page=page)
    return format_search_results(results, page)


async def card_lookup_tool(context: ToolContext, name: str, fuzzy: bool = False) -> str:
    """Return one card as pretty-printed JSON."""
    card = await context.scryfall.named(name, fuzzy=fuzzy)
    return format_card_json(card)


async def card_collection_tool(context: ToolContext, card_names: list[str]) -> str:
    """Look up several cards and report found vs not found."""
    results = await context.scryfall.collection(card_names)
    return format_collection_results(results, requested=len(card_names))


# =============================================================================
# DATABASE TOOLS
# =============================================================================

NOT_CONNECTED = "❌ Database is not connected. The Weaviate database connection is not available."
NOT_VERIFIED = (
    "⚠️ Database connection exists but has not passed its readiness check. "
    "Queries are disabled until it does."
)


async def database_status_tool(context: ToolContext) -> str:
    """Report connection state and run a live health probe."""
    store = context.store
    if not store.is_connected():
        return NOT_CONNECTED

    if await store.test_connection():
        return "✅ Database is connected and ready for queries."
    return "⚠️ Database connection exists but is not responding to health checks."


async def database_search_tool(context: ToolContext, query: str, limit: int = 10) -> str:
    """Similarity search over the stored cards."""
    store = context.store
    if not store.is_connected():
        return "❌ Database is not connected. Cannot perform vector search."
    if not store.can_query():
        return NOT_VERIFIED

    try:
        hits = await store.search(query, limit=limit)
    except Exception as e:
        logger.error("Database search error: %s", e)
        return f"❌ Database search failed: {e}"

    return format_store_hits(query, hits)


async def database_stats_tool(context: ToolContext) -> str:
    """Collection names and card count."""
    store = context.store
    if not store.is_connected():
        return "❌ Database is not connected. Cannot retrieve statistics."
    if not store.can_query():
        return NOT_VERIFIED

    try:
        stats = await store.stats()
    except Exception as e:
        logger.error("Database stats error: %s", e)
        return f"❌ Failed to retrieve database statistics: {e}"

    return format_store_stats(stats)


def parse_arguments(tool_name: str, arguments: dict[str, Any]) -> Any:
    """
    Validate tool arguments before any outbound call is made.

    Raises:
        ValueError: If tool name is unknown
        ToolInputError: If arguments violate the tool's parameter schema
    """
    model = TOOL_ARGUMENTS.get(tool_name)
    if model is None:
        raise ValueError(f"Unknown tool: {tool_name}")
    try:
        return model.model_validate(arguments)
    except ValidationError as e:
        raise ToolInputError(tool_name, str(e)) from e


async def execute_tool(
    context: ToolContext,
    tool_name: str,
    arguments: dict[str, Any],
) -> str:
    """
    Execute an MCP tool by name.

    Args:
        context: Shared resources
        tool_name: Name of the tool to execute
        arguments: Tool arguments

    Returns:
        Tool result as text

    Raises:
        ValueError: If tool name is unknown
        KnownError: If arguments are invalid or a Scryfall call fails
    """
    args = parse_arguments(tool_name, arguments)

    if tool_name == "card-search":
        return await card_search_tool(context, query=args.query, page=args.page)
    elif tool_name == "card-lookup":
        return await card_lookup_tool(context, name=args.name, fuzzy=args.fuzzy)
    elif tool_name == "card-collection":
        return await card_collection_tool(context, card_names=args.card_names)
    elif tool_name == "database-status":
        return await database_status_tool(context)
    elif tool_name == "database-search-cards":
        return await database_search_tool(context, query=args.query, limit=args.limit)
    elif tool_name == "database-stats":
        return await database_stats_tool(context)
    else:
        raise ValueError(f"Unknown tool: {tool_name}")
