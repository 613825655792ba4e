"""
Health check endpoints.

Provides liveness and readiness probes. The card database is optional:
a missing connection is reported but does not make the service unready.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status
from pydantic import BaseModel

from cardoracle.mcp.tools import ToolContext

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    database: str | None = None


def get_tool_context(request: Request) -> ToolContext:
    """Dependency that provides the ToolContext built at startup."""
    context: ToolContext = request.app.state.tool_context
    return context


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """
    Liveness probe.

    Returns healthy if the service is running.
    Does not check dependencies.
    """
    return HealthResponse(status="healthy")


@router.get(
    "/ready",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
async def ready(
    response: Response,
    context: Annotated[ToolContext, Depends(get_tool_context)],
) -> HealthResponse:
    """
    Readiness probe.

    Returns 503 only when a database connection exists but stops answering;
    running without a database is a supported degraded mode.
    """
    store = context.store
    if not store.is_connected():
        return HealthResponse(status="ready", database="disconnected")

    if await store.test_connection():
        return HealthResponse(status="ready", database="connected")

    response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return HealthResponse(status="not ready", database="unresponsive")
