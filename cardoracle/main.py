from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import version as pkg_version
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from cardoracle.api import health_router
from cardoracle.config import settings
from cardoracle.mcp.server import create_mcp_server, open_tool_context
from cardoracle.mcp.tools import ToolContext


def _tool_context() -> ToolContext:
    context: ToolContext = app.state.tool_context
    return context


mcp_server = create_mcp_server(_tool_context)
mcp_http_app = mcp_server.streamable_http_app()
mcp_sse_app = mcp_server.sse_app()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    async with open_tool_context(settings) as context:
        _app.state.tool_context = context
        async with mcp_server.session_manager.run():
            yield


app = FastAPI(
    title=settings.app_name,
    version=pkg_version("cardoracle"),
    debug=settings.debug,
    lifespan=lifespan,
)

app.include_router(health_router)

# /mcp (streamable HTTP), /sse and /messages/ (SSE transport)
app.router.routes.extend(mcp_http_app.routes)
app.router.routes.extend(mcp_sse_app.routes)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Tighten in production
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Static UI build; must be mounted last so it only catches unmatched paths
if Path(settings.static_dir).is_dir():
    app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")
