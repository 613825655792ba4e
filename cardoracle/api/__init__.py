from cardoracle.api.health import get_tool_context
from cardoracle.api.health import router as health_router

__all__ = [
    "get_tool_context",
    "health_router",
]
