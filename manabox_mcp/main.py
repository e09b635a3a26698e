"""
HTTP application.

Serves the MCP streamable HTTP transport at /mcp next to the health
probes. Any other path is 404.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version

from fastapi import FastAPI
from fastmcp import FastMCP

from manabox_mcp.api import health_router
from manabox_mcp.config import settings
from manabox_mcp.db.database import init_db

MCP_PATH = "/mcp"


def _app_version() -> str:
    try:
        return pkg_version("manabox-mcp")
    except PackageNotFoundError:
        return "0.0.0"


def create_app(mcp_server: FastMCP) -> FastAPI:
    """
    Build the HTTP app around an MCP server.

    The MCP transport runs stateless: every request gets its own transport
    session, and tool calls borrow a database session per call.
    """
    mcp_app = mcp_server.http_app(path=MCP_PATH, stateless_http=True)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan handler for startup/shutdown."""
        await init_db()
        async with mcp_app.lifespan(app):
            yield

    app = FastAPI(
        title=settings.app_name,
        version=_app_version(),
        lifespan=lifespan,
    )

    app.include_router(health_router)

    # Mounted last so the health routes match first
    app.mount("/", mcp_app)

    return app
