import os
from contextlib import asynccontextmanager
from typing import AsyncIterator

import uvicorn

from mcp import types as mcp_types
from mcp.server.lowlevel import Server
from mcp.server.sse import SseServerTransport

from starlette.applications import Starlette
from starlette.routing import Mount, Route
from starlette.responses import JSONResponse, PlainTextResponse

from .otel import init_tracing
from .src.client import DAAdminClient
from .src.config import settings
from .src.logging import jlog
from .src.registry import TOOLS, call_tool as run_tool

os.environ.setdefault("SERVICE_NAME", settings.service_name)

# -----------------------
# MCP server and clients
# -----------------------

da_client = DAAdminClient(settings)

app = Server("da-admin-mcp-server")
sse = SseServerTransport("/messages/")

@app.list_tools()
async def list_tools() -> list[mcp_types.Tool]:
    """MCP handler to list available tools."""
    tools = [tool.to_mcp() for tool in TOOLS]
    jlog(event="list_tools", tools=[t.name for t in tools])
    return tools

@app.call_tool()
async def call_tool(name: str, arguments: dict) -> list[mcp_types.TextContent]:
    """MCP handler to execute a tool call."""
    jlog(event="call_tool", tool=name)
    return await run_tool(da_client, name, arguments)

async def handle_sse(request):
    async with sse.connect_sse(
        request.scope, request.receive, request._send
    ) as streams:
        await app.run(
            streams[0], streams[1], app.create_initialization_options()
        )
    return PlainTextResponse("OK", status_code=200)

async def health(request):
    return JSONResponse({
        "status": "ok",
        "service": settings.service_name,
        "admin_api_url": settings.admin_api_url,
        "authenticated": bool(settings.da_admin_api_token),
        "tools": [tool.name for tool in TOOLS],
    })

@asynccontextmanager
async def lifespan(_app: Starlette) -> AsyncIterator[None]:
    try:
        yield
    finally:
        await da_client.aclose()

starlette_app = Starlette(
    routes=[
        Route("/sse", endpoint=handle_sse),
        Route("/health", endpoint=health),
        Mount("/messages/", app=sse.handle_post_message),
    ],
    lifespan=lifespan,
)
tracer = init_tracing(starlette_app, service_name=settings.service_name, service_version="v1")


def main() -> None:
    jlog(event="server_start", host=settings.app_host, port=settings.app_port)
    try:
        uvicorn.run(starlette_app, host=settings.app_host, port=settings.app_port)
    except KeyboardInterrupt:
        jlog(event="server_stopped_by_user")
    finally:
        jlog(event="server_exit")


if __name__ == "__main__":
    main()
