"""Streamable HTTP transport (stateless).

Routes:
    POST /mcp     -> one JSON-RPC exchange, no session state kept
    GET/DELETE    -> 405 with a JSON-RPC error; there are no SSE streams or sessions
    GET  /health  -> {"status": "ok"}

Example:
    >>> app = create_http_app(server.lowlevel)
    >>> uvicorn.run(app, host="127.0.0.1", port=3000)
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from starlette.applications import Starlette
from starlette.responses import JSONResponse
from starlette.routing import Route

if TYPE_CHECKING:
    from mcp.server.lowlevel import Server
    from starlette.requests import Request
    from starlette.types import Receive, Scope, Send

MCP_PATH = "/mcp"
HEALTH_PATH = "/health"

METHOD_NOT_ALLOWED = -32000


def method_not_allowed() -> JSONResponse:
    return JSONResponse(
        {"jsonrpc": "2.0", "error": {"code": METHOD_NOT_ALLOWED, "message": "Method not allowed."}, "id": None},
        status_code=405,
        headers={"Allow": "POST"},
    )


class McpEndpoint:
    """ASGI endpoint forwarding POSTs to the session manager."""

    __slots__ = ("_manager",)

    def __init__(self, manager: StreamableHTTPSessionManager) -> None:
        self._manager = manager

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("method") != "POST":
            await method_not_allowed()(scope, receive, send)
            return
        await self._manager.handle_request(scope, receive, send)


async def health(request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok"})


def create_http_app(server: Server) -> Starlette:
    """Starlette app serving `server` over stateless streamable HTTP.

    A session manager runs only once, so every app gets its own.
    """
    manager = StreamableHTTPSessionManager(app=server, json_response=False, stateless=True)

    @asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        async with manager.run():
            yield

    routes = [
        Route(MCP_PATH, McpEndpoint(manager)),
        Route(HEALTH_PATH, health, methods=["GET"]),
    ]
    return Starlette(routes=routes, lifespan=lifespan)
