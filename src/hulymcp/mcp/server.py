"""MCP server: capability discovery and tool calls over stdio or HTTP.

Built on the SDK's low-level server so every tool call returns the
dispatcher's response unchanged, including `isError`.

Example:
    >>> server = McpServer(Dispatcher(registry, context))
    >>> await server.run("stdio")
"""

from __future__ import annotations

import asyncio
import logging
import signal
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Literal

import uvicorn
from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from hulymcp import __version__
from hulymcp.runtime.concurrency import RunningFlag

from .dispatcher import Dispatcher
from .http import create_http_app
from .tools.annotations import resolve_annotations

logger = logging.getLogger("hulymcp.server")

Transport = Literal["stdio", "http"]

SERVER_NAME = "huly-mcp"


class McpServerError(Exception):
    """Server lifecycle misuse or transport failure."""


class McpServer:
    """Owns the protocol server and its run/stop lifecycle.

    Only one `run()` may be active at a time; a second concurrent call raises
    McpServerError. `stop()` may be called any number of times.
    """

    __slots__ = ("_dispatcher", "_server", "_running", "_stop_event", "_uvicorn", "_auto_exit")

    def __init__(self, dispatcher: Dispatcher, name: str = SERVER_NAME, *, auto_exit: bool = True) -> None:
        self._dispatcher = dispatcher
        self._server: Server[Any, Any] = Server(name, version=__version__)
        self._running = RunningFlag()
        self._stop_event: asyncio.Event | None = None
        self._uvicorn: uvicorn.Server | None = None
        self._auto_exit = auto_exit
        self._register_handlers()

    @property
    def lowlevel(self) -> Server[Any, Any]:
        """The SDK server, for embedding or in-memory sessions."""
        return self._server

    @property
    def running(self) -> bool:
        return self._running.is_set

    def list_tools(self) -> list[types.Tool]:
        return [
            types.Tool(
                name=listing.name,
                description=listing.description,
                inputSchema=listing.input_schema,
                annotations=resolve_annotations(listing),
            )
            for listing in self._dispatcher.registry.list_definitions()
        ]

    def _register_handlers(self) -> None:
        server = self._server

        @server.list_tools()
        async def _list_tools() -> list[types.Tool]:
            return self.list_tools()

        # Argument validation is the dispatcher's job; SDK validation would
        # answer with its own message format.
        @server.call_tool(validate_input=False)
        async def _call_tool(name: str, arguments: dict[str, Any] | None) -> types.CallToolResult:
            response = await self._dispatcher.dispatch(name, arguments)
            return response.to_call_tool_result()

    # ─────────────────────────────────────────────────────────────────────────
    # Lifecycle
    # ─────────────────────────────────────────────────────────────────────────

    async def run(self, transport: Transport = "stdio", *, host: str = "127.0.0.1", port: int = 3000) -> None:
        """Serve until stopped, a termination signal arrives, or (stdio) the peer leaves.

        Raises:
            McpServerError: If already running
            ValueError: Unknown transport
        """
        if not self._running.try_set():
            raise McpServerError("MCP server is already running")
        self._stop_event = asyncio.Event()
        try:
            match transport:
                case "stdio":
                    with self._signal_handlers():
                        await self._run_stdio()
                case "http":
                    await self._run_http(host, port)
                case _:
                    raise ValueError(f"Unknown transport: {transport}. Use 'stdio' or 'http'")
        finally:
            self._uvicorn = None
            self._stop_event = None
            self._running.clear()
            logger.info("MCP server stopped")

    def stop(self) -> None:
        """Request shutdown. No-op when not running or already stopping."""
        if self._stop_event is not None and not self._stop_event.is_set():
            logger.info("Shutdown requested")
            self._stop_event.set()
        if self._uvicorn is not None:
            self._uvicorn.should_exit = True

    @contextmanager
    def _signal_handlers(self) -> Iterator[None]:
        loop = asyncio.get_running_loop()
        installed: list[signal.Signals] = []
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, self.stop)
            except (NotImplementedError, RuntimeError, ValueError):
                # Not on the main thread, or the platform lacks signal support
                continue
            installed.append(sig)
        try:
            yield
        finally:
            for sig in installed:
                loop.remove_signal_handler(sig)

    async def _run_stdio(self) -> None:
        assert self._stop_event is not None
        logger.info("MCP server running on stdio")
        async with stdio_server() as (read_stream, write_stream):
            serve = asyncio.create_task(
                self._server.run(read_stream, write_stream, self._server.create_initialization_options())
            )
            stopped = asyncio.create_task(self._stop_event.wait())
            done, _ = await asyncio.wait({serve, stopped}, return_when=asyncio.FIRST_COMPLETED)

            if serve in done and not self._auto_exit:
                logger.info("stdin closed; waiting for a termination signal")
                await stopped
            for task in (serve, stopped):
                task.cancel()
            await asyncio.gather(serve, stopped, return_exceptions=True)
            if serve in done and not serve.cancelled() and (error := serve.exception()) is not None:
                raise McpServerError(f"stdio transport failed: {error}") from error

    async def _run_http(self, host: str, port: int) -> None:
        app = create_http_app(self._server)
        config = uvicorn.Config(app, host=host, port=port, log_config=None, lifespan="on")
        # uvicorn handles SIGINT/SIGTERM itself; stop() sets should_exit
        self._uvicorn = uvicorn.Server(config)
        if self._stop_event is not None and self._stop_event.is_set():
            return
        logger.info(f"MCP server listening on http://{host}:{port}/mcp")
        await self._uvicorn.serve()
