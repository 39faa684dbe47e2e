"""Process entry point: settings, logging, sessions, server.

Exit status is 0 on a clean shutdown and 1 on a configuration or
connection failure, with a one-line reason on stderr.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from contextlib import AsyncExitStack

from hulymcp.foundation.config import ConfigError, Settings, load_settings
from hulymcp.foundation.errors import DomainError
from hulymcp.foundation.registry import parse_toolsets
from hulymcp.huly import ConnectionConfig, ConnectionManager, connect_account_session, connect_data_session
from hulymcp.mcp import Dispatcher, McpServer, ToolContext, build_registry
from hulymcp.runtime.observability import configure_logging

logger = logging.getLogger("hulymcp.cli")


async def serve(settings: Settings) -> None:
    """Connect both sessions, serve until shutdown, then close each session once.

    Raises:
        DomainError: A session could not be established
    """
    registry = build_registry(parse_toolsets(settings.server.toolsets))
    logger.info(f"Enabled tools: {', '.join(t.name for t in registry)}")
    config = ConnectionConfig.from_settings(settings.huly)

    async with AsyncExitStack() as stack:
        data = await stack.enter_async_context(ConnectionManager(config, connect_data_session, label="data"))
        account = await stack.enter_async_context(
            ConnectionManager(
                config,
                connect_account_session,
                label="account",
                error_prefix="Workspace client connection failed",
            )
        )
        server = McpServer(
            Dispatcher(registry, ToolContext(data=data, account=account)),
            auto_exit=settings.server.auto_exit,
        )
        await server.run(settings.server.transport, host=settings.server.http_host, port=settings.server.http_port)


def main() -> None:
    try:
        settings = load_settings()
    except ConfigError as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)

    configure_logging(settings.logging.format, settings.logging.level)
    try:
        asyncio.run(serve(settings))
    except DomainError as e:
        print(f"{e.tag}: {e.message}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        pass
