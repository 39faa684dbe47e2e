"""MCP surface: tool definitions, dispatch, error translation, transports."""

from .dispatcher import Dispatcher
from .error_mapping import (
    SANITIZED_FALLBACK,
    UNEXPECTED_ERROR,
    WIRE_CODES,
    format_validation_error,
    map_domain_error,
    sanitize,
)
from .http import create_http_app
from .response import WireResponse, error_response, success_response
from .server import McpServer, McpServerError
from .tools import ALL_TOOLS, ToolContext, build_registry

__all__ = [
    "Dispatcher", "McpServer", "McpServerError", "create_http_app",
    "WireResponse", "success_response", "error_response",
    "SANITIZED_FALLBACK", "UNEXPECTED_ERROR", "WIRE_CODES",
    "sanitize", "map_domain_error", "format_validation_error",
    "ALL_TOOLS", "ToolContext", "build_registry",
]
