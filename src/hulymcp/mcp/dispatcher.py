"""Request dispatch: one untyped (name, arguments) pair in, one WireResponse out.

Outcome classes and their responses:

    unknown tool      -> InvalidParams  "Unknown tool: <name>"
    invalid arguments -> InvalidParams  every violated field path
    DomainError       -> per-tag mapping in error_mapping
    defect            -> InternalError  generic text, details logged
    cancellation      -> InternalError  generic text

No exception escapes `dispatch`. A swallowed cancellation does not stop an
enclosing cancel scope: the transport's task group re-delivers it at the
next checkpoint.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping

from pydantic import ValidationError

from hulymcp.foundation.errors import DomainError
from hulymcp.foundation.registry import ToolRegistry

from .error_mapping import cancelled, map_domain_error, map_validation_error, unexpected_error, unknown_tool
from .response import WireResponse, success_response

logger = logging.getLogger("hulymcp.dispatch")


class Dispatcher:
    """Routes tool calls through lookup, validation, execution and translation.

    Args:
        registry: Enabled tools
        context: Passed to every handler as its second argument
    """

    __slots__ = ("_registry", "_context")

    def __init__(self, registry: ToolRegistry, context: object) -> None:
        self._registry = registry
        self._context = context

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    async def dispatch(self, name: str, raw_args: Mapping[str, object] | None = None) -> WireResponse:
        tool = self._registry.get(name)
        if tool is None:
            logger.info(f"Unknown tool requested: {name}")
            return unknown_tool(name)

        try:
            params = tool.params.model_validate(raw_args if raw_args is not None else {})
        except ValidationError as e:
            logger.info(f"[{name}] Invalid parameters ({e.error_count()} error(s))")
            return map_validation_error(e, name)

        try:
            value = await tool.handler(params, self._context)
        except DomainError as e:
            logger.info(f"[{name}] {e.tag}: {e.message}")
            return map_domain_error(e)
        except asyncio.CancelledError:
            logger.warning(f"[{name}] Cancelled")
            return cancelled()
        except Exception:
            logger.exception(f"[{name}] Unexpected error")
            return unexpected_error()

        try:
            return success_response(value)
        except Exception:
            logger.exception(f"[{name}] Failed to serialize result")
            return unexpected_error()
