"""Uniform tool-call response shape.

Every dispatch produces exactly one WireResponse. The `meta` field records
the wire error code and tag for logging and tests; it is excluded from the
serialized wire shape.
"""

from __future__ import annotations

from typing import Any, Literal

import orjson
from mcp import types
from pydantic import BaseModel, ConfigDict, Field
from pydantic_core import to_jsonable_python

from hulymcp.foundation.errors import WireErrorCode


class TextContent(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["text"] = "text"
    text: str


class ErrorMeta(BaseModel):
    """Internal error metadata. Never sent to the caller."""

    model_config = ConfigDict(frozen=True)

    error_code: WireErrorCode
    error_tag: str | None = None


class WireResponse(BaseModel):
    """`{content: [{type: "text", text}], isError?: true}` plus internal meta."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    content: tuple[TextContent, ...]
    is_error: bool = Field(default=False, serialization_alias="isError")
    meta: ErrorMeta | None = Field(default=None, exclude=True)

    @property
    def text(self) -> str:
        return "".join(c.text for c in self.content)

    @property
    def error_code(self) -> WireErrorCode | None:
        return self.meta.error_code if self.meta else None

    @property
    def error_tag(self) -> str | None:
        return self.meta.error_tag if self.meta else None

    def to_wire(self) -> dict[str, Any]:
        """Public shape; `isError` appears only on errors."""
        return self.model_dump(mode="json", by_alias=True, exclude={"is_error"} if not self.is_error else None)

    def to_call_tool_result(self) -> types.CallToolResult:
        return types.CallToolResult(
            content=[types.TextContent(type="text", text=c.text) for c in self.content],
            isError=self.is_error,
        )


def success_response(value: object) -> WireResponse:
    """Serialize a domain result as 2-space indented JSON text."""
    payload = to_jsonable_python(value, by_alias=True, exclude_none=True)
    text = orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode()
    return WireResponse(content=(TextContent(text=text),))


def error_response(text: str, code: WireErrorCode, tag: str | None = None) -> WireResponse:
    return WireResponse(
        content=(TextContent(text=text),),
        is_error=True,
        meta=ErrorMeta(error_code=code, error_tag=tag),
    )
