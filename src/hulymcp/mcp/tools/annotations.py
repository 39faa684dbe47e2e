"""Behavior hints derived from tool names."""

from __future__ import annotations

from typing import Any

from mcp import types

from hulymcp.foundation.registry import ToolDefinition, ToolListing

READ_PREFIXES = ("list_", "get_", "search_", "fulltext_", "download_", "preview_")
CREATE_PREFIXES = ("create_", "add_", "upload_", "send_", "log_")
UPDATE_PREFIXES = (
    "update_", "set_", "pin_", "unpin_", "mark_", "archive_",
    "start_", "stop_", "save_", "unsave_", "remove_",
)
DELETE_PREFIXES = ("delete_",)


def derive_title(name: str) -> str:
    """'list_issues' -> 'List Issues'."""
    return " ".join(w[:1].upper() + w[1:] for w in name.split("_"))


def _hints(name: str) -> dict[str, bool]:
    # (readOnly, destructive, idempotent)
    if name.startswith(READ_PREFIXES):
        flags = (True, False, True)
    elif name.startswith(CREATE_PREFIXES):
        flags = (False, False, False)
    elif name.startswith(UPDATE_PREFIXES):
        flags = (False, False, True)
    elif name.startswith(DELETE_PREFIXES):
        flags = (False, True, True)
    else:
        flags = (False, True, False)
    read_only, destructive, idempotent = flags
    return {
        "readOnlyHint": read_only,
        "destructiveHint": destructive,
        "idempotentHint": idempotent,
        "openWorldHint": False,
    }


def resolve_annotations(tool: ToolDefinition | ToolListing) -> types.ToolAnnotations:
    """Derived hints, overridden by the definition's explicit annotations."""
    merged: dict[str, Any] = {"title": derive_title(tool.name), **_hints(tool.name), **(tool.annotations or {})}
    return types.ToolAnnotations(**merged)
