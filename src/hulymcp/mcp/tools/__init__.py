"""Tool definitions, one module per category."""

from __future__ import annotations

from collections.abc import Iterable

from hulymcp.foundation.registry import ToolDefinition, ToolRegistry

from . import contacts, documents, issues, projects, workspace
from .annotations import derive_title, resolve_annotations
from .context import ToolContext

ALL_TOOLS: tuple[ToolDefinition, ...] = (
    *projects.TOOLS,
    *issues.TOOLS,
    *contacts.TOOLS,
    *documents.TOOLS,
    *workspace.TOOLS,
)


def build_registry(enabled_categories: Iterable[str] | None = None) -> ToolRegistry:
    """Registry of every built-in tool, optionally filtered by category."""
    return ToolRegistry.build(ALL_TOOLS, enabled_categories)


__all__ = ["ALL_TOOLS", "ToolContext", "build_registry", "derive_title", "resolve_annotations"]
