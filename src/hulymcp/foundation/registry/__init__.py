"""Tool registry and toolset selection."""

from .registry import (
    VALID_CATEGORIES,
    Category,
    ToolDefinition,
    ToolListing,
    ToolRegistry,
    parse_toolsets,
    warn_unknown_categories,
)

__all__ = [
    "Category", "VALID_CATEGORIES", "ToolDefinition", "ToolListing", "ToolRegistry",
    "parse_toolsets", "warn_unknown_categories",
]
