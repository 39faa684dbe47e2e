"""Tool registry: name-addressable, category-filtered tool definitions.

The registry is built once at startup and read-only afterwards. Lookup of an
unknown name is a normal outcome and returns None.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from enum import StrEnum
from types import MappingProxyType
from typing import Annotated, Any, Awaitable, Callable

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger("hulymcp.registry")


class Category(StrEnum):
    """Closed set of toolset categories."""
    PROJECTS = "projects"
    ISSUES = "issues"
    CONTACTS = "contacts"
    DOCUMENTS = "documents"
    WORKSPACE = "workspace"


VALID_CATEGORIES: frozenset[str] = frozenset(c.value for c in Category)


class ToolDefinition(BaseModel):
    """A named, schema-described callable unit.

    Attributes:
        name: Unique snake_case identifier, stable across versions
        description: What the tool does, shown to the calling agent
        category: Toolset the tool belongs to
        params: Pydantic model describing and validating the input
        handler: Async callable taking (validated params, tool context)
        annotations: Overrides for derived behavior hints
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: Annotated[str, Field(min_length=2, max_length=64, pattern=r"^[a-z][a-z0-9_]*$")]
    description: Annotated[str, Field(min_length=10)]
    category: Category
    params: type[BaseModel]
    handler: Callable[..., Awaitable[Any]] = Field(repr=False, exclude=True)
    annotations: dict[str, Any] | None = None

    def input_schema(self) -> dict[str, Any]:
        """JSON Schema for the tool input, as published in capability discovery."""
        schema = self.params.model_json_schema()
        schema.pop("title", None)
        schema.setdefault("properties", {})
        return schema


class ToolListing(BaseModel):
    """Capability-discovery entry for one tool."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    description: str
    input_schema: dict[str, Any] = Field(serialization_alias="inputSchema")
    category: Category
    annotations: dict[str, Any] | None = None


def warn_unknown_categories(names: Iterable[str]) -> list[str]:
    """Log a warning for each unknown category name. Returns the unknown names."""
    unknown = [n for n in names if n not in VALID_CATEGORIES]
    valid = ", ".join(sorted(VALID_CATEGORIES))
    for name in unknown:
        logger.warning(f"Unknown toolset category '{name}', ignoring. Valid categories: {valid}")
    return unknown


def parse_toolsets(raw: str | None) -> frozenset[str] | None:
    """Parse a comma-separated toolset selection.

    Names are trimmed and lowercased; unknown names are warned about and
    dropped. Returns None (all categories enabled) when nothing valid remains.

    Example:
        >>> sorted(parse_toolsets("Issues, projects"))
        ['issues', 'projects']
        >>> parse_toolsets("") is None
        True
    """
    if raw is None:
        return None
    names = [n.strip().lower() for n in raw.split(",")]
    names = [n for n in names if n]
    unknown = set(warn_unknown_categories(names))
    valid = frozenset(n for n in names if n not in unknown)
    return valid or None


class ToolRegistry:
    """Immutable mapping from tool name to ToolDefinition.

    Example:
        >>> registry = ToolRegistry.build(ALL_TOOLS, enabled_categories={"issues"})
        >>> registry.get("list_issues").category
        <Category.ISSUES: 'issues'>
        >>> registry.get("nope") is None
        True
    """

    __slots__ = ("_tools",)

    def __init__(self, tools: Mapping[str, ToolDefinition]) -> None:
        self._tools: Mapping[str, ToolDefinition] = MappingProxyType(dict(tools))

    @classmethod
    def build(
        cls,
        definitions: Iterable[ToolDefinition],
        enabled_categories: Iterable[str] | None = None,
    ) -> ToolRegistry:
        """Build a registry, optionally keeping only the given categories.

        Raises:
            ValueError: If two definitions share a name
        """
        tools: dict[str, ToolDefinition] = {}
        for definition in definitions:
            if definition.name in tools:
                raise ValueError(f"Tool '{definition.name}' already registered.")
            tools[definition.name] = definition

        if enabled_categories is not None:
            requested = frozenset(c.strip().lower() for c in enabled_categories)
            warn_unknown_categories(sorted(requested))
            tools = {name: d for name, d in tools.items() if d.category.value in requested}

        return cls(tools)

    def get(self, name: str) -> ToolDefinition | None:
        """Tool by name, or None."""
        return self._tools.get(name)

    lookup = get

    def list_definitions(self) -> list[ToolListing]:
        """Discovery entries in registration order."""
        return [
            ToolListing(
                name=d.name,
                description=d.description,
                input_schema=d.input_schema(),
                category=d.category,
                annotations=d.annotations,
            )
            for d in self._tools.values()
        ]

    @property
    def categories(self) -> frozenset[Category]:
        return frozenset(d.category for d in self._tools.values())

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[ToolDefinition]:
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)

    def __repr__(self) -> str:
        return f"ToolRegistry({list(self._tools)})"
