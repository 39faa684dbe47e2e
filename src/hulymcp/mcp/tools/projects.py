from __future__ import annotations

from hulymcp.domain.schemas import ListProjectsParams, ListProjectsResult
from hulymcp.foundation.registry import Category, ToolDefinition
from hulymcp.huly.operations import list_projects

from .context import ToolContext


async def _list_projects(params: ListProjectsParams, ctx: ToolContext) -> ListProjectsResult:
    return await list_projects(ctx.data, params)


TOOLS: tuple[ToolDefinition, ...] = (
    ToolDefinition(
        name="list_projects",
        description="List all Huly projects. Returns projects sorted by name. Supports filtering by archived status.",
        category=Category.PROJECTS,
        params=ListProjectsParams,
        handler=_list_projects,
    ),
)
