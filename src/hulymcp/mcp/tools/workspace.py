from __future__ import annotations

from hulymcp.domain.schemas import ListWorkspacesParams, ListWorkspacesResult
from hulymcp.foundation.registry import Category, ToolDefinition
from hulymcp.huly.operations import list_workspaces

from .context import ToolContext


async def _list_workspaces(params: ListWorkspacesParams, ctx: ToolContext) -> ListWorkspacesResult:
    return await list_workspaces(ctx.require_account(), params)


TOOLS: tuple[ToolDefinition, ...] = (
    ToolDefinition(
        name="list_workspaces",
        description="List Huly workspaces the authenticated account can access.",
        category=Category.WORKSPACE,
        params=ListWorkspacesParams,
        handler=_list_workspaces,
    ),
)
