from __future__ import annotations

from hulymcp.domain.schemas import ListDocumentsParams, ListDocumentsResult, ListTeamspacesParams, ListTeamspacesResult
from hulymcp.foundation.registry import Category, ToolDefinition
from hulymcp.huly.operations import list_documents, list_teamspaces

from .context import ToolContext


async def _list_teamspaces(params: ListTeamspacesParams, ctx: ToolContext) -> ListTeamspacesResult:
    return await list_teamspaces(ctx.data, params)


async def _list_documents(params: ListDocumentsParams, ctx: ToolContext) -> ListDocumentsResult:
    return await list_documents(ctx.data, params)


TOOLS: tuple[ToolDefinition, ...] = (
    ToolDefinition(
        name="list_teamspaces",
        description="List document teamspaces in the Huly workspace, sorted by name.",
        category=Category.DOCUMENTS,
        params=ListTeamspacesParams,
        handler=_list_teamspaces,
    ),
    ToolDefinition(
        name="list_documents",
        description="List documents in a Huly teamspace (by name or ID), newest first.",
        category=Category.DOCUMENTS,
        params=ListDocumentsParams,
        handler=_list_documents,
    ),
)
