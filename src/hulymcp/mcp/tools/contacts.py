from __future__ import annotations

from hulymcp.domain.schemas import ListPersonsParams, ListPersonsResult
from hulymcp.foundation.registry import Category, ToolDefinition
from hulymcp.huly.operations import list_persons

from .context import ToolContext


async def _list_persons(params: ListPersonsParams, ctx: ToolContext) -> ListPersonsResult:
    return await list_persons(ctx.data, params)


TOOLS: tuple[ToolDefinition, ...] = (
    ToolDefinition(
        name="list_persons",
        description="List persons in the Huly workspace, sorted by name.",
        category=Category.CONTACTS,
        params=ListPersonsParams,
        handler=_list_persons,
    ),
)
