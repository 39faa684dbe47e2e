from __future__ import annotations

from hulymcp.domain.schemas import GetIssueParams, Issue, ListIssuesParams, ListIssuesResult
from hulymcp.foundation.registry import Category, ToolDefinition
from hulymcp.huly.operations import get_issue, list_issues

from .context import ToolContext


async def _list_issues(params: ListIssuesParams, ctx: ToolContext) -> ListIssuesResult:
    return await list_issues(ctx.data, params)


async def _get_issue(params: GetIssueParams, ctx: ToolContext) -> Issue:
    return await get_issue(ctx.data, params)


TOOLS: tuple[ToolDefinition, ...] = (
    ToolDefinition(
        name="list_issues",
        description=(
            "Query Huly issues with optional filters. Returns issues sorted by modification date "
            "(newest first). Supports filtering by project, status ('open', 'done', 'canceled' or a "
            "status name), assignee, and title substring."
        ),
        category=Category.ISSUES,
        params=ListIssuesParams,
        handler=_list_issues,
    ),
    ToolDefinition(
        name="get_issue",
        description="Retrieve full details for a Huly issue by identifier (e.g. 'HULY-123' or '123').",
        category=Category.ISSUES,
        params=GetIssueParams,
        handler=_get_issue,
    ),
)
