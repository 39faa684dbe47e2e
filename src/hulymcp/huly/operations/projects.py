"""Project operations."""

from __future__ import annotations

from hulymcp.domain.schemas import ListProjectsParams, ListProjectsResult, ProjectSummary
from hulymcp.huly import classes

from .shared import DataSession


async def list_projects(session: DataSession, params: ListProjectsParams) -> ListProjectsResult:
    """Projects sorted by name; archived ones only on request."""
    query = {} if params.include_archived else {"archived": False}
    result = await session.find_all(classes.PROJECT, query, limit=params.limit, sort={"name": 1})
    projects = [
        ProjectSummary(
            identifier=doc["identifier"],
            name=doc.get("name", ""),
            description=doc.get("description") or None,
            archived=bool(doc.get("archived", False)),
        )
        for doc in result
    ]
    return ListProjectsResult(projects=projects, total=result.total)
