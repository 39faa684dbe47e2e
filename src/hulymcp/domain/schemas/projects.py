"""Project tool parameters and results."""

from __future__ import annotations

from pydantic import Field

from .shared import DEFAULT_LIMIT, Limit, Output, Params, ProjectIdentifier


class ListProjectsParams(Params):
    include_archived: bool = Field(default=False, description="Include archived projects")
    limit: Limit = DEFAULT_LIMIT


class ProjectSummary(Output):
    identifier: ProjectIdentifier
    name: str
    description: str | None = None
    archived: bool = False


class ListProjectsResult(Output):
    projects: list[ProjectSummary]
    total: int
