"""Issue tool parameters and results."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import Field, StringConstraints

from .shared import DEFAULT_LIMIT, Limit, NonEmptyString, Output, Params, ProjectIdentifier, Timestamp

IssuePriority = Literal["urgent", "high", "medium", "low", "no-priority"]

IssueIdentifier = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1, pattern=r"^([A-Za-z][A-Za-z0-9]*-)?\d+$"),
    Field(description="Issue identifier (e.g., 'HULY-123' or '123')"),
]


class ListIssuesParams(Params):
    project: ProjectIdentifier
    status: NonEmptyString | None = Field(
        default=None,
        description="Filter by status: 'open', 'done', 'canceled', or an exact status name",
    )
    assignee: NonEmptyString | None = Field(default=None, description="Filter by assignee email or name")
    title_search: NonEmptyString | None = Field(
        default=None,
        description="Search issues by title substring (case-insensitive)",
    )
    limit: Limit = DEFAULT_LIMIT


class GetIssueParams(Params):
    project: ProjectIdentifier
    identifier: IssueIdentifier


class IssueSummary(Output):
    identifier: str
    title: str
    status: str
    priority: IssuePriority | None = None
    assignee: str | None = None
    modified_on: Timestamp | None = None


class Issue(IssueSummary):
    project: str
    created_on: Timestamp | None = None
    due_date: Timestamp | None = None
    estimation: float | None = None


class ListIssuesResult(Output):
    issues: list[IssueSummary]
    total: int
