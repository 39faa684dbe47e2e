"""Typed tool parameters and results, one module per domain."""

from .contacts import ListPersonsParams, ListPersonsResult, PersonSummary
from .documents import (
    DocumentSummary,
    ListDocumentsParams,
    ListDocumentsResult,
    ListTeamspacesParams,
    ListTeamspacesResult,
    TeamspaceSummary,
)
from .issues import GetIssueParams, Issue, IssueSummary, ListIssuesParams, ListIssuesResult
from .projects import ListProjectsParams, ListProjectsResult, ProjectSummary
from .shared import DEFAULT_LIMIT, EmptyParams, Output, Params
from .workspace import ListWorkspacesParams, ListWorkspacesResult, WorkspaceSummary

__all__ = [
    "Params", "Output", "EmptyParams", "DEFAULT_LIMIT",
    "ListProjectsParams", "ListProjectsResult", "ProjectSummary",
    "ListIssuesParams", "GetIssueParams", "IssueSummary", "Issue", "ListIssuesResult",
    "ListPersonsParams", "ListPersonsResult", "PersonSummary",
    "ListTeamspacesParams", "ListDocumentsParams", "TeamspaceSummary", "DocumentSummary",
    "ListTeamspacesResult", "ListDocumentsResult",
    "ListWorkspacesParams", "ListWorkspacesResult", "WorkspaceSummary",
]
