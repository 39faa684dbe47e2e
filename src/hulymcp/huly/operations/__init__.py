"""Domain operations: one async function per platform action.

Each takes a session and validated parameters and returns a typed result or
raises a DomainError subclass for expected failures.
"""

from .contacts import list_persons
from .documents import list_documents, list_teamspaces
from .issues import get_issue, list_issues
from .projects import list_projects
from .shared import DataSession
from .workspace import WorkspaceDirectory, list_workspaces

__all__ = [
    "DataSession", "WorkspaceDirectory",
    "list_projects", "list_issues", "get_issue", "list_persons",
    "list_teamspaces", "list_documents", "list_workspaces",
]
