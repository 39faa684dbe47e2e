"""Workspace operations (account service)."""

from __future__ import annotations

from typing import Protocol

from hulymcp.domain.schemas import ListWorkspacesParams, ListWorkspacesResult, WorkspaceSummary
from hulymcp.huly.rest import WorkspaceInfo


class WorkspaceDirectory(Protocol):
    async def get_user_workspaces(self) -> list[WorkspaceInfo]: ...


async def list_workspaces(account: WorkspaceDirectory, params: ListWorkspacesParams) -> ListWorkspacesResult:
    workspaces = await account.get_user_workspaces()
    return ListWorkspacesResult(
        workspaces=[WorkspaceSummary(uuid=w.uuid, name=w.name, url=w.url) for w in workspaces],
    )
