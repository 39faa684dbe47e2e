"""Workspace tool results."""

from __future__ import annotations

from .shared import EmptyParams, Output


class ListWorkspacesParams(EmptyParams):
    pass


class WorkspaceSummary(Output):
    uuid: str
    name: str | None = None
    url: str | None = None


class ListWorkspacesResult(Output):
    workspaces: list[WorkspaceSummary]
