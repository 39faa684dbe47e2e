"""Services handed to every tool handler."""

from __future__ import annotations

from dataclasses import dataclass

from hulymcp.foundation.errors import HulyError
from hulymcp.huly.operations import DataSession, WorkspaceDirectory


@dataclass(frozen=True, slots=True)
class ToolContext:
    """Live sessions owned by the process's connection managers."""

    data: DataSession
    account: WorkspaceDirectory | None = None

    def require_account(self) -> WorkspaceDirectory:
        """Account session for workspace-level tools.

        Raises:
            HulyError: When the process runs without an account session
        """
        if self.account is None:
            raise HulyError("Workspace client not available")
        return self.account
