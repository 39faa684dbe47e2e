"""Document and teamspace tool parameters and results."""

from __future__ import annotations

from pydantic import Field

from .shared import DEFAULT_LIMIT, Limit, NonEmptyString, Output, Params, Timestamp


class ListTeamspacesParams(Params):
    include_archived: bool = Field(default=False, description="Include archived teamspaces")
    limit: Limit = DEFAULT_LIMIT


class ListDocumentsParams(Params):
    teamspace: NonEmptyString = Field(description="Teamspace name or ID")
    limit: Limit = DEFAULT_LIMIT


class TeamspaceSummary(Output):
    id: str
    name: str
    description: str | None = None
    archived: bool = False
    private: bool = False


class DocumentSummary(Output):
    id: str
    title: str
    teamspace: str
    modified_on: Timestamp | None = None


class ListTeamspacesResult(Output):
    teamspaces: list[TeamspaceSummary]
    total: int


class ListDocumentsResult(Output):
    documents: list[DocumentSummary]
    total: int
