"""Teamspace and document operations."""

from __future__ import annotations

from hulymcp.domain.schemas import (
    DocumentSummary,
    ListDocumentsParams,
    ListDocumentsResult,
    ListTeamspacesParams,
    ListTeamspacesResult,
    TeamspaceSummary,
)
from hulymcp.foundation.errors import TeamspaceNotFoundError
from hulymcp.huly import classes

from .shared import DataSession, Doc


async def find_teamspace(session: DataSession, name_or_id: str) -> Doc:
    """Teamspace by name, falling back to id.

    Raises:
        TeamspaceNotFoundError: Neither matches
    """
    teamspace = await session.find_one(classes.TEAMSPACE, {"name": name_or_id})
    if teamspace is None:
        teamspace = await session.find_one(classes.TEAMSPACE, {"_id": name_or_id})
    if teamspace is None:
        raise TeamspaceNotFoundError(name_or_id)
    return teamspace


async def list_teamspaces(session: DataSession, params: ListTeamspacesParams) -> ListTeamspacesResult:
    query = {} if params.include_archived else {"archived": False}
    result = await session.find_all(classes.TEAMSPACE, query, limit=params.limit, sort={"name": 1})
    teamspaces = [
        TeamspaceSummary(
            id=doc["_id"],
            name=doc.get("name", ""),
            description=doc.get("description") or None,
            archived=bool(doc.get("archived", False)),
            private=bool(doc.get("private", False)),
        )
        for doc in result
    ]
    return ListTeamspacesResult(teamspaces=teamspaces, total=result.total)


async def list_documents(session: DataSession, params: ListDocumentsParams) -> ListDocumentsResult:
    """Documents of one teamspace, most recently modified first."""
    teamspace = await find_teamspace(session, params.teamspace)
    result = await session.find_all(
        classes.DOCUMENT, {"space": teamspace["_id"]}, limit=params.limit, sort={"modifiedOn": -1},
    )
    documents = [
        DocumentSummary(
            id=doc["_id"],
            title=doc.get("title", ""),
            teamspace=teamspace.get("name", params.teamspace),
            modified_on=doc.get("modifiedOn"),
        )
        for doc in result
    ]
    return ListDocumentsResult(documents=documents, total=result.total)
