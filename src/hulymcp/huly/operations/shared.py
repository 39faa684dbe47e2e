"""Query helpers shared by the domain operations."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping, Protocol

from hulymcp.foundation.errors import ProjectNotFoundError
from hulymcp.huly import classes
from hulymcp.huly.rest import FindResult

Doc = dict[str, Any]

_PRIORITIES = {0: "no-priority", 1: "urgent", 2: "high", 3: "medium", 4: "low"}
_FULL_IDENTIFIER = re.compile(r"^([A-Z][A-Z0-9]*)-(\d+)$", re.IGNORECASE)


class DataSession(Protocol):
    """Read access to workspace documents."""

    async def find_all(
        self,
        _class: str,
        query: Mapping[str, Any] | None = None,
        *,
        limit: int | None = None,
        sort: Mapping[str, int] | None = None,
    ) -> FindResult: ...

    async def find_one(
        self,
        _class: str,
        query: Mapping[str, Any] | None = None,
        *,
        sort: Mapping[str, int] | None = None,
    ) -> Doc | None: ...


@dataclass(frozen=True, slots=True)
class StatusInfo:
    id: str
    name: str
    is_done: bool
    is_canceled: bool


@dataclass(frozen=True, slots=True)
class IssueRef:
    full_identifier: str
    number: int


def priority_to_string(priority: object) -> str:
    return _PRIORITIES.get(priority, "no-priority") if isinstance(priority, int) else "no-priority"


def parse_issue_identifier(identifier: str, project: str) -> IssueRef:
    """Normalize 'hULY-12' or '12' to ('HULY-12', 12).

    Raises:
        ValueError: If the identifier is neither form
    """
    text = identifier.strip()
    if m := _FULL_IDENTIFIER.match(text):
        return IssueRef(f"{m.group(1).upper()}-{m.group(2)}", int(m.group(2)))
    if text.isdigit():
        return IssueRef(f"{project.upper()}-{int(text)}", int(text))
    raise ValueError(f"Invalid issue identifier: {identifier}")


async def find_project(session: DataSession, identifier: str) -> Doc:
    """Project document by identifier.

    Raises:
        ProjectNotFoundError: No such project
    """
    project = await session.find_one(classes.PROJECT, {"identifier": identifier})
    if project is None:
        raise ProjectNotFoundError(identifier)
    return project


async def load_statuses(session: DataSession) -> list[StatusInfo]:
    """Issue statuses with done/canceled classification by status category."""
    result = await session.find_all(classes.ISSUE_STATUS)
    return [
        StatusInfo(
            id=doc["_id"],
            name=str(doc.get("name", "")),
            is_done=doc.get("category") == classes.STATUS_CATEGORY_WON,
            is_canceled=doc.get("category") == classes.STATUS_CATEGORY_LOST,
        )
        for doc in result
    ]


async def find_person(session: DataSession, email_or_name: str) -> Doc | None:
    """Person by email channel first, then by exact name."""
    channel = await session.find_one(classes.CHANNEL, {"provider": classes.EMAIL_PROVIDER, "value": email_or_name})
    if channel is not None and (person_id := channel.get("attachedTo")):
        if (person := await session.find_one(classes.PERSON, {"_id": person_id})) is not None:
            return person
    return await session.find_one(classes.PERSON, {"name": email_or_name})


async def person_names(session: DataSession, ids: set[str]) -> dict[str, str]:
    """Map person ids to display names in one query."""
    if not ids:
        return {}
    persons = await session.find_all(classes.PERSON, {"_id": {"$in": sorted(ids)}})
    return {p["_id"]: str(p.get("name", "")) for p in persons}
