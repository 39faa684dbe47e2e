"""Issue operations.

Status filters:
- "open": anything not in a done or canceled category
- "done" / "canceled": the Won / Lost status categories
- any other value: case-insensitive exact status name
"""

from __future__ import annotations

from typing import Any

from hulymcp.domain.schemas import GetIssueParams, Issue, IssueSummary, ListIssuesParams, ListIssuesResult
from hulymcp.foundation.errors import InvalidStatusError, IssueNotFoundError
from hulymcp.huly import classes

from .shared import (
    DataSession,
    Doc,
    StatusInfo,
    find_person,
    find_project,
    load_statuses,
    parse_issue_identifier,
    person_names,
    priority_to_string,
)


def _status_query(status: str, statuses: list[StatusInfo], project: str) -> dict[str, Any] | None:
    """Mongo-style status constraint, or None when the filter can match nothing."""
    wanted = status.strip().lower()
    match wanted:
        case "open":
            closed = [s.id for s in statuses if s.is_done or s.is_canceled]
            return {"$nin": closed} if closed else {}
        case "done":
            ids = [s.id for s in statuses if s.is_done]
            return {"$in": ids} if ids else None
        case "canceled":
            ids = [s.id for s in statuses if s.is_canceled]
            return {"$in": ids} if ids else None
        case _:
            for s in statuses:
                if s.name.lower() == wanted:
                    return {"$in": [s.id]}
            raise InvalidStatusError(status, project)


def _summary(doc: Doc, status_names: dict[str, str], assignees: dict[str, str]) -> dict[str, Any]:
    return {
        "identifier": doc.get("identifier", ""),
        "title": doc.get("title", ""),
        "status": status_names.get(doc.get("status", ""), "Unknown"),
        "priority": priority_to_string(doc.get("priority")),
        "assignee": assignees.get(doc["assignee"]) if doc.get("assignee") else None,
        "modified_on": doc.get("modifiedOn"),
    }


async def list_issues(session: DataSession, params: ListIssuesParams) -> ListIssuesResult:
    """Issues of one project, most recently modified first.

    Raises:
        ProjectNotFoundError: Unknown project
        InvalidStatusError: Status name not defined in the workspace
    """
    project = await find_project(session, params.project)
    statuses = await load_statuses(session)
    query: dict[str, Any] = {"space": project["_id"]}

    if params.status is not None:
        constraint = _status_query(params.status, statuses, params.project)
        if constraint is None:
            return ListIssuesResult(issues=[], total=0)
        if constraint:
            query["status"] = constraint

    if params.assignee is not None:
        person = await find_person(session, params.assignee)
        if person is None:
            return ListIssuesResult(issues=[], total=0)
        query["assignee"] = person["_id"]

    if params.title_search is not None:
        query["title"] = {"$like": f"%{params.title_search}%"}

    result = await session.find_all(classes.ISSUE, query, limit=params.limit, sort={"modifiedOn": -1})
    assignees = await person_names(session, {d["assignee"] for d in result if d.get("assignee")})
    status_names = {s.id: s.name for s in statuses}
    issues = [IssueSummary(**_summary(doc, status_names, assignees)) for doc in result]
    return ListIssuesResult(issues=issues, total=result.total)


async def get_issue(session: DataSession, params: GetIssueParams) -> Issue:
    """One issue by 'PROJ-123' or bare number.

    Raises:
        ProjectNotFoundError: Unknown project
        IssueNotFoundError: No issue with that identifier in the project
    """
    project = await find_project(session, params.project)
    ref = parse_issue_identifier(params.identifier, params.project)

    doc = await session.find_one(classes.ISSUE, {"space": project["_id"], "identifier": ref.full_identifier})
    if doc is None:
        doc = await session.find_one(classes.ISSUE, {"space": project["_id"], "number": ref.number})
    if doc is None:
        raise IssueNotFoundError(params.identifier, params.project)

    statuses = await load_statuses(session)
    assignees = await person_names(session, {doc["assignee"]} if doc.get("assignee") else set())
    return Issue(
        **_summary(doc, {s.id: s.name for s in statuses}, assignees),
        project=params.project,
        created_on=doc.get("createdOn"),
        due_date=doc.get("dueDate"),
        estimation=doc.get("estimation") or None,
    )
