"""Contact operations."""

from __future__ import annotations

from hulymcp.domain.schemas import ListPersonsParams, ListPersonsResult, PersonSummary
from hulymcp.huly import classes

from .shared import DataSession


async def list_persons(session: DataSession, params: ListPersonsParams) -> ListPersonsResult:
    result = await session.find_all(classes.PERSON, {}, limit=params.limit, sort={"name": 1})
    persons = [
        PersonSummary(id=doc["_id"], name=doc.get("name", ""), city=doc.get("city") or None)
        for doc in result
    ]
    return ListPersonsResult(persons=persons, total=result.total)
