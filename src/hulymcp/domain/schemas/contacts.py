"""Contact tool parameters and results."""

from __future__ import annotations

from .shared import DEFAULT_LIMIT, Limit, Output, Params


class ListPersonsParams(Params):
    limit: Limit = DEFAULT_LIMIT


class PersonSummary(Output):
    id: str
    name: str
    city: str | None = None


class ListPersonsResult(Output):
    persons: list[PersonSummary]
    total: int
