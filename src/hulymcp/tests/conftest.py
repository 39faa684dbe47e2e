"""Shared fixtures: in-memory platform session, virtual clock, logger isolation."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator, Mapping
from typing import Any

import pytest

from hulymcp.huly import classes
from hulymcp.huly.rest import FindResult, WorkspaceInfo
from hulymcp.runtime.observability import ROOT_LOGGER


def _matches(value: object, condition: object) -> bool:
    if isinstance(condition, Mapping):
        for op, arg in condition.items():
            match op:
                case "$in":
                    if value not in arg:
                        return False
                case "$nin":
                    if value in arg:
                        return False
                case "$like":
                    pattern = "^" + ".*".join(re.escape(p) for p in str(arg).split("%")) + "$"
                    if not re.match(pattern, str(value or ""), re.IGNORECASE):
                        return False
                case _:
                    raise AssertionError(f"unsupported operator {op}")
        return True
    return value == condition


class FakeSession:
    """In-memory stand-in for HulyRestSession, keyed by class id."""

    def __init__(self, docs: Mapping[str, list[dict[str, Any]]] | None = None) -> None:
        self.docs: dict[str, list[dict[str, Any]]] = {k: list(v) for k, v in (docs or {}).items()}
        self.queries: list[tuple[str, dict[str, Any]]] = []
        self.closed = 0

    async def find_all(
        self,
        _class: str,
        query: Mapping[str, Any] | None = None,
        *,
        limit: int | None = None,
        sort: Mapping[str, int] | None = None,
    ) -> FindResult:
        query = dict(query or {})
        self.queries.append((_class, query))
        found = [d for d in self.docs.get(_class, []) if all(_matches(d.get(k), c) for k, c in query.items())]
        for key, direction in reversed(list((sort or {}).items())):
            found.sort(key=lambda d, k=key: d.get(k, ""), reverse=direction < 0)
        total = len(found)
        return FindResult(docs=found[:limit] if limit else found, total=total)

    async def find_one(
        self,
        _class: str,
        query: Mapping[str, Any] | None = None,
        *,
        sort: Mapping[str, int] | None = None,
    ) -> dict[str, Any] | None:
        result = await self.find_all(_class, query, limit=1, sort=sort)
        return result.docs[0] if result.docs else None

    async def aclose(self) -> None:
        self.closed += 1


class FakeAccount:
    def __init__(self, workspaces: list[WorkspaceInfo] | None = None) -> None:
        self.workspaces = workspaces or []

    async def get_user_workspaces(self) -> list[WorkspaceInfo]:
        return list(self.workspaces)

    async def aclose(self) -> None:
        pass


class VirtualClock:
    """Records requested delays instead of sleeping."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def sleep(self, seconds: float) -> None:
        self.delays.append(seconds)

    @property
    def elapsed(self) -> float:
        return sum(self.delays)


@pytest.fixture
def clock() -> VirtualClock:
    return VirtualClock()


@pytest.fixture
def workspace_docs() -> dict[str, list[dict[str, Any]]]:
    """A small tracker workspace: two projects, four statuses, three issues."""
    return {
        classes.PROJECT: [
            {"_id": "p-huly", "identifier": "HULY", "name": "Huly", "description": "Main", "archived": False},
            {"_id": "p-old", "identifier": "OLD", "name": "Legacy", "archived": True},
        ],
        classes.ISSUE_STATUS: [
            {"_id": "st-backlog", "name": "Backlog", "category": "task:statusCategory:UnStarted"},
            {"_id": "st-progress", "name": "In Progress", "category": "task:statusCategory:Active"},
            {"_id": "st-done", "name": "Done", "category": classes.STATUS_CATEGORY_WON},
            {"_id": "st-canceled", "name": "Canceled", "category": classes.STATUS_CATEGORY_LOST},
        ],
        classes.ISSUE: [
            {"_id": "i-1", "space": "p-huly", "identifier": "HULY-1", "number": 1, "title": "Fix login",
             "status": "st-progress", "priority": 1, "assignee": "per-ann", "modifiedOn": 300, "createdOn": 100},
            {"_id": "i-2", "space": "p-huly", "identifier": "HULY-2", "number": 2, "title": "Write docs",
             "status": "st-done", "priority": 4, "modifiedOn": 200, "createdOn": 110},
            {"_id": "i-3", "space": "p-huly", "identifier": "HULY-3", "number": 3, "title": "Login page polish",
             "status": "st-canceled", "priority": 0, "modifiedOn": 100, "createdOn": 120, "estimation": 2},
        ],
        classes.PERSON: [
            {"_id": "per-ann", "name": "Ann Lee", "city": "Oslo"},
            {"_id": "per-bob", "name": "Bob Ray"},
        ],
        classes.CHANNEL: [
            {"_id": "ch-1", "provider": classes.EMAIL_PROVIDER, "value": "ann@example.com", "attachedTo": "per-ann"},
        ],
        classes.TEAMSPACE: [
            {"_id": "ts-eng", "name": "Engineering", "archived": False, "private": False},
            {"_id": "ts-arch", "name": "Archive", "archived": True},
        ],
        classes.DOCUMENT: [
            {"_id": "doc-1", "space": "ts-eng", "title": "Runbook", "modifiedOn": 50},
            {"_id": "doc-2", "space": "ts-eng", "title": "Onboarding", "modifiedOn": 90},
        ],
    }


@pytest.fixture
def session(workspace_docs: dict[str, list[dict[str, Any]]]) -> FakeSession:
    return FakeSession(workspace_docs)


@pytest.fixture
def restore_logger() -> Iterator[None]:
    """Undo configure_logging() so handlers never outlive a test's streams."""
    root = logging.getLogger(ROOT_LOGGER)
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
