"""HTTP clients for the platform's account service and REST data API.

Wire formats:
- `GET {url}/config.json` publishes service URLs (ACCOUNTS_URL, ...).
- The account service takes JSON-RPC style POSTs `{"method", "params"}` and
  answers `{"result": ...}` or `{"error": {"code": "platform:status:...", "params": {...}}}`.
- The data API answers `GET {endpoint}/api/v1/find-all/{workspace}` with
  `{"value": [...], "total": n}`.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, TypeVar

import httpx
import orjson
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from hulymcp.foundation.errors import HulyConnectionError

from .auth import PlatformError

logger = logging.getLogger("hulymcp.rest")

_UNKNOWN_STATUS = "platform:status:UnknownError"

M = TypeVar("M", bound=BaseModel)


def concat_link(host: str, path: str) -> str:
    return f"{host.rstrip('/')}/{path.lstrip('/')}"


def _raise_platform_error(body: Any) -> None:
    if isinstance(body, dict) and (err := body.get("error")) is not None:
        if isinstance(err, dict):
            raise PlatformError(str(err.get("code") or _UNKNOWN_STATUS), err.get("params"))
        raise PlatformError(_UNKNOWN_STATUS, {"message": str(err)})


class MalformedResponse(ValueError):
    """A service answer that does not match the expected shape.

    The message names the offending fields and never quotes payload values.
    """


def _parse(model: type[M], payload: Any) -> M:
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in issue['loc']) or '<root>'}: {issue['msg']}"
            for issue in e.errors(include_url=False, include_input=False, include_context=False)
        )
        raise MalformedResponse(f"Malformed {model.__name__} response: {problems}") from None


# ─────────────────────────────────────────────────────────────────────────────
# Service discovery
# ─────────────────────────────────────────────────────────────────────────────


class ServerConfig(BaseModel):
    """Subset of the front-end config.json the server needs."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    accounts_url: str = Field(alias="ACCOUNTS_URL")


async def load_server_config(http: httpx.AsyncClient, url: str) -> ServerConfig:
    """Fetch service URLs published by the platform front end."""
    resp = await http.get(concat_link(url, "/config.json"))
    resp.raise_for_status()
    return _parse(ServerConfig, resp.json())


# ─────────────────────────────────────────────────────────────────────────────
# Account service
# ─────────────────────────────────────────────────────────────────────────────


class LoginInfo(BaseModel):
    model_config = ConfigDict(extra="ignore")

    account: str | None = None
    token: str | None = None


class WorkspaceLoginInfo(BaseModel):
    """Workspace-scoped token and data endpoint returned by selectWorkspace."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    endpoint: str
    token: str
    workspace: str

    @property
    def http_endpoint(self) -> str:
        """Data endpoint with ws/wss rewritten to http/https."""
        return re.sub(r"^ws", "http", self.endpoint)


class WorkspaceInfo(BaseModel):
    """Workspace visible to the authenticated account."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    uuid: str
    name: str | None = None
    url: str | None = None
    mode: str | None = None


class AccountClient:
    """Thin JSON-RPC client for the account service."""

    __slots__ = ("_http", "_url", "_token")

    def __init__(self, http: httpx.AsyncClient, accounts_url: str, token: str | None = None) -> None:
        self._http = http
        self._url = accounts_url
        self._token = token

    def with_token(self, token: str) -> AccountClient:
        return AccountClient(self._http, self._url, token)

    async def rpc(self, method: str, params: Mapping[str, Any] | None = None) -> Any:
        """Call one account-service method.

        Raises:
            PlatformError: The service answered with a status error
            httpx.HTTPError: Transport failure or non-2xx response
        """
        headers = {"Authorization": f"Bearer {self._token}"} if self._token else None
        resp = await self._http.post(self._url, json={"method": method, "params": dict(params or {})}, headers=headers)
        resp.raise_for_status()
        body = resp.json()
        _raise_platform_error(body)
        return body.get("result") if isinstance(body, dict) else body

    async def login(self, email: str, password: str) -> LoginInfo:
        return _parse(LoginInfo, await self.rpc("login", {"email": email, "password": password}) or {})

    async def select_workspace(self, workspace: str) -> WorkspaceLoginInfo:
        result = await self.rpc("selectWorkspace", {"workspaceUrl": workspace, "kind": "external"})
        return _parse(WorkspaceLoginInfo, result)

    async def get_user_workspaces(self) -> list[WorkspaceInfo]:
        return [_parse(WorkspaceInfo, w) for w in await self.rpc("getUserWorkspaces") or []]


# ─────────────────────────────────────────────────────────────────────────────
# Data API
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class FindResult:
    """Documents matching a query plus the server-side total."""

    docs: list[dict[str, Any]] = field(default_factory=list)
    total: int = 0

    def __iter__(self):
        return iter(self.docs)

    def __len__(self) -> int:
        return len(self.docs)


class HulyRestSession:
    """Authenticated, workspace-scoped handle to the REST data API.

    Safe for concurrent use: every call is an independent HTTP request and
    the session adds no locking of its own.
    """

    __slots__ = ("_http", "_info")

    def __init__(self, http: httpx.AsyncClient, info: WorkspaceLoginInfo) -> None:
        self._http = http
        self._info = info

    @property
    def workspace(self) -> str:
        return self._info.workspace

    async def find_all(
        self,
        _class: str,
        query: Mapping[str, Any] | None = None,
        *,
        limit: int | None = None,
        sort: Mapping[str, int] | None = None,
    ) -> FindResult:
        """Query documents of one class.

        Raises:
            HulyConnectionError: Transport failure or a platform error answer
        """
        options = {k: v for k, v in {"limit": limit, "sort": sort}.items() if v is not None}
        params = {
            "class": _class,
            "query": orjson.dumps(dict(query or {})).decode(),
            "options": orjson.dumps(options).decode(),
        }
        url = concat_link(self._info.http_endpoint, f"/api/v1/find-all/{self._info.workspace}")
        try:
            resp = await self._http.get(url, params=params, headers={"Authorization": f"Bearer {self._info.token}"})
            resp.raise_for_status()
            body = resp.json()
            _raise_platform_error(body)
        except (httpx.HTTPError, PlatformError, ValueError) as e:
            raise HulyConnectionError(f"findAll failed: {e}", cause=e) from e

        if isinstance(body, list):
            return FindResult(docs=body, total=len(body))
        docs = body.get("value") or []
        return FindResult(docs=docs, total=int(body.get("total", len(docs))))

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
        await self._http.aclose()


class AccountSession:
    """Account-scoped handle for workspace-level operations."""

    __slots__ = ("_http", "_client")

    def __init__(self, http: httpx.AsyncClient, client: AccountClient) -> None:
        self._http = http
        self._client = client

    async def get_user_workspaces(self) -> list[WorkspaceInfo]:
        try:
            return await self._client.get_user_workspaces()
        except (httpx.HTTPError, PlatformError, ValueError) as e:
            raise HulyConnectionError(f"getUserWorkspaces failed: {e}", cause=e) from e

    async def aclose(self) -> None:
        await self._http.aclose()
