"""Tests for ConnectionManager: classified retry, teardown, and real connectors over MockTransport."""

from __future__ import annotations

import asyncio
import json
import logging
from functools import partial
from typing import Any

import httpx
import pytest

from hulymcp.foundation.config import PasswordCredentials, TokenCredentials
from hulymcp.foundation.errors import HulyAuthError, HulyConnectionError
from hulymcp.huly import ConnectionConfig, ConnectionManager, PlatformError, connect_account_session, connect_data_session
from hulymcp.huly.rest import AccountSession, HulyRestSession

from .conftest import FakeSession, VirtualClock

BASE_URL = "https://huly.example"

CONFIG = ConnectionConfig(url=BASE_URL, credentials=TokenCredentials(token="tok"), workspace="acme")


def scripted_connector(*outcomes: BaseException | FakeSession):
    """Connector raising or returning the given outcomes in order."""
    remaining = list(outcomes)

    async def connect(config: ConnectionConfig) -> FakeSession:
        outcome = remaining.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    return connect


# ═════════════════════════════════════════════════════════════════════════════
# Retry Behavior
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_auth_failure_makes_exactly_one_attempt(clock: VirtualClock) -> None:
    """Credentials flagged as authentication fail after a single network attempt."""
    manager = ConnectionManager(
        CONFIG,
        scripted_connector(PlatformError("platform:status:Unauthorized"), FakeSession()),
        sleep=clock.sleep,
    )

    result = await manager.connect()

    assert isinstance(result.unwrap_err(), HulyAuthError)
    assert manager.attempts == 1
    assert clock.delays == []


@pytest.mark.asyncio
async def test_transient_failures_use_three_attempts(clock: VirtualClock) -> None:
    manager = ConnectionManager(
        CONFIG,
        scripted_connector(OSError("unreachable"), OSError("unreachable"), OSError("unreachable")),
        sleep=clock.sleep,
    )

    result = await manager.connect()

    error = result.unwrap_err()
    assert isinstance(error, HulyConnectionError)
    assert error.message == "Connection failed: unreachable"
    assert manager.attempts == 3
    assert clock.delays == pytest.approx([0.1, 0.2])


@pytest.mark.asyncio
async def test_success_on_third_attempt(clock: VirtualClock) -> None:
    session = FakeSession()
    manager = ConnectionManager(
        CONFIG,
        scripted_connector(ConnectionResetError("reset"), TimeoutError("timeout"), session),
        sleep=clock.sleep,
    )

    result = await manager.connect()

    assert result.unwrap() is session
    assert manager.session is session
    assert manager.attempts == 3


@pytest.mark.asyncio
async def test_connect_is_idempotent_once_connected(clock: VirtualClock) -> None:
    session = FakeSession()
    manager = ConnectionManager(CONFIG, scripted_connector(session), sleep=clock.sleep)

    await manager.connect()
    again = await manager.connect()

    assert again.unwrap() is session
    assert manager.attempts == 1


@pytest.mark.asyncio
async def test_session_before_connect_raises() -> None:
    manager = ConnectionManager(CONFIG, scripted_connector(FakeSession()))
    with pytest.raises(HulyConnectionError):
        manager.session


# ═════════════════════════════════════════════════════════════════════════════
# Teardown
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_close_runs_exactly_once(clock: VirtualClock) -> None:
    session = FakeSession()
    manager = ConnectionManager(CONFIG, scripted_connector(session), sleep=clock.sleep)
    await manager.connect()

    await manager.close()
    await manager.close()

    assert session.closed == 1
    assert manager.closed


@pytest.mark.asyncio
async def test_scope_exit_on_error_closes_session(clock: VirtualClock) -> None:
    session = FakeSession()
    manager = ConnectionManager(CONFIG, scripted_connector(session), sleep=clock.sleep)

    with pytest.raises(ValueError):
        async with manager as live:
            assert live is session
            raise ValueError("tool blew up")

    assert session.closed == 1


@pytest.mark.asyncio
async def test_close_failure_is_logged_not_raised(
    clock: VirtualClock, caplog: pytest.LogCaptureFixture
) -> None:
    class BrokenClose(FakeSession):
        async def aclose(self) -> None:
            raise OSError("socket already gone")

    manager = ConnectionManager(CONFIG, scripted_connector(BrokenClose()), sleep=clock.sleep, label="data")
    await manager.connect()

    await manager.close()

    assert "[data] Error while closing session" in caplog.text


@pytest.mark.asyncio
async def test_aenter_raises_failure(clock: VirtualClock) -> None:
    manager = ConnectionManager(
        CONFIG,
        scripted_connector(PlatformError("platform:status:TokenExpired")),
        sleep=clock.sleep,
    )
    with pytest.raises(HulyAuthError):
        async with manager:
            pass


# ═════════════════════════════════════════════════════════════════════════════
# Concurrent Connect
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_concurrent_connects_share_one_session(clock: VirtualClock) -> None:
    """Callers racing on connect() get the same session, and close() releases it."""
    made: list[FakeSession] = []

    async def connect(config: ConnectionConfig) -> FakeSession:
        await asyncio.sleep(0)
        made.append(FakeSession())
        return made[-1]

    manager = ConnectionManager(CONFIG, connect, sleep=clock.sleep)

    first, second = await asyncio.gather(manager.connect(), manager.connect())
    await manager.close()

    assert len(made) == 1
    assert first.unwrap() is second.unwrap() is made[0]
    assert made[0].closed == 1
    assert manager.attempts == 1


@pytest.mark.asyncio
async def test_close_during_connect_releases_late_session(clock: VirtualClock) -> None:
    release = asyncio.Event()
    session = FakeSession()

    async def connect(config: ConnectionConfig) -> FakeSession:
        await release.wait()
        return session

    manager = ConnectionManager(CONFIG, connect, sleep=clock.sleep)
    pending = asyncio.create_task(manager.connect())
    await asyncio.sleep(0)

    await manager.close()
    release.set()
    result = await pending

    assert isinstance(result.unwrap_err(), HulyConnectionError)
    assert session.closed == 1
    with pytest.raises(HulyConnectionError):
        manager.session


# ═════════════════════════════════════════════════════════════════════════════
# Connectors over MockTransport
# ═════════════════════════════════════════════════════════════════════════════


class FakePlatform:
    """Front-end config, account service and data API behind one MockTransport."""

    def __init__(
        self,
        *,
        login_token: str | None = "acct-token",
        workspace_answer: dict[str, Any] | None = None,
    ) -> None:
        self.login_token = login_token
        self.workspace_answer = workspace_answer or {
            "endpoint": "wss://huly.example/_transactor", "token": "ws-token", "workspace": "ws-uuid",
        }
        self.rpc_calls: list[tuple[str, dict[str, Any], str | None]] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path == "/config.json":
            return httpx.Response(200, json={"ACCOUNTS_URL": f"{BASE_URL}/_accounts", "FILES_URL": "/files"})
        if path == "/_accounts":
            body = json.loads(request.content)
            self.rpc_calls.append((body["method"], body["params"], request.headers.get("authorization")))
            return httpx.Response(200, json=self.rpc(body["method"], body["params"]))
        if path == "/_transactor/api/v1/find-all/ws-uuid":
            return httpx.Response(200, json={"value": [{"_id": "p-1", "identifier": "HULY"}], "total": 1})
        return httpx.Response(404)

    def rpc(self, method: str, params: dict[str, Any]) -> dict[str, Any]:
        match method:
            case "login":
                if params["password"] != "secret":
                    return {"error": {"code": "platform:status:InvalidPassword", "params": {}}}
                return {"result": {"account": "acc-1", "token": self.login_token}}
            case "selectWorkspace":
                return {"result": self.workspace_answer}
            case "getUserWorkspaces":
                return {"result": [{"uuid": "ws-uuid", "name": "Acme", "url": "acme", "mode": "active"}]}
        return {"error": {"code": "platform:status:UnknownMethod"}}


@pytest.mark.asyncio
async def test_token_connect_opens_data_session() -> None:
    platform = FakePlatform()
    connect = partial(connect_data_session, transport=httpx.MockTransport(platform.handler))

    session = await connect(CONFIG)
    try:
        assert isinstance(session, HulyRestSession)
        assert session.workspace == "ws-uuid"
        result = await session.find_all("tracker:class:Project")
        assert result.total == 1
    finally:
        await session.aclose()

    assert [c[0] for c in platform.rpc_calls] == ["selectWorkspace"]
    assert platform.rpc_calls[0][1] == {"workspaceUrl": "acme", "kind": "external"}
    assert platform.rpc_calls[0][2] == "Bearer tok"


@pytest.mark.asyncio
async def test_password_connect_logs_in_first() -> None:
    platform = FakePlatform()
    config = ConnectionConfig(
        url=BASE_URL,
        credentials=PasswordCredentials(email="me@example.com", password="secret"),
        workspace="acme",
    )

    session = await connect_data_session(config, transport=httpx.MockTransport(platform.handler))
    await session.aclose()

    assert [c[0] for c in platform.rpc_calls] == ["login", "selectWorkspace"]
    assert platform.rpc_calls[1][2] == "Bearer acct-token"


@pytest.mark.asyncio
async def test_wrong_password_is_not_retried(clock: VirtualClock) -> None:
    platform = FakePlatform()
    config = ConnectionConfig(
        url=BASE_URL,
        credentials=PasswordCredentials(email="me@example.com", password="wrong"),
        workspace="acme",
    )
    manager = ConnectionManager(
        config,
        partial(connect_data_session, transport=httpx.MockTransport(platform.handler)),
        sleep=clock.sleep,
    )

    result = await manager.connect()

    assert isinstance(result.unwrap_err(), HulyAuthError)
    assert manager.attempts == 1
    assert [c[0] for c in platform.rpc_calls] == ["login"]


@pytest.mark.asyncio
async def test_login_without_token_is_authentication_failure(clock: VirtualClock) -> None:
    platform = FakePlatform(login_token=None)
    config = ConnectionConfig(
        url=BASE_URL,
        credentials=PasswordCredentials(email="me@example.com", password="secret"),
        workspace="acme",
    )
    manager = ConnectionManager(
        config,
        partial(connect_data_session, transport=httpx.MockTransport(platform.handler)),
        sleep=clock.sleep,
    )

    assert isinstance((await manager.connect()).unwrap_err(), HulyAuthError)


@pytest.mark.asyncio
async def test_unreachable_platform_is_transient(clock: VirtualClock) -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    manager = ConnectionManager(
        CONFIG,
        partial(connect_data_session, transport=httpx.MockTransport(refuse)),
        sleep=clock.sleep,
    )

    result = await manager.connect()

    assert isinstance(result.unwrap_err(), HulyConnectionError)
    assert manager.attempts == 3


@pytest.mark.asyncio
async def test_account_session_lists_workspaces() -> None:
    platform = FakePlatform()

    account = await connect_account_session(CONFIG, transport=httpx.MockTransport(platform.handler))
    try:
        assert isinstance(account, AccountSession)
        workspaces = await account.get_user_workspaces()
    finally:
        await account.aclose()

    assert [w.name for w in workspaces] == ["Acme"]
    assert platform.rpc_calls[-1][2] == "Bearer tok"


@pytest.mark.asyncio
async def test_malformed_workspace_answer_never_leaks_token(
    clock: VirtualClock, caplog: pytest.LogCaptureFixture
) -> None:
    """A selectWorkspace answer missing its endpoint fails without echoing the token it carried."""
    caplog.set_level(logging.DEBUG)
    platform = FakePlatform(workspace_answer={"token": "WS-SECRET-TOKEN-123", "workspace": "ws-uuid"})
    manager = ConnectionManager(
        CONFIG,
        partial(connect_data_session, transport=httpx.MockTransport(platform.handler)),
        sleep=clock.sleep,
        label="data",
    )

    error = (await manager.connect()).unwrap_err()

    assert isinstance(error, HulyConnectionError)
    assert "endpoint: Field required" in error.message
    assert "WS-SECRET-TOKEN-123" not in error.message
    assert "WS-SECRET-TOKEN-123" not in caplog.text
    assert "[data] Retry 1/2" in caplog.text
