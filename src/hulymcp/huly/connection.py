"""Connection lifecycle for platform sessions.

ConnectionManager owns one session: it establishes it with classified retry
(authentication failures stop immediately, transient failures back off
exponentially) and tears it down exactly once.

Example:
    >>> config = ConnectionConfig.from_settings(get_settings().huly)
    >>> async with ConnectionManager(config, connect_data_session) as session:
    ...     projects = await session.find_all("tracker:class:Project")
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Awaitable, Callable, Generic, Protocol, TypeVar

import httpx
from pydantic import BaseModel, ConfigDict, PositiveFloat

from hulymcp.foundation.config import Credentials, HulySettings, PasswordCredentials, TokenCredentials
from hulymcp.foundation.errors import ConnectionFailure, Err, HulyConnectionError, Ok, Result
from hulymcp.runtime.retry import CONNECTION_RETRY, RetryPolicy, retry

from .auth import PlatformError, retry_decision, to_connection_failure
from .rest import AccountClient, AccountSession, HulyRestSession, ServerConfig, load_server_config

if TYPE_CHECKING:
    from types import TracebackType

logger = logging.getLogger("hulymcp.connection")


class Closeable(Protocol):
    async def aclose(self) -> None: ...


S = TypeVar("S", bound=Closeable)
Connector = Callable[["ConnectionConfig"], Awaitable[S]]
Sleep = Callable[[float], Awaitable[None]]


class ConnectionConfig(BaseModel):
    """Everything needed to open a session. Credentials stay masked in repr."""

    model_config = ConfigDict(frozen=True)

    url: str
    credentials: Credentials
    workspace: str
    timeout: PositiveFloat = 30.0

    @classmethod
    def from_settings(cls, settings: HulySettings) -> ConnectionConfig:
        return cls(
            url=settings.url,
            credentials=settings.credentials,
            workspace=settings.workspace,
            timeout=settings.timeout_seconds,
        )


# ─────────────────────────────────────────────────────────────────────────────
# Connectors (one network attempt each)
# ─────────────────────────────────────────────────────────────────────────────


async def _with_http_client(
    config: ConnectionConfig,
    build: Callable[[httpx.AsyncClient, ServerConfig], Awaitable[S]],
    transport: httpx.AsyncBaseTransport | None,
) -> S:
    http = httpx.AsyncClient(timeout=config.timeout, transport=transport)
    try:
        server_config = await load_server_config(http, config.url)
        return await build(http, server_config)
    except BaseException:
        await http.aclose()
        raise


async def _login(accounts: AccountClient, credentials: Credentials) -> AccountClient:
    """Account client holding an account-scoped token."""
    match credentials:
        case TokenCredentials(token=token):
            return accounts.with_token(token.get_secret_value())
        case PasswordCredentials(email=email, password=password):
            info = await accounts.login(email, password.get_secret_value())
            if not info.token:
                raise PlatformError("platform:status:Unauthorized", {"reason": "login returned no token"})
            return accounts.with_token(info.token)


async def connect_data_session(
    config: ConnectionConfig,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> HulyRestSession:
    """One attempt at a workspace data session."""
    async def build(http: httpx.AsyncClient, server_config: ServerConfig) -> HulyRestSession:
        accounts = await _login(AccountClient(http, server_config.accounts_url), config.credentials)
        return HulyRestSession(http, await accounts.select_workspace(config.workspace))

    return await _with_http_client(config, build, transport)


async def connect_account_session(
    config: ConnectionConfig,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AccountSession:
    """One attempt at an account-service session."""
    async def build(http: httpx.AsyncClient, server_config: ServerConfig) -> AccountSession:
        accounts = await _login(AccountClient(http, server_config.accounts_url), config.credentials)
        if isinstance(config.credentials, PasswordCredentials):
            selected = await accounts.select_workspace(config.workspace)
            accounts = accounts.with_token(selected.token)
        return AccountSession(http, accounts)

    return await _with_http_client(config, build, transport)


# ─────────────────────────────────────────────────────────────────────────────
# Connection Manager
# ─────────────────────────────────────────────────────────────────────────────


class ConnectionManager(Generic[S]):
    """Owns one session: connect with classified retry, close exactly once.

    Args:
        config: Connection parameters
        connector: Performs a single connect attempt, raising on failure
        policy: Attempt bound and backoff (default: 3 attempts, 100ms doubling)
        sleep: Delay function, injectable for virtual clocks
        label: Name used in log lines
        error_prefix: Prefix for wrapped failure messages
    """

    __slots__ = (
        "_config", "_connector", "_policy", "_sleep", "_label", "_error_prefix",
        "_session", "_closed", "_attempts", "_lock",
    )

    def __init__(
        self,
        config: ConnectionConfig,
        connector: Connector[S],
        *,
        policy: RetryPolicy = CONNECTION_RETRY,
        sleep: Sleep = asyncio.sleep,
        label: str = "huly",
        error_prefix: str = "Connection failed",
    ) -> None:
        self._config = config
        self._connector = connector
        self._policy = policy
        self._sleep = sleep
        self._label = label
        self._error_prefix = error_prefix
        self._session: S | None = None
        self._closed = False
        self._attempts = 0
        self._lock = asyncio.Lock()

    @property
    def attempts(self) -> int:
        """Underlying connect attempts made so far."""
        return self._attempts

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def session(self) -> S:
        """The live session.

        Raises:
            HulyConnectionError: If not connected
        """
        if self._session is None:
            raise HulyConnectionError(f"{self._label} session is not connected")
        return self._session

    async def _attempt(self) -> Result[S, ConnectionFailure]:
        self._attempts += 1
        try:
            return Ok(await self._connector(self._config))
        except Exception as e:
            return Err(to_connection_failure(e, self._error_prefix))

    async def connect(self) -> Result[S, ConnectionFailure]:
        """Establish the session, retrying transient failures per policy.

        Concurrent callers share one connect: the first runs the retry loop
        and the rest receive its session.
        """
        if self._session is not None:
            return Ok(self._session)

        async with self._lock:
            if self._session is not None:
                return Ok(self._session)
            if self._closed:
                return Err(HulyConnectionError(f"{self._label} connection manager is closed"))
            result = await retry(self._attempt, retry_decision, self._policy, sleep=self._sleep, label=self._label)
            if result.is_ok() and self._closed:
                # close() ran while connecting; nothing owns this session now
                await self._discard(result.unwrap())
                return Err(HulyConnectionError(f"{self._label} connection manager is closed"))
            if result.is_ok():
                self._session = result.unwrap()

        if result.is_ok():
            logger.info(f"[{self._label}] Connected to {self._config.url} (workspace {self._config.workspace})")
        else:
            error = result.unwrap_err()
            logger.error(f"[{self._label}] {type(error).__name__} after {self._attempts} attempt(s)")
        return result

    async def close(self) -> None:
        """Release the session. Idempotent; failures are logged, never raised."""
        if self._closed:
            return
        self._closed = True
        session, self._session = self._session, None
        if session is not None:
            await self._discard(session)

    async def _discard(self, session: S) -> None:
        try:
            await session.aclose()
        except Exception:
            logger.warning(f"[{self._label}] Error while closing session", exc_info=True)
        else:
            logger.debug(f"[{self._label}] Session closed")

    async def __aenter__(self) -> S:
        result = await self.connect()
        if result.is_err():
            raise result.unwrap_err()
        return result.unwrap()

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()
