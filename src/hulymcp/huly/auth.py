"""Classification of platform connection failures.

An authentication failure can never succeed on retry; everything else is
treated as transient. Classification prefers structured evidence:

1. A PlatformError status code is matched exactly against AUTH_STATUS_CODES.
2. An HTTP 401/403 response is authentication.
3. Only errors carrying no structured status fall back to case-insensitive
   substring matching on the stringified error.

The substring fallback is approximate. A transient error misread as auth
costs one skipped retry; an auth error misread as transient costs wasted
retries before the same failure. Neither corrupts data.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Mapping

import httpx

from hulymcp.foundation.errors import ConnectionFailure, HulyAuthError, HulyConnectionError
from hulymcp.runtime.retry import RetryDecision

# `${pluginId}:status:${statusName}` codes emitted by the platform's account service
AUTH_STATUS_CODES: frozenset[str] = frozenset({
    "platform:status:Unauthorized",
    "platform:status:TokenExpired",
    "platform:status:TokenNotActive",
    "platform:status:PasswordExpired",
    "platform:status:Forbidden",
    "platform:status:InvalidPassword",
    "platform:status:AccountNotFound",
    "platform:status:AccountNotConfirmed",
})

AUTH_HTTP_STATUSES: frozenset[int] = frozenset({401, 403})

_AUTH_SUBSTRINGS: tuple[str, ...] = (
    "unauthorized",
    "invalid password",
    "invalid email",
    "login failed",
    "401",
    "403",
)


class ConnectionErrorKind(StrEnum):
    AUTHENTICATION = "authentication"
    TRANSIENT = "transient"


class PlatformError(Exception):
    """Error reported by a platform service with a structured status code.

    Attributes:
        status_code: e.g. "platform:status:Unauthorized"
        params: Extra status parameters from the service
    """

    __slots__ = ("status_code", "params")

    def __init__(self, status_code: str, params: Mapping[str, Any] | None = None) -> None:
        super().__init__(status_code)
        self.status_code = status_code
        self.params = dict(params or {})

    def __str__(self) -> str:
        return f"PlatformError: {self.status_code}"


def _matches_auth_substring(text: str) -> bool:
    haystack = text.lower()
    return any(s in haystack for s in _AUTH_SUBSTRINGS)


def classify_connection_error(error: BaseException) -> ConnectionErrorKind:
    """Classify a raw connect failure as authentication or transient."""
    if isinstance(error, PlatformError):
        return (ConnectionErrorKind.AUTHENTICATION if error.status_code in AUTH_STATUS_CODES
                else ConnectionErrorKind.TRANSIENT)
    if isinstance(error, httpx.HTTPStatusError):
        return (ConnectionErrorKind.AUTHENTICATION if error.response.status_code in AUTH_HTTP_STATUSES
                else ConnectionErrorKind.TRANSIENT)
    if _matches_auth_substring(str(error)):
        return ConnectionErrorKind.AUTHENTICATION
    return ConnectionErrorKind.TRANSIENT


def to_connection_failure(error: BaseException, prefix: str) -> ConnectionFailure:
    """Wrap a raw failure in the matching domain error."""
    message = f"{prefix}: {error}"
    if classify_connection_error(error) is ConnectionErrorKind.AUTHENTICATION:
        return HulyAuthError(message)
    return HulyConnectionError(message, cause=error)


def retry_decision(error: ConnectionFailure) -> RetryDecision:
    """Authentication failures stop; transient failures retry."""
    return RetryDecision.STOP if isinstance(error, HulyAuthError) else RetryDecision.RETRY
