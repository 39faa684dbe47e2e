"""Huly platform access: authentication, REST sessions, connection lifecycle."""

from .auth import AUTH_STATUS_CODES, ConnectionErrorKind, PlatformError, classify_connection_error
from .connection import ConnectionConfig, ConnectionManager, connect_account_session, connect_data_session
from .rest import AccountSession, FindResult, HulyRestSession

__all__ = [
    "AUTH_STATUS_CODES", "ConnectionErrorKind", "PlatformError", "classify_connection_error",
    "ConnectionConfig", "ConnectionManager", "connect_data_session", "connect_account_session",
    "HulyRestSession", "AccountSession", "FindResult",
]
