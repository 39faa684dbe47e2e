"""Domain error taxonomy for Huly operations.

Every expected failure raised by a domain operation is a DomainError subclass
carrying one ErrorTag from a closed, flat set. The wire layer switches over
the tag, never over the exception class.
"""

from __future__ import annotations

from enum import IntEnum, StrEnum
from types import MappingProxyType
from typing import ClassVar, Mapping


class WireErrorCode(IntEnum):
    """JSON-RPC error codes surfaced to MCP callers."""
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603


class ErrorTag(StrEnum):
    """Closed set of domain error tags.

    Adding a member here without a matching wire mapping fails at import
    time of hulymcp.mcp.error_mapping.
    """
    HULY = "HulyError"
    CONNECTION = "HulyConnectionError"
    AUTH = "HulyAuthError"
    ISSUE_NOT_FOUND = "IssueNotFoundError"
    PROJECT_NOT_FOUND = "ProjectNotFoundError"
    INVALID_STATUS = "InvalidStatusError"
    PERSON_NOT_FOUND = "PersonNotFoundError"
    FILE_UPLOAD = "FileUploadError"
    INVALID_FILE_DATA = "InvalidFileDataError"
    FILE_NOT_FOUND = "FileNotFoundError"
    FILE_FETCH = "FileFetchError"
    TEAMSPACE_NOT_FOUND = "TeamspaceNotFoundError"
    DOCUMENT_NOT_FOUND = "DocumentNotFoundError"


class DomainError(Exception):
    """Base for tagged domain failures.

    Attributes:
        tag: Stable discriminator used by the wire translator
        message: Human-readable message (never contains credentials)
        context: Identifiers needed to reconstruct the error
    """

    __slots__ = ("message", "context")
    tag: ClassVar[ErrorTag] = ErrorTag.HULY

    def __init__(self, message: str, **context: object) -> None:
        super().__init__(message)
        self.message = message
        self.context: Mapping[str, object] = MappingProxyType(dict(context))

    def __repr__(self) -> str:
        ctx = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        return f"{type(self).__name__}({self.message!r}{', ' + ctx if ctx else ''})"


class HulyError(DomainError):
    """Uncategorized failure reported by the platform."""
    tag = ErrorTag.HULY


class HulyConnectionError(DomainError):
    """Network or transport failure talking to the platform."""
    __slots__ = ("cause",)
    tag = ErrorTag.CONNECTION

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class HulyAuthError(DomainError):
    """Credentials rejected by the platform. Never retried."""
    tag = ErrorTag.AUTH


# ─────────────────────────────────────────────────────────────────────────────
# Not-found / invalid-input errors
# ─────────────────────────────────────────────────────────────────────────────


class IssueNotFoundError(DomainError):
    tag = ErrorTag.ISSUE_NOT_FOUND

    def __init__(self, identifier: str, project: str) -> None:
        super().__init__(
            f"Issue '{identifier}' not found in project '{project}'",
            identifier=identifier, project=project,
        )


class ProjectNotFoundError(DomainError):
    tag = ErrorTag.PROJECT_NOT_FOUND

    def __init__(self, identifier: str) -> None:
        super().__init__(f"Project '{identifier}' not found", identifier=identifier)


class InvalidStatusError(DomainError):
    tag = ErrorTag.INVALID_STATUS

    def __init__(self, status: str, project: str) -> None:
        super().__init__(
            f"Invalid status '{status}' for project '{project}'",
            status=status, project=project,
        )


class PersonNotFoundError(DomainError):
    tag = ErrorTag.PERSON_NOT_FOUND

    def __init__(self, identifier: str) -> None:
        super().__init__(f"Person '{identifier}' not found", identifier=identifier)


class FileUploadError(DomainError):
    """Storage rejected an upload."""
    tag = ErrorTag.FILE_UPLOAD


class InvalidFileDataError(DomainError):
    tag = ErrorTag.INVALID_FILE_DATA


class HulyFileNotFoundError(DomainError):
    tag = ErrorTag.FILE_NOT_FOUND

    def __init__(self, file_path: str) -> None:
        super().__init__(f"File not found: {file_path}", file_path=file_path)


class FileFetchError(DomainError):
    tag = ErrorTag.FILE_FETCH

    def __init__(self, file_url: str, reason: str) -> None:
        super().__init__(
            f"Failed to fetch file from {file_url}: {reason}",
            file_url=file_url, reason=reason,
        )


class TeamspaceNotFoundError(DomainError):
    tag = ErrorTag.TEAMSPACE_NOT_FOUND

    def __init__(self, identifier: str) -> None:
        super().__init__(f"Teamspace '{identifier}' not found", identifier=identifier)


class DocumentNotFoundError(DomainError):
    tag = ErrorTag.DOCUMENT_NOT_FOUND

    def __init__(self, identifier: str, teamspace: str) -> None:
        super().__init__(
            f"Document '{identifier}' not found in teamspace '{teamspace}'",
            identifier=identifier, teamspace=teamspace,
        )


ConnectionFailure = HulyConnectionError | HulyAuthError
