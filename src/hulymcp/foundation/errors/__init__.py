"""Domain errors, wire error codes, and the Result type."""

from .errors import (
    ConnectionFailure,
    DocumentNotFoundError,
    DomainError,
    ErrorTag,
    FileFetchError,
    FileUploadError,
    HulyAuthError,
    HulyConnectionError,
    HulyError,
    HulyFileNotFoundError,
    InvalidFileDataError,
    InvalidStatusError,
    IssueNotFoundError,
    PersonNotFoundError,
    ProjectNotFoundError,
    TeamspaceNotFoundError,
    WireErrorCode,
)
from .result import Err, Ok, Result

__all__ = [
    # Codes
    "WireErrorCode", "ErrorTag",
    # Errors
    "DomainError", "HulyError", "HulyConnectionError", "HulyAuthError", "ConnectionFailure",
    "IssueNotFoundError", "ProjectNotFoundError", "InvalidStatusError", "PersonNotFoundError",
    "FileUploadError", "InvalidFileDataError", "HulyFileNotFoundError", "FileFetchError",
    "TeamspaceNotFoundError", "DocumentNotFoundError",
    # Result
    "Result", "Ok", "Err",
]
