"""Translation of every failure mode into the two-code wire taxonomy.

- InvalidParams (-32602): caller mistakes and remote-state mistakes. Messages
  pass through verbatim so the caller can fix the input.
- InternalError (-32603): infrastructure failures, defects, cancellation.
  Messages are sanitized; defects and cancellation get a fixed generic text.

Sanitization is whole-message replacement: if any sensitive term appears
anywhere in an InternalError message, the caller sees only the fallback.
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Final

from pydantic import ValidationError

from hulymcp.foundation.errors import DomainError, ErrorTag, WireErrorCode

from .response import WireResponse, error_response

SANITIZED_FALLBACK: Final = "An error occurred while processing the request"
UNEXPECTED_ERROR: Final = "An unexpected error occurred"

UNKNOWN_TOOL_TAG: Final = "UnknownTool"
UNEXPECTED_ERROR_TAG: Final = "UnexpectedError"
CANCELLED_TAG: Final = "Cancelled"

_SENSITIVE = re.compile(
    r"password|token|secret|credential|api[\s_-]?key|auth|bearer|jwt|session[\s_-]?id|cookie",
    re.IGNORECASE,
)

_INVALID = WireErrorCode.INVALID_PARAMS
_INTERNAL = WireErrorCode.INTERNAL_ERROR

# One entry per tag; checked for completeness below
WIRE_CODES: Final = MappingProxyType({
    ErrorTag.HULY: _INTERNAL,
    ErrorTag.CONNECTION: _INTERNAL,
    ErrorTag.AUTH: _INTERNAL,
    ErrorTag.FILE_UPLOAD: _INTERNAL,
    ErrorTag.FILE_FETCH: _INTERNAL,
    ErrorTag.ISSUE_NOT_FOUND: _INVALID,
    ErrorTag.PROJECT_NOT_FOUND: _INVALID,
    ErrorTag.INVALID_STATUS: _INVALID,
    ErrorTag.PERSON_NOT_FOUND: _INVALID,
    ErrorTag.INVALID_FILE_DATA: _INVALID,
    ErrorTag.FILE_NOT_FOUND: _INVALID,
    ErrorTag.TEAMSPACE_NOT_FOUND: _INVALID,
    ErrorTag.DOCUMENT_NOT_FOUND: _INVALID,
})

INTERNAL_PREFIXES: Final = MappingProxyType({
    ErrorTag.AUTH: "Authentication error",
    ErrorTag.CONNECTION: "Connection error",
    ErrorTag.FILE_UPLOAD: "File upload error",
})

if _missing := set(ErrorTag) - set(WIRE_CODES):
    raise RuntimeError(f"ErrorTag members without a wire code: {sorted(_missing)}")


def sanitize(message: str) -> str:
    """Return the message, or the generic fallback if it mentions a sensitive term."""
    return SANITIZED_FALLBACK if _SENSITIVE.search(message) else message


def map_domain_error(error: DomainError) -> WireResponse:
    code = WIRE_CODES[error.tag]
    if code is WireErrorCode.INVALID_PARAMS:
        return error_response(error.message, code, error.tag.value)
    prefix = INTERNAL_PREFIXES.get(error.tag)
    message = f"{prefix}: {error.message}" if prefix else error.message
    return error_response(sanitize(message), code, error.tag.value)


def format_validation_error(error: ValidationError) -> str:
    """One `dotted.path: reason` entry per violation, joined with '; '."""
    parts = []
    for issue in error.errors(include_url=False):
        path = ".".join(str(p) for p in issue["loc"])
        parts.append(f"{path}: {issue['msg']}" if path else issue["msg"])
    return "; ".join(parts)


def map_validation_error(error: ValidationError, tool_name: str | None = None) -> WireResponse:
    prefix = f"Invalid parameters for {tool_name}: " if tool_name else "Invalid parameters: "
    return error_response(f"{prefix}{format_validation_error(error)}", WireErrorCode.INVALID_PARAMS)


def unknown_tool(name: str) -> WireResponse:
    return error_response(f"Unknown tool: {name}", WireErrorCode.INVALID_PARAMS, UNKNOWN_TOOL_TAG)


def unexpected_error() -> WireResponse:
    return error_response(UNEXPECTED_ERROR, WireErrorCode.INTERNAL_ERROR, UNEXPECTED_ERROR_TAG)


def cancelled() -> WireResponse:
    return error_response(UNEXPECTED_ERROR, WireErrorCode.INTERNAL_ERROR, CANCELLED_TAG)
