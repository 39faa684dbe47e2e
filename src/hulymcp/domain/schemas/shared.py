"""Shared field types and base models for tool parameters and results."""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints
from pydantic.alias_generators import to_camel

DEFAULT_LIMIT = 50

NonEmptyString = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

Limit = Annotated[int, Field(ge=1, le=200, description="Maximum number of results to return (default: 50)")]

ProjectIdentifier = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1, max_length=32),
    Field(description="Project identifier (e.g., 'HULY')"),
]

Timestamp = Annotated[int, Field(ge=0, description="Unix timestamp in milliseconds")]


class Params(BaseModel):
    """Base for tool inputs. Unknown keys are ignored."""

    model_config = ConfigDict(frozen=True, extra="ignore")


class Output(BaseModel):
    """Base for tool results. Serialized with camelCase keys."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class EmptyParams(Params):
    """Tools that take no input."""
