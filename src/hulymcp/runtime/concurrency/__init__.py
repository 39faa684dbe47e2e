"""Concurrency primitives."""

from .flag import RunningFlag

__all__ = ["RunningFlag"]
