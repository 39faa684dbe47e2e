"""Atomically checked boolean for start/stop guards."""

from __future__ import annotations

import threading


class RunningFlag:
    """Compare-and-set boolean.

    `try_set()` succeeds for exactly one caller until `clear()` is called,
    regardless of which thread or task calls it.

    Example:
        >>> flag = RunningFlag()
        >>> flag.try_set(), flag.try_set()
        (True, False)
        >>> flag.clear()
        >>> flag.is_set
        False
    """

    __slots__ = ("_lock", "_value")

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value = False

    def try_set(self) -> bool:
        """Set the flag if clear. Returns whether this call set it."""
        with self._lock:
            if self._value:
                return False
            self._value = True
            return True

    def clear(self) -> None:
        with self._lock:
            self._value = False

    @property
    def is_set(self) -> bool:
        with self._lock:
            return self._value
