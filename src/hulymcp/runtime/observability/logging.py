"""Logging setup for the server process.

All output goes to stderr: on the stdio transport stdout carries protocol
frames, so a stray log line there corrupts the session.

Quick Start:
    >>> from hulymcp.runtime.observability import configure_logging
    >>> configure_logging(format="json", level="DEBUG")
    >>> logging.getLogger("hulymcp.server").info("started", extra={"transport": "stdio"})
"""

from __future__ import annotations

import logging
import sys
from datetime import UTC, datetime
from typing import TextIO

import orjson

ROOT_LOGGER = "hulymcp"

# Attributes every LogRecord carries; anything else came in through `extra=`
_RESERVED = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}

_COLORS = {"reset": "\033[0m", "dim": "\033[2m", "bold": "\033[1m", "cyan": "\033[36m", "red": "\033[31m"}
_NO_COLORS = dict.fromkeys(_COLORS, "")
_LEVEL_COLORS = {
    "DEBUG": "\033[34m", "INFO": "\033[32m", "WARNING": "\033[33m",
    "ERROR": "\033[31m", "CRITICAL": "\033[35m",
}


def _context(record: logging.LogRecord) -> dict[str, object]:
    return {k: v for k, v in vars(record).items() if k not in _RESERVED and not k.startswith("_")}


class ConsoleFormatter(logging.Formatter):
    """Human-readable output. Format: timestamp [level] logger: message key=value ..."""

    def __init__(self, colors: bool = False) -> None:
        super().__init__()
        self._c = _COLORS if colors else _NO_COLORS
        self._colors = colors

    def format(self, record: logging.LogRecord) -> str:
        c = self._c
        ts = datetime.fromtimestamp(record.created, UTC).strftime("%H:%M:%S.%f")[:-3]
        level = _LEVEL_COLORS.get(record.levelname, "") if self._colors else ""
        parts = [
            f"{c['dim']}{ts}{c['reset']}",
            f"{level}[{record.levelname}]{c['reset']}",
            f"{c['dim']}{record.name}:{c['reset']}",
            f"{c['bold']}{record.getMessage()}{c['reset']}",
        ]
        parts += [f"{c['cyan']}{k}{c['reset']}={v}" for k, v in sorted(_context(record).items())]
        line = " ".join(parts)
        if record.exc_info:
            line += f"\n{c['red']}{self.formatException(record.exc_info)}{c['reset']}"
        return line


class JsonFormatter(logging.Formatter):
    """JSON Lines output for log aggregation."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "event": record.getMessage(),
            **_context(record),
        }
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return orjson.dumps(entry, default=str, option=orjson.OPT_NON_STR_KEYS).decode()


def configure_logging(
    format: str = "text",  # noqa: A002 - shadows builtin but matches stdlib
    level: str = "INFO",
    *,
    output: TextIO | None = None,
    colors: bool | None = None,
) -> logging.Handler:
    """Install a single handler on the package logger. Format: "text" or "json".

    Calling again replaces the previously installed handler.
    """
    stream = output or sys.stderr
    match format:
        case "text":
            if colors is None:
                colors = getattr(stream, "isatty", lambda: False)()
            formatter: logging.Formatter = ConsoleFormatter(colors=colors)
        case "json":
            formatter = JsonFormatter()
        case _:
            raise ValueError(f"Unknown format: {format}. Use 'text' or 'json'")

    handler = logging.StreamHandler(stream)
    handler.setFormatter(formatter)

    root = logging.getLogger(ROOT_LOGGER)
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler
