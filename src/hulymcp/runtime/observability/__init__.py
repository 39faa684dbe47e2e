"""Observability: log formatting and handler setup."""

from .logging import ROOT_LOGGER, ConsoleFormatter, JsonFormatter, configure_logging

__all__ = ["ROOT_LOGGER", "ConsoleFormatter", "JsonFormatter", "configure_logging"]
