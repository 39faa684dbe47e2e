"""Foundation - core building blocks for hulymcp.

Contains: error taxonomy, Result type, configuration, tool registry.
"""

from __future__ import annotations

__all__ = [
    # Errors
    "WireErrorCode", "ErrorTag", "DomainError", "Result", "Ok", "Err",
    # Config
    "Settings", "get_settings", "clear_settings_cache", "ConfigError",
    # Registry
    "Category", "ToolDefinition", "ToolRegistry", "parse_toolsets",
]


def __getattr__(name: str):
    """Lazy imports to avoid circular dependencies."""
    if name in ("WireErrorCode", "ErrorTag", "DomainError", "Result", "Ok", "Err"):
        from . import errors
        return getattr(errors, name)

    if name in ("Settings", "get_settings", "clear_settings_cache", "ConfigError"):
        from . import config
        return getattr(config, name)

    if name in ("Category", "ToolDefinition", "ToolRegistry", "parse_toolsets"):
        from . import registry
        return getattr(registry, name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
