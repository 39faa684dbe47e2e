"""Configuration from environment variables and `.hulyrc.json`."""

from .settings import (
    CONFIG_FILE_NAME,
    ConfigError,
    Credentials,
    FileConfig,
    HulySettings,
    HulyrcSettingsSource,
    LoggingSettings,
    PasswordCredentials,
    ServerSettings,
    Settings,
    TokenCredentials,
    clear_settings_cache,
    get_settings,
    load_config_file,
    load_settings,
)

__all__ = [
    "Settings", "HulySettings", "ServerSettings", "LoggingSettings",
    "Credentials", "TokenCredentials", "PasswordCredentials",
    "FileConfig", "HulyrcSettingsSource", "CONFIG_FILE_NAME", "load_config_file",
    "ConfigError", "load_settings", "get_settings", "clear_settings_cache",
]
