"""Environment-based configuration using pydantic-settings.

Credentials come only from the environment. Non-secret connection values
(url, workspace, connection timeout) may also come from an optional
`.hulyrc.json` in the working directory; environment variables win.

Example:
    >>> from hulymcp.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.server.transport
    'stdio'

    # Environment variables:
    # HULY_URL=https://huly.app
    # HULY_EMAIL=me@example.com  HULY_PASSWORD=...   (or HULY_TOKEN=...)
    # HULY_WORKSPACE=my-workspace
    # MCP_TRANSPORT=http  MCP_HTTP_PORT=3000
    # TOOLSETS=issues,projects
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any, ClassVar, Literal
from urllib.parse import urlsplit

import orjson
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PositiveInt,
    SecretStr,
    StringConstraints,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

DEFAULT_TIMEOUT_MS = 30_000
CONFIG_FILE_NAME = ".hulyrc.json"


class ConfigError(Exception):
    """Configuration could not be loaded or failed validation."""

    __slots__ = ("field", "path")

    def __init__(self, message: str, *, field: str | None = None, path: str | None = None) -> None:
        super().__init__(message)
        self.field = field
        self.path = path

    def __str__(self) -> str:
        msg = self.args[0]
        if self.field:
            return f"Configuration error ({self.field}): {msg}"
        if self.path:
            return f"Configuration error ({self.path}): {msg}"
        return f"Configuration error: {msg}"


def _check_http_url(v: str) -> str:
    parts = urlsplit(v)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ValueError("Must be a valid http or https URL")
    return v.rstrip("/")


# ─────────────────────────────────────────────────────────────────────────────
# Credentials
# ─────────────────────────────────────────────────────────────────────────────


class TokenCredentials(BaseModel):
    """Bearer token authentication."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["token"] = "token"
    token: SecretStr


class PasswordCredentials(BaseModel):
    """Email/password authentication."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["password"] = "password"
    email: NonEmptyStr
    password: SecretStr


Credentials = Annotated[TokenCredentials | PasswordCredentials, Field(discriminator="kind")]


# ─────────────────────────────────────────────────────────────────────────────
# .hulyrc.json
# ─────────────────────────────────────────────────────────────────────────────


class FileConfig(BaseModel):
    """Non-secret values accepted from the config file. Other keys are ignored."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    url: str | None = None
    workspace: NonEmptyStr | None = None
    connection_timeout: PositiveInt | None = Field(default=None, alias="connectionTimeout")

    @field_validator("url")
    @classmethod
    def _validate_url(cls, v: str | None) -> str | None:
        return v if v is None else _check_http_url(v)


def load_config_file(path: Path) -> dict[str, Any]:
    """Read and validate `.hulyrc.json`. A missing file yields an empty mapping.

    Raises:
        ConfigError: Unreadable file, invalid JSON, or invalid values
    """
    if not path.exists():
        return {}
    try:
        raw = orjson.loads(path.read_bytes())
    except OSError as e:
        raise ConfigError(f"Failed to read config file: {e}", path=str(path)) from e
    except orjson.JSONDecodeError as e:
        raise ConfigError("Config file is not valid JSON", path=str(path)) from e
    try:
        decoded = FileConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"Config file validation failed: {e}", path=str(path)) from e
    return decoded.model_dump(exclude_none=True)


class HulyrcSettingsSource(PydanticBaseSettingsSource):
    """Lowest-priority settings source backed by the JSON config file."""

    def __init__(self, settings_cls: type[BaseSettings], path: Path | None = None) -> None:
        super().__init__(settings_cls)
        self._path = path or Path(getattr(settings_cls, "config_file", CONFIG_FILE_NAME))
        self._data = load_config_file(self._path)

    def get_field_value(self, field: FieldInfo, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, False

    def __call__(self) -> dict[str, Any]:
        return dict(self._data)


# ─────────────────────────────────────────────────────────────────────────────
# Settings Groups
# ─────────────────────────────────────────────────────────────────────────────


class HulySettings(BaseSettings):
    """Platform connection configuration (HULY_ prefix)."""

    model_config = SettingsConfigDict(
        env_prefix="HULY_",
        extra="ignore",
    )
    config_file: ClassVar[str] = CONFIG_FILE_NAME

    url: str
    email: NonEmptyStr | None = None
    password: SecretStr | None = None
    token: SecretStr | None = None
    workspace: NonEmptyStr
    connection_timeout: PositiveInt = Field(default=DEFAULT_TIMEOUT_MS, description="Connection timeout in ms")

    @field_validator("url")
    @classmethod
    def _validate_url(cls, v: str) -> str:
        return _check_http_url(v)

    @model_validator(mode="after")
    def _require_credentials(self) -> HulySettings:
        if self.token is None and (self.email is None or self.password is None):
            raise ValueError("Missing required config: HULY_TOKEN or HULY_EMAIL and HULY_PASSWORD")
        return self

    @property
    def credentials(self) -> TokenCredentials | PasswordCredentials:
        """Resolved credentials. A token takes precedence over email/password."""
        if self.token is not None:
            return TokenCredentials(token=self.token)
        return PasswordCredentials(email=self.email or "", password=self.password or SecretStr(""))

    @property
    def timeout_seconds(self) -> float:
        return self.connection_timeout / 1000

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings, env_settings, HulyrcSettingsSource(settings_cls))


class ServerSettings(BaseSettings):
    """MCP transport configuration (MCP_ prefix; TOOLSETS unprefixed)."""

    model_config = SettingsConfigDict(
        env_prefix="MCP_",
        extra="ignore",
        populate_by_name=True,
    )

    transport: Literal["stdio", "http"] = "stdio"
    http_host: str = "127.0.0.1"
    http_port: Annotated[int, Field(ge=1, le=65535)] = 3000
    auto_exit: bool = Field(default=False, description="Exit when the stdio peer closes")
    toolsets: str | None = Field(default=None, validation_alias="TOOLSETS")

    @field_validator("transport", mode="before")
    @classmethod
    def _normalize_transport(cls, v: object) -> object:
        return v.strip().lower() if isinstance(v, str) else v


class LoggingSettings(BaseSettings):
    """Logging configuration (HULY_MCP_LOG_ prefix)."""

    model_config = SettingsConfigDict(
        env_prefix="HULY_MCP_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["json", "text"] = "text"

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, v: object) -> object:
        return v.upper() if isinstance(v, str) else v


class Settings(BaseModel):
    """Root settings: one group per concern."""

    model_config = ConfigDict(frozen=True)

    huly: HulySettings
    server: ServerSettings
    logging: LoggingSettings


def _field_of(error: ValidationError) -> str | None:
    errors = error.errors()
    if not errors or not errors[0]["loc"]:
        return None
    return ".".join(str(p) for p in errors[0]["loc"])


def load_settings() -> Settings:
    """Load every settings group from the environment and config file.

    Raises:
        ConfigError: On any missing or invalid value
    """
    try:
        return Settings(huly=HulySettings(), server=ServerSettings(), logging=LoggingSettings())
    except ValidationError as e:
        first = e.errors()[0]
        raise ConfigError(first["msg"], field=_field_of(e)) from e


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the process-wide settings instance (cached)."""
    return load_settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
