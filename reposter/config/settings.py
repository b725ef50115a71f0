"""
Configuration management with Pydantic settings.
Loads the JSON config file and fills gaps from environment variables.
"""
import json
import logging
from pathlib import Path
from typing import Union

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PREFIX_TEMPLATE = "reposter:bot{token}"


class ConfigError(Exception):
    """Raised when the configuration file cannot be loaded."""


class Settings(BaseSettings):
    """Reposter settings with validation and type safety."""

    model_config = SettingsConfigDict(
        env_prefix="REPOSTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Telegram
    token: str = Field(..., min_length=1, description="Bot token from @BotFather")

    # Redis
    redis_address: str = Field(default="localhost:6379", description="Redis host:port")
    redis_db_id: int = Field(default=0, ge=0)
    redis_prefix: str = Field(
        default="",
        description="Key namespace; derived from the token when empty",
    )

    # Logging
    log_level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    debug_mode: bool = Field(default=False)

    @field_validator("redis_address")
    @classmethod
    def check_redis_address(cls, v: str) -> str:
        """Require host:port with a numeric port."""
        host, sep, port = v.rpartition(":")
        if not sep or not host or not port.isdigit():
            raise ValueError(f"expected host:port, got {v!r}")
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, v):
        if isinstance(v, str):
            return v.upper()
        return v

    @model_validator(mode="after")
    def default_prefix(self) -> "Settings":
        if not self.redis_prefix:
            self.redis_prefix = DEFAULT_PREFIX_TEMPLATE.format(token=self.token)
        return self

    @property
    def redis_url(self) -> str:
        """Redis connection URL built from address and database index."""
        return f"redis://{self.redis_address}/{self.redis_db_id}"

    @property
    def logging_level(self) -> int:
        if self.debug_mode:
            return logging.DEBUG
        return getattr(logging, self.log_level)


def load_settings(path: Union[str, Path], **overrides) -> Settings:
    """Load settings from a JSON config file.

    Keys use the file's dashed spelling (``redis-address``). ``overrides``
    take precedence over the file, e.g. ``debug_mode`` from the CLI.
    """
    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"cannot read config {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"config {path} is not valid JSON: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"config {path} must contain a JSON object")

    values = {str(key).replace("-", "_"): value for key, value in raw.items()}
    values.update(overrides)
    try:
        return Settings(**values)
    except ValidationError as e:
        raise ConfigError(f"invalid config {path}: {e}") from e
