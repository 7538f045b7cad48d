"""Configuration management for the aws-lite request engine."""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

_config_logger = logging.getLogger(__name__)


class LoggingSettings(BaseModel):
    level: str = Field(default="INFO", description="Python logging level name")
    file: str | None = Field(default=None, description="Optional log file path")


class EndpointSettings(BaseModel):
    """Base endpoint configuration; every field can be overridden per call."""

    protocol: Literal["http", "https"] = Field(default="https")
    host: str | None = Field(default=None)
    port: int | None = Field(default=None, ge=1, le=65535)
    path_prefix: str | None = Field(default=None)
    endpoint: str | None = Field(
        default=None,
        description="Full endpoint URL, e.g. http://localhost:4566/prefix",
    )

    @field_validator("path_prefix")
    @classmethod
    def _validate_path_prefix(cls, value: str | None) -> str | None:
        if value is None or value.strip() == "":
            return None
        value = value.strip()
        return value if value.startswith("/") else "/" + value


class TransportSettings(BaseModel):
    timeout_seconds: float = Field(default=30.0, gt=0, le=600)


class CatalogSettings(BaseModel):
    paths: tuple[str, ...] = Field(
        default=(),
        description="Extra directories of service definition YAML files.",
    )


class AWSSettings(BaseModel):
    default_region: str | None = Field(default=None)
    default_profile: str | None = Field(default=None)


class Settings(BaseModel):
    debug: bool = Field(default=False)
    endpoint: EndpointSettings = Field(default_factory=EndpointSettings)
    transport: TransportSettings = Field(default_factory=TransportSettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    aws: AWSSettings = Field(default_factory=AWSSettings)


ENV_KEYS = {
    "protocol": "AWS_LITE_PROTOCOL",
    "host": "AWS_LITE_HOST",
    "port": "AWS_LITE_PORT",
    "path_prefix": "AWS_LITE_PATH_PREFIX",
    "endpoint": "AWS_LITE_ENDPOINT",
    "debug": "AWS_LITE_DEBUG",
    "timeout": "AWS_LITE_TIMEOUT_SECONDS",
    "catalog_paths": "AWS_LITE_CATALOG_PATHS",
    "log_level": "LOG_LEVEL",
    "log_file": "LOG_FILE",
    "aws_region": "AWS_DEFAULT_REGION",
    "aws_profile": "AWS_PROFILE",
}

_TRUE_VALUES = frozenset({"1", "true", "yes"})


def _split_csv_preserve_case(value: str | None) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def _env_str(key: str) -> str | None:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return None
    return value.strip()


def _env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


def _env_int(key: str, default: int | None) -> int | None:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        _config_logger.warning(
            "Invalid integer value for %s: %r, using default %s", key, value, default
        )
        return default


def _env_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError:
        _config_logger.warning(
            "Invalid float value for %s: %r, using default %s", key, value, default
        )
        return default


def load_settings() -> Settings:
    """Load configuration and cache the result."""

    return _load_settings_cached()


@lru_cache(maxsize=1)
def _load_settings_cached() -> Settings:
    load_dotenv(dotenv_path=Path.cwd() / ".env")

    settings_data: dict[str, object] = {
        "debug": _env_bool(ENV_KEYS["debug"], False),
        "endpoint": {
            "protocol": (
                _env_str(ENV_KEYS["protocol"]) or EndpointSettings().protocol
            ).lower(),
            "host": _env_str(ENV_KEYS["host"]),
            "port": _env_int(ENV_KEYS["port"], None),
            "path_prefix": _env_str(ENV_KEYS["path_prefix"]),
            "endpoint": _env_str(ENV_KEYS["endpoint"]),
        },
        "transport": {
            "timeout_seconds": _env_float(
                ENV_KEYS["timeout"],
                TransportSettings().timeout_seconds,
            ),
        },
        "catalog": {
            "paths": tuple(_split_csv_preserve_case(os.getenv(ENV_KEYS["catalog_paths"]))),
        },
        "logging": {
            "level": os.getenv(ENV_KEYS["log_level"], LoggingSettings().level),
            "file": _env_str(ENV_KEYS["log_file"]),
        },
        "aws": {
            "default_region": _env_str("AWS_REGION") or _env_str(ENV_KEYS["aws_region"]),
            "default_profile": _env_str(ENV_KEYS["aws_profile"]),
        },
    }

    try:
        return Settings.model_validate(settings_data)
    except ValidationError as exc:
        raise RuntimeError(f"Invalid configuration: {exc}") from exc
