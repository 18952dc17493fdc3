"""Pydantic settings loaded from YAML configuration."""

from __future__ import annotations

import socket
import sys
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, SecretStr

_DEFAULT_CONFIG_PATH = Path("config/settings.yaml")

DEFAULT_ENDPOINT = "https://api.rollbar.com/api/1/item/"


class ServerConfig(BaseModel):
    """Describes the host the notifier runs on."""

    host: str = Field(default_factory=socket.gethostname)
    root: str | None = None
    branch: str | None = None


class NotifierConfig(BaseModel):
    """Endpoint, credentials, and the fields stamped on every notice."""

    enabled: bool = True
    endpoint: str = DEFAULT_ENDPOINT
    access_token: SecretStr = SecretStr("")
    environment: str = "production"
    platform: str = sys.platform
    language: str = "python"
    framework: str = ""
    code_version: str = ""
    encoding: str = "utf-8"
    server: ServerConfig = Field(default_factory=ServerConfig)


class SerializerConfig(BaseModel):
    """JSON serialization options."""

    sort_keys: bool = True
    enum_as_string: bool = True
    # strftime pattern for datetimes in custom data; ISO-8601 when None.
    date_format: str | None = None


class TransportConfig(BaseModel):
    """HTTP delivery configuration."""

    timeout_secs: float = 10.0


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "json"


class Settings(BaseModel):
    """Root settings container."""

    notifier: NotifierConfig = Field(default_factory=NotifierConfig)
    serializer: SerializerConfig = SerializerConfig()
    transport: TransportConfig = TransportConfig()
    logging: LoggingConfig = LoggingConfig()


def load_settings(path: str | Path | None = None) -> Settings:
    """Load settings from a YAML file.

    The result is meant to be built once at startup and handed to
    :func:`rollbar_notifier.factory.create_notifier`.

    Args:
        path: Path to YAML config. Defaults to config/settings.yaml.

    Returns:
        Parsed Settings instance.
    """
    config_path = Path(path) if path else _DEFAULT_CONFIG_PATH

    data: dict[str, Any] = {}
    if config_path.exists():
        with open(config_path) as f:
            raw = yaml.safe_load(f)
            if isinstance(raw, dict):
                data = raw

    return Settings(**data)
