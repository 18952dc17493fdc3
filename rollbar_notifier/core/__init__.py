"""Core module — config, logging, exceptions."""

from rollbar_notifier.core.config import (
    LoggingConfig,
    NotifierConfig,
    SerializerConfig,
    ServerConfig,
    Settings,
    TransportConfig,
    load_settings,
)
from rollbar_notifier.core.exceptions import (
    NotifierError,
    SerializationError,
    TransportError,
)
from rollbar_notifier.core.logging import setup_logging

__all__ = [
    "LoggingConfig",
    "NotifierConfig",
    "NotifierError",
    "SerializationError",
    "SerializerConfig",
    "ServerConfig",
    "Settings",
    "TransportConfig",
    "TransportError",
    "load_settings",
    "setup_logging",
]
