"""Asynchronous, fire-and-forget error and message reporting for Rollbar."""

from rollbar_notifier.core.config import Settings, load_settings
from rollbar_notifier.core.logging import setup_logging
from rollbar_notifier.delivery.types import PendingSend
from rollbar_notifier.factory import create_notifier
from rollbar_notifier.notice.types import Notice, Severity
from rollbar_notifier.notifier import NoticeHook, Notifier

__all__ = [
    "Notice",
    "NoticeHook",
    "Notifier",
    "PendingSend",
    "Settings",
    "Severity",
    "create_notifier",
    "load_settings",
    "setup_logging",
]
