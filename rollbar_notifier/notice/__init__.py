"""Notice construction and serialization."""

from rollbar_notifier.notice.builder import NoticeBuilder
from rollbar_notifier.notice.serializer import PayloadSerializer
from rollbar_notifier.notice.types import (
    Body,
    ExceptionInfo,
    Frame,
    Message,
    Notice,
    NotifierInfo,
    PayloadEnvelope,
    ServerInfo,
    Severity,
    Trace,
)

__all__ = [
    "Body",
    "ExceptionInfo",
    "Frame",
    "Message",
    "Notice",
    "NoticeBuilder",
    "NotifierInfo",
    "PayloadEnvelope",
    "PayloadSerializer",
    "ServerInfo",
    "Severity",
    "Trace",
]
