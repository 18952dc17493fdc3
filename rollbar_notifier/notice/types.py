"""Domain types for notices and the payload envelope sent to the endpoint."""

from __future__ import annotations

import time
import uuid
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

NOTIFIER_NAME = "rollbar-notifier"
NOTIFIER_VERSION = "0.1.0"


class Severity(StrEnum):
    """Notice severity, most urgent first.

    Only a label: ``Notice.level`` is a plain string so unknown levels pass
    through untouched.
    """

    CRITICAL = "critical"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    DEBUG = "debug"


class Frame(BaseModel):
    """A single stack frame."""

    filename: str
    lineno: int | None = None
    method: str | None = None
    code: str | None = None


class ExceptionInfo(BaseModel):
    """Type name and message of the reported exception."""

    model_config = ConfigDict(populate_by_name=True)

    class_name: str = Field(default="", alias="class")
    message: str = ""


class Trace(BaseModel):
    """Frames ordered outermost call first, plus the exception they led to."""

    frames: list[Frame] = Field(default_factory=list)
    exception: ExceptionInfo = Field(default_factory=ExceptionInfo)


class Message(BaseModel):
    body: str = ""


class Body(BaseModel):
    """Exactly one of ``trace`` or ``message`` is set."""

    trace: Trace | None = None
    message: Message | None = None


class NotifierInfo(BaseModel):
    name: str = NOTIFIER_NAME
    version: str = NOTIFIER_VERSION


class ServerInfo(BaseModel):
    host: str = ""
    root: str | None = None
    branch: str | None = None


class Notice(BaseModel):
    """The ``data`` record describing one reported event.

    Left mutable so a caller's hook can adjust any field before the notice
    is serialized.
    """

    environment: str = ""
    body: Body = Field(default_factory=Body)
    level: str = Severity.ERROR.value
    timestamp: int = Field(default_factory=lambda: int(time.time()))
    title: str = ""
    platform: str = ""
    language: str = ""
    framework: str | None = None
    code_version: str | None = None
    uuid: str = Field(default_factory=lambda: uuid.uuid4().hex)
    server: ServerInfo = Field(default_factory=ServerInfo)
    notifier: NotifierInfo = Field(default_factory=NotifierInfo)
    custom: dict[str, Any] = Field(default_factory=dict)


class PayloadEnvelope(BaseModel):
    """Access token plus exactly one notice; the unit put on the wire."""

    access_token: str = Field(repr=False)
    data: Notice
