"""Builds notices from exceptions or plain text messages."""

from __future__ import annotations

import traceback
from collections.abc import Mapping
from typing import Any

from rollbar_notifier.core.config import NotifierConfig
from rollbar_notifier.notice.types import (
    Body,
    ExceptionInfo,
    Frame,
    Message,
    Notice,
    ServerInfo,
    Severity,
    Trace,
)


def _extract_frames(error: BaseException) -> list[Frame]:
    """Frames from the exception's own traceback, outermost call first.

    An exception that was created but never raised has no traceback.
    """
    if error.__traceback__ is None:
        return []
    return [
        Frame(
            filename=fs.filename,
            lineno=fs.lineno,
            method=fs.name,
            code=fs.line or None,
        )
        for fs in traceback.extract_tb(error.__traceback__)
    ]


def _safe_message(error: BaseException) -> str:
    """``str(error)``, or ``""`` when the exception cannot render itself."""
    try:
        return str(error)
    except Exception:
        return ""


def _derive_title(error: BaseException, message: str) -> str:
    name = type(error).__name__
    return f"{name}: {message}" if message else name


class NoticeBuilder:
    """Creates the ``data`` part of a payload; never touches the network.

    Every notice is stamped with the environment, platform and server
    details from *config*. Malformed input yields a degraded notice rather
    than an exception.
    """

    def __init__(self, config: NotifierConfig) -> None:
        self._config = config

    def build_from_exception(
        self,
        error: BaseException | None,
        title: str | None = None,
        level: str = Severity.ERROR,
    ) -> Notice:
        if error is None:
            trace = Trace()
            derived = ""
        else:
            message = _safe_message(error)
            trace = Trace(
                frames=_extract_frames(error),
                exception=ExceptionInfo(
                    class_name=type(error).__name__,
                    message=message,
                ),
            )
            derived = _derive_title(error, message)

        return self._new_notice(
            level=level,
            title=str(title) if title is not None else derived,
            body=Body(trace=trace),
        )

    def build_from_message(
        self,
        message: str | None,
        level: str = Severity.INFO,
        custom_data: Mapping[str, Any] | None = None,
    ) -> Notice:
        text = "" if message is None else str(message)
        return self._new_notice(
            level=level,
            title=text,
            body=Body(message=Message(body=text)),
            custom={str(k): v for k, v in (custom_data or {}).items()},
        )

    def _new_notice(
        self,
        level: str,
        title: str,
        body: Body,
        custom: dict[str, Any] | None = None,
    ) -> Notice:
        cfg = self._config
        return Notice(
            environment=cfg.environment,
            body=body,
            level=str(level),
            title=title,
            platform=cfg.platform,
            language=cfg.language,
            framework=cfg.framework or None,
            code_version=cfg.code_version or None,
            server=ServerInfo(
                host=cfg.server.host,
                root=cfg.server.root,
                branch=cfg.server.branch,
            ),
            custom=custom or {},
        )
