"""Reporting facade — build, serialize, and hand notices off for delivery."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from types import TracebackType
from typing import Any

import structlog

from rollbar_notifier.core.config import NotifierConfig
from rollbar_notifier.core.exceptions import SerializationError
from rollbar_notifier.delivery.types import PendingSend
from rollbar_notifier.delivery.worker import DeliveryWorker
from rollbar_notifier.notice.builder import NoticeBuilder
from rollbar_notifier.notice.serializer import PayloadSerializer
from rollbar_notifier.notice.types import Notice, PayloadEnvelope, Severity

logger = structlog.get_logger(__name__)

# Runs against the freshly built notice before it is serialized.
NoticeHook = Callable[[Notice], None]

CustomData = Mapping[str, Any]


class Notifier:
    """Entry point for application code.

    Every send method builds a notice, applies the optional hook, serializes
    it on the calling thread, and schedules delivery in the background. None
    of them raise: bad input degrades the notice, and serialization or
    delivery failures drop it after a log line.

    Usage::

        notifier = create_notifier(load_settings())
        try:
            ...
        except Exception as exc:
            notifier.send_error_exception(exc)
        notifier.send_warning_message("disk full", {"volume": "/data"})
        notifier.close()
    """

    def __init__(
        self,
        config: NotifierConfig,
        builder: NoticeBuilder,
        serializer: PayloadSerializer,
        worker: DeliveryWorker,
    ) -> None:
        self._config = config
        self._builder = builder
        self._serializer = serializer
        self._worker = worker

    @property
    def builder(self) -> NoticeBuilder:
        return self._builder

    # ── Primitives ──────────────────────────────────────────────

    def send_exception(
        self,
        error: BaseException | None,
        title: str | None = None,
        level: str = Severity.ERROR,
        hook: NoticeHook | None = None,
    ) -> PendingSend:
        """Send *error* with its traceback at the given *level*."""
        try:
            notice = self._builder.build_from_exception(error, title, level)
        except Exception:
            logger.exception("notice_build_error", kind="exception", level=str(level))
            return PendingSend(scheduled=False)
        return self._send_built(notice, hook)

    def send_message(
        self,
        message: str | None,
        level: str = Severity.INFO,
        custom_data: CustomData | None = None,
        hook: NoticeHook | None = None,
    ) -> PendingSend:
        """Send a text notice, attaching *custom_data* under ``custom``."""
        try:
            notice = self._builder.build_from_message(message, level, custom_data)
        except Exception:
            logger.exception("notice_build_error", kind="message", level=str(level))
            return PendingSend(scheduled=False)
        return self._send_built(notice, hook)

    def send(self, notice: Notice) -> PendingSend:
        """Wrap *notice* in an envelope, serialize it, and schedule delivery."""
        if not self._config.enabled:
            logger.debug("notice_dropped", reason="disabled", uuid=notice.uuid)
            return PendingSend(scheduled=False)

        envelope = PayloadEnvelope(
            access_token=self._config.access_token.get_secret_value(),
            data=notice,
        )
        try:
            payload = self._serializer.serialize(envelope)
        except SerializationError as exc:
            logger.warning(
                "notice_serialization_failed",
                uuid=notice.uuid,
                level=notice.level,
                error=str(exc),
            )
            return PendingSend(scheduled=False)

        return self._worker.submit(payload)

    def _send_built(self, notice: Notice, hook: NoticeHook | None) -> PendingSend:
        if hook is not None:
            try:
                hook(notice)
            except Exception:
                # The notice still goes out with whatever the hook changed.
                logger.exception("notice_hook_error", uuid=notice.uuid)
        return self.send(notice)

    # ── Exceptions by level ─────────────────────────────────────

    def send_critical_exception(
        self,
        error: BaseException | None,
        title: str | None = None,
        hook: NoticeHook | None = None,
    ) -> PendingSend:
        return self.send_exception(error, title, Severity.CRITICAL, hook)

    def send_error_exception(
        self,
        error: BaseException | None,
        title: str | None = None,
        hook: NoticeHook | None = None,
    ) -> PendingSend:
        return self.send_exception(error, title, Severity.ERROR, hook)

    def send_warning_exception(
        self,
        error: BaseException | None,
        title: str | None = None,
        hook: NoticeHook | None = None,
    ) -> PendingSend:
        return self.send_exception(error, title, Severity.WARNING, hook)

    def send_info_exception(
        self,
        error: BaseException | None,
        title: str | None = None,
        hook: NoticeHook | None = None,
    ) -> PendingSend:
        return self.send_exception(error, title, Severity.INFO, hook)

    def send_debug_exception(
        self,
        error: BaseException | None,
        title: str | None = None,
        hook: NoticeHook | None = None,
    ) -> PendingSend:
        return self.send_exception(error, title, Severity.DEBUG, hook)

    # ── Messages by level ───────────────────────────────────────

    def send_critical_message(
        self,
        message: str | None,
        custom_data: CustomData | None = None,
        hook: NoticeHook | None = None,
    ) -> PendingSend:
        return self.send_message(message, Severity.CRITICAL, custom_data, hook)

    def send_error_message(
        self,
        message: str | None,
        custom_data: CustomData | None = None,
        hook: NoticeHook | None = None,
    ) -> PendingSend:
        return self.send_message(message, Severity.ERROR, custom_data, hook)

    def send_warning_message(
        self,
        message: str | None,
        custom_data: CustomData | None = None,
        hook: NoticeHook | None = None,
    ) -> PendingSend:
        return self.send_message(message, Severity.WARNING, custom_data, hook)

    def send_info_message(
        self,
        message: str | None,
        custom_data: CustomData | None = None,
        hook: NoticeHook | None = None,
    ) -> PendingSend:
        return self.send_message(message, Severity.INFO, custom_data, hook)

    def send_debug_message(
        self,
        message: str | None,
        custom_data: CustomData | None = None,
        hook: NoticeHook | None = None,
    ) -> PendingSend:
        return self.send_message(message, Severity.DEBUG, custom_data, hook)

    # ── Lifecycle ───────────────────────────────────────────────

    def flush(self, timeout: float | None = None) -> None:
        """Wait for in-flight deliveries, e.g. before the process exits."""
        self._worker.flush(timeout)

    def close(self, timeout: float | None = 5.0) -> None:
        self._worker.close(timeout)

    def __enter__(self) -> Notifier:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
