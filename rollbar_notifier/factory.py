"""Convenience factory for wiring a notifier from settings."""

from __future__ import annotations

from rollbar_notifier.core.config import Settings
from rollbar_notifier.delivery.transport import HttpTransport
from rollbar_notifier.delivery.worker import DeliveryWorker
from rollbar_notifier.notice.builder import NoticeBuilder
from rollbar_notifier.notice.serializer import PayloadSerializer
from rollbar_notifier.notifier import Notifier


def create_notifier(settings: Settings) -> Notifier:
    """Build a notifier with its builder, serializer, transport and worker.

    The settings value is shared read-only by every component.
    """
    cfg = settings.notifier
    transport = HttpTransport(
        endpoint=cfg.endpoint,
        config=settings.transport,
        encoding=cfg.encoding,
    )
    return Notifier(
        config=cfg,
        builder=NoticeBuilder(cfg),
        serializer=PayloadSerializer(settings.serializer, encoding=cfg.encoding),
        worker=DeliveryWorker(transport),
    )
