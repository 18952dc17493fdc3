"""Delivery subsystem — HTTP transport and background scheduling."""

from rollbar_notifier.delivery.transport import HttpTransport
from rollbar_notifier.delivery.types import DeliveryResult, DeliveryState, PendingSend
from rollbar_notifier.delivery.worker import DeliveryWorker

__all__ = [
    "DeliveryResult",
    "DeliveryState",
    "DeliveryWorker",
    "HttpTransport",
    "PendingSend",
]
