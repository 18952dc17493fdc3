"""Delivery state machine, per-attempt result, and the handle given to callers."""

from __future__ import annotations

from collections.abc import Generator
from enum import StrEnum
from typing import Any

from pydantic import BaseModel


class DeliveryState(StrEnum):
    """Lifecycle of one delivery attempt.

    ``SCHEDULED → CONNECTING → SENDING → AWAITING_RESPONSE → DONE``, with
    ``FAILED`` reachable from the three in-flight states.
    """

    SCHEDULED = "scheduled"
    CONNECTING = "connecting"
    SENDING = "sending"
    AWAITING_RESPONSE = "awaiting_response"
    DONE = "done"
    FAILED = "failed"


class DeliveryResult(BaseModel):
    """Outcome of one attempt. Stays inside the delivery package."""

    state: DeliveryState
    status: int | None = None
    reason: str | None = None
    # State the attempt was in when it failed.
    failed_in: DeliveryState | None = None

    @property
    def ok(self) -> bool:
        return self.state == DeliveryState.DONE


class PendingSend:
    """Returned by every send call: "delivery has been scheduled".

    Carries no success or failure information. Awaiting it resolves at once,
    since scheduling already happened before the handle was returned.
    """

    __slots__ = ("_scheduled",)

    def __init__(self, scheduled: bool = True) -> None:
        self._scheduled = scheduled

    @property
    def scheduled(self) -> bool:
        return self._scheduled

    def __await__(self) -> Generator[Any, None, None]:
        yield from ()

    def __repr__(self) -> str:
        return f"PendingSend(scheduled={self._scheduled})"
