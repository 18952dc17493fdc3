"""Exception hierarchy for the notifier.

None of these escape the public send methods; they mark failures that the
facade and delivery worker catch and drop.
"""

from __future__ import annotations


class NotifierError(Exception):
    """Base exception for all notifier errors."""


class SerializationError(NotifierError):
    """A payload envelope could not be converted to JSON bytes."""


class TransportError(NotifierError):
    """The collection endpoint rejected or failed a delivery."""

    def __init__(self, reason: str, status: int | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.status = status
