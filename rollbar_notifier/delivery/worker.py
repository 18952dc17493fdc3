"""Background delivery — runs the transport on a private event loop thread."""

from __future__ import annotations

import asyncio
import concurrent.futures
import threading

import structlog

from rollbar_notifier.delivery.transport import HttpTransport
from rollbar_notifier.delivery.types import DeliveryResult, PendingSend

logger = structlog.get_logger(__name__)

DeliveryFuture = concurrent.futures.Future[DeliveryResult]


class DeliveryWorker:
    """Schedules one independent delivery task per submitted payload.

    The event loop and its daemon thread start lazily on the first
    :meth:`submit`, so callers may be plain synchronous code or coroutines
    running on another loop. There is no queue and no ordering between
    deliveries; results are logged at debug level and dropped.

    Usage::

        worker = DeliveryWorker(HttpTransport(endpoint))
        worker.submit(payload_bytes)
        # ...
        worker.close(timeout=5.0)
    """

    def __init__(
        self,
        transport: HttpTransport,
        thread_name: str = "rollbar-notifier-delivery",
    ) -> None:
        self._transport = transport
        self._thread_name = thread_name
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()
        self._inflight: set[DeliveryFuture] = set()
        self._closed = False

    @property
    def transport(self) -> HttpTransport:
        return self._transport

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def inflight(self) -> int:
        with self._lock:
            return len(self._inflight)

    # ── Scheduling ──────────────────────────────────────────────

    def submit(self, payload: bytes, endpoint: str | None = None) -> PendingSend:
        """Schedule delivery of *payload* and return without waiting."""
        with self._lock:
            if self._closed:
                logger.debug("delivery_dropped", reason="worker_closed")
                return PendingSend(scheduled=False)
            loop = self._ensure_loop()
            future = asyncio.run_coroutine_threadsafe(
                self._deliver(payload, endpoint), loop
            )
            self._inflight.add(future)
        future.add_done_callback(self._on_done)
        return PendingSend()

    async def _deliver(self, payload: bytes, endpoint: str | None) -> DeliveryResult:
        result = await self._transport.deliver(payload, endpoint)
        if result.ok:
            logger.debug("delivery_done", status=result.status, size=len(payload))
        else:
            logger.debug(
                "delivery_failed",
                status=result.status,
                reason=result.reason,
                failed_in=result.failed_in,
            )
        return result

    def _on_done(self, future: DeliveryFuture) -> None:
        with self._lock:
            self._inflight.discard(future)
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.debug("delivery_error", error=f"{type(exc).__name__}: {exc}")

    # ── Loop management ─────────────────────────────────────────

    def _ensure_loop(self) -> asyncio.AbstractEventLoop:
        # Caller holds self._lock.
        if self._loop is None:
            self._loop = asyncio.new_event_loop()
            self._thread = threading.Thread(
                target=self._run_loop,
                args=(self._loop,),
                name=self._thread_name,
                daemon=True,
            )
            self._thread.start()
        return self._loop

    @staticmethod
    def _run_loop(loop: asyncio.AbstractEventLoop) -> None:
        asyncio.set_event_loop(loop)
        try:
            loop.run_forever()
        finally:
            pending = asyncio.all_tasks(loop)
            for task in pending:
                task.cancel()
            if pending:
                loop.run_until_complete(
                    asyncio.gather(*pending, return_exceptions=True)
                )
            loop.close()

    # ── Lifecycle ───────────────────────────────────────────────

    def flush(self, timeout: float | None = None) -> None:
        """Block until in-flight deliveries finish or *timeout* elapses.

        Says nothing about whether they succeeded.
        """
        with self._lock:
            pending = set(self._inflight)
        if pending:
            concurrent.futures.wait(pending, timeout=timeout)

    def close(self, timeout: float | None = 5.0) -> None:
        """Flush, release the HTTP session, and stop the loop thread."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            loop, thread = self._loop, self._thread

        self.flush(timeout)
        if loop is None or thread is None:
            return

        try:
            asyncio.run_coroutine_threadsafe(
                self._transport.close(), loop
            ).result(timeout)
        except Exception:
            logger.debug("transport_close_error", exc_info=True)

        loop.call_soon_threadsafe(loop.stop)
        thread.join(timeout)
