"""HTTP transport — a single best-effort POST per notice."""

from __future__ import annotations

import asyncio
from types import SimpleNamespace
from typing import Any

import aiohttp

from rollbar_notifier.core.config import TransportConfig
from rollbar_notifier.core.exceptions import TransportError
from rollbar_notifier.delivery.types import DeliveryResult, DeliveryState


def _failed_in(exc: BaseException) -> DeliveryState:
    """Best guess at which in-flight state *exc* interrupted.

    Used only when the session carries no trace signals to report progress.
    """
    if isinstance(exc, aiohttp.ClientConnectorError):
        return DeliveryState.CONNECTING
    if isinstance(exc, (aiohttp.ServerDisconnectedError, aiohttp.ClientOSError)):
        return DeliveryState.SENDING
    if isinstance(exc, asyncio.TimeoutError):
        return DeliveryState.AWAITING_RESPONSE
    if isinstance(exc, OSError):
        return DeliveryState.CONNECTING
    return DeliveryState.AWAITING_RESPONSE


async def _on_connected(
    session: aiohttp.ClientSession, ctx: SimpleNamespace, params: Any
) -> None:
    _advance(ctx, DeliveryState.SENDING)


async def _on_body_sent(
    session: aiohttp.ClientSession, ctx: SimpleNamespace, params: Any
) -> None:
    # The payload is a single bytes object, written as one chunk.
    _advance(ctx, DeliveryState.AWAITING_RESPONSE)


def _advance(ctx: SimpleNamespace, state: DeliveryState) -> None:
    progress = getattr(ctx, "trace_request_ctx", None)
    if isinstance(progress, dict):
        progress["state"] = state


def _trace_config() -> aiohttp.TraceConfig:
    """Signals that move a request's progress through the delivery states."""
    trace = aiohttp.TraceConfig()
    trace.on_connection_create_end.append(_on_connected)
    trace.on_connection_reuseconn.append(_on_connected)
    trace.on_request_chunk_sent.append(_on_body_sent)
    return trace


class HttpTransport:
    """Posts serialized payloads to the collection endpoint.

    :meth:`deliver` never raises and never retries; every failure comes back
    as a ``FAILED`` :class:`DeliveryResult` whose ``failed_in`` names the
    state the request had reached.
    """

    def __init__(
        self,
        endpoint: str,
        config: TransportConfig | None = None,
        encoding: str = "utf-8",
    ) -> None:
        self._endpoint = endpoint
        self._config = config or TransportConfig()
        self._encoding = encoding
        self._session: aiohttp.ClientSession | None = None

    @property
    def endpoint(self) -> str:
        return self._endpoint

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._config.timeout_secs),
                trace_configs=[_trace_config()],
            )
        return self._session

    def _traced(self) -> bool:
        # Only sessions built by _get_session carry the trace signals.
        return isinstance(self._session, aiohttp.ClientSession)

    async def deliver(self, payload: bytes, endpoint: str | None = None) -> DeliveryResult:
        url = endpoint or self._endpoint
        headers = {"Content-Type": f"application/json; charset={self._encoding}"}
        progress: dict[str, DeliveryState] = {"state": DeliveryState.CONNECTING}

        try:
            session = self._get_session()
            async with session.post(
                url, data=payload, headers=headers, trace_request_ctx=progress
            ) as resp:
                progress["state"] = DeliveryState.AWAITING_RESPONSE
                body = await resp.text()
                if not 200 <= resp.status < 300:
                    raise TransportError(
                        f"HTTP {resp.status}: {body[:200]}", status=resp.status
                    )
                return DeliveryResult(state=DeliveryState.DONE, status=resp.status)
        except TransportError as exc:
            return DeliveryResult(
                state=DeliveryState.FAILED,
                status=exc.status,
                reason=exc.reason,
                failed_in=DeliveryState.AWAITING_RESPONSE,
            )
        except Exception as exc:
            state = progress["state"]
            if state == DeliveryState.CONNECTING and not self._traced():
                state = _failed_in(exc)
            return DeliveryResult(
                state=DeliveryState.FAILED,
                reason=f"{type(exc).__name__}: {exc}",
                failed_in=state,
            )

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None
