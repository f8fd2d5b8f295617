import asyncio
import ssl
from typing import Any, Awaitable, Callable, Optional, TypeVar

import httpx
from tenacity import AsyncRetrying, retry_if_exception, stop_after_attempt, wait_exponential

from .exceptions import ErrorKind, HTTPStatusError, TransportError, TRANSIENT_KINDS
from .logging import jlog

T = TypeVar("T")

# Fallback for errors raised by code that does not speak our error types
TRANSIENT_MESSAGE_MARKERS = (
    ("fetch failed", ErrorKind.NETWORK),
    ("ssl", ErrorKind.TLS_HANDSHAKE),
    ("tls", ErrorKind.TLS_HANDSHAKE),
    ("econnreset", ErrorKind.CONNECTION_RESET),
    ("connection reset", ErrorKind.CONNECTION_RESET),
    ("network", ErrorKind.NETWORK),
)


def _chain(exc: BaseException):
    seen = set()
    cur: Optional[BaseException] = exc
    while cur is not None and id(cur) not in seen:
        seen.add(id(cur))
        yield cur
        cur = cur.__cause__ or cur.__context__

def kind_from_httpx(exc: httpx.TransportError) -> Optional[ErrorKind]:
    """Map an httpx transport failure onto an ErrorKind; None if it is not a network problem."""
    if isinstance(exc, httpx.TimeoutException):
        return ErrorKind.TIMEOUT
    if not isinstance(exc, (httpx.NetworkError, httpx.RemoteProtocolError, httpx.ProxyError)):
        return None
    for e in _chain(exc):
        if isinstance(e, ssl.SSLError):
            return ErrorKind.TLS_HANDSHAKE
        if isinstance(e, ConnectionResetError):
            return ErrorKind.CONNECTION_RESET
    return ErrorKind.NETWORK

def classify_error(exc: BaseException) -> Optional[ErrorKind]:
    if isinstance(exc, (TransportError, HTTPStatusError)):
        return exc.kind
    if isinstance(exc, httpx.TransportError):
        return kind_from_httpx(exc)
    message = str(exc).lower()
    for marker, kind in TRANSIENT_MESSAGE_MARKERS:
        if marker in message:
            return kind
    return None

def is_transient(exc: BaseException) -> bool:
    return classify_error(exc) in TRANSIENT_KINDS


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    max_retries: int = 3,
    initial_delay_ms: int = 1000,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    label: str = "request",
) -> T:
    """
    Run `operation` until it succeeds, retrying transient failures only.

    The wait before retry i (0-indexed) is initial_delay_ms * 2**i, without jitter.
    Non-transient errors and the last transient error are re-raised unchanged.
    """
    max_attempts = max(0, max_retries) + 1
    multiplier_s = max(0, initial_delay_ms) / 1000.0

    def _before_sleep_log(retry_state):
        sleep_s = getattr(getattr(retry_state, "next_action", None), "sleep", None)
        err = None
        if retry_state.outcome and retry_state.outcome.failed:
            err = str(retry_state.outcome.exception())
        jlog(
            event="retry",
            severity="WARNING",
            label=label,
            attempt=retry_state.attempt_number,
            max_attempts=max_attempts,
            wait_s=sleep_s,
            error=err,
        )

    async for attempt in AsyncRetrying(
        retry=retry_if_exception(is_transient),
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=multiplier_s, exp_base=2, min=0),
        sleep=sleep,
        reraise=True,
        before_sleep=_before_sleep_log,
    ):
        with attempt:
            return await operation()

    raise RuntimeError("retry loop exited without a result")  # pragma: no cover
